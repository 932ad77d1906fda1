"""Domain layer: content entities, kinds and the reconciling importer."""
