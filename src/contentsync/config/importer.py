"""Importer configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Final

from .env import env_flag, env_list

DEFAULT_FORMAT: Final[str] = "yaml"


@dataclass(frozen=True, slots=True)
class ImporterConfig:
    """Process-wide defaults for the content importer.

    ``update_entities`` switches between updating matched entities and the read-only
    mode that hands back stored entities untouched. ``entity_type`` and
    ``skipped_constraints`` seed the default import context.
    """

    update_entities: bool = True
    entity_type: str | None = None
    skipped_constraints: frozenset[str] = field(default_factory=frozenset[str])
    format: str = DEFAULT_FORMAT


def get_importer_config() -> ImporterConfig:
    entity_type = os.getenv("CONTENTSYNC_ENTITY_TYPE")
    return ImporterConfig(
        update_entities=env_flag("CONTENTSYNC_UPDATE_ENTITIES", default=True),
        entity_type=entity_type.strip() if entity_type and entity_type.strip() else None,
        skipped_constraints=frozenset(env_list("CONTENTSYNC_SKIPPED_CONSTRAINTS")),
    )
