"""Entity-level content synchronisation.

The importer sits between a deserializer and an entity store. For every decoded
record it:

- resolves the entity kind and applies kind-specific input fixes
- matches the record against the stored entity sharing its uuid
- merges the submitted fields into the stored entity under identity-safety rules
  (or creates a duplicate stamped with the incoming uuid)
- encodes serialized field properties into their stored form
- validates account kinds and persists the result
- merges bundled translations into the persisted entity
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Final

from contentsync.config.importer import ImporterConfig
from contentsync.domain.context import ImportContext
from contentsync.domain.errors import (
    ContentSyncError,
    DenormalizationError,
    EntityStorageError,
    TranslationError,
    TranslationMergeError,
)
from contentsync.domain.model import (
    ANONYMOUS_USER_ID,
    EntityKey,
    encode_serialized_properties,
)

if TYPE_CHECKING:
    from contentsync.domain.model import ContentEntity, EntityKind, EntityKindRegistry
    from contentsync.domain.ports import Denormalizer, EntityStore

log = logging.getLogger(__name__)

SYNC_METADATA_KEY: Final[str] = "_content_sync"
TRANSLATIONS_KEY: Final[str] = "_translations"
TAXONOMY_TERM_KIND: Final[str] = "taxonomy_term"
USER_KIND: Final[str] = "user"
ROOT_PARENT: Final[Mapping[str, int]] = {"target_id": 0}


class ContentImporter:
    """Reconcile decoded records with stored content entities."""

    def __init__(
        self,
        *,
        denormalizer: Denormalizer,
        registry: EntityKindRegistry,
        store: EntityStore,
        config: ImporterConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        effective_config = config or ImporterConfig()
        self._denormalizer = denormalizer
        self._registry = registry
        self._store = store
        self._format = effective_config.format
        self._context = ImportContext(
            entity_type=effective_config.entity_type,
            skipped_constraints=effective_config.skipped_constraints,
        )
        self._log = logger or log
        self.update_entities = effective_config.update_entities

    @property
    def format(self) -> str:
        return self._format

    def get_format(self) -> str:
        return self._format

    def get_context(self) -> ImportContext:
        return self._context

    def set_context(self, context: ImportContext | Mapping[str, object]) -> None:
        """Replace the default context layered under every call's own context."""

        self._context = (
            context if isinstance(context, ImportContext) else ImportContext.from_mapping(context)
        )

    # Dispatch -------------------------------------------------------------------

    def resolve_entity_type(
        self,
        decoded: Mapping[str, Any],
        context: ImportContext | Mapping[str, object] | None = None,
    ) -> str | None:
        """Return the kind name for ``decoded``; the context wins over embedded metadata."""

        effective = self._context.layered(context)
        if effective.entity_type:
            return effective.entity_type
        metadata = decoded.get(SYNC_METADATA_KEY)
        if isinstance(metadata, Mapping):
            entity_type = metadata.get("entity_type")
            if isinstance(entity_type, str) and entity_type:
                return entity_type
        return None

    def import_entity(
        self,
        decoded: Mapping[str, Any],
        context: ImportContext | Mapping[str, object] | None = None,
    ) -> ContentEntity | None:
        """Import one decoded record.

        Returns the persisted (or untouched stored) entity, or ``None`` when the
        record names no entity kind or a new entity fails validation.
        """

        entity_type_id = self.resolve_entity_type(decoded, context)
        if entity_type_id is None:
            self._log.debug("Skipping record without entity type")
            return None
        kind = self._registry.get_definition(entity_type_id)
        call_context = self._context.layered(context).with_entity_type(entity_type_id)

        record = dict(decoded)
        # Terms without a parent hang off the vocabulary root so they stay listed.
        if entity_type_id == TAXONOMY_TERM_KIND and not record.get("parent"):
            record["parent"] = dict(ROOT_PARENT)

        translations = record.pop(TRANSLATIONS_KEY, None)
        if translations is not None and not isinstance(translations, Mapping):
            self._log.warning(
                "Ignoring %s of %s record: expected a mapping of language codes, got %s",
                TRANSLATIONS_KEY,
                entity_type_id,
                type(translations).__name__,
            )
            translations = None

        entity = self._denormalizer.denormalize(
            record, kind.entity_class, self._format, call_context.as_mapping()
        )

        if entity_type_id == USER_KIND and not entity.is_new() and _is_anonymous(entity.id):
            return entity

        synced, written = self._sync(entity, call_context)
        # Read-only runs leave matched entities and their translations alone.
        if synced is not None and translations and (written or self.update_entities):
            self.update_translations(synced, kind, translations, call_context)
        return synced

    # Match / merge --------------------------------------------------------------

    def prepare_entity(self, entity: ContentEntity) -> ContentEntity:
        """Match ``entity`` against storage by uuid and return the entity to persist."""

        kind = entity.kind
        uuid = entity.uuid
        matches = self._store.load_by_external_id(kind.name, uuid) if uuid else []

        if matches:
            original = self._pick_match(kind, uuid, matches)
            if not self.update_entities:
                return original
            if entity.submitted_fields:
                for field_name in sorted(entity.submitted_fields):
                    if self.is_valid_entity_field(original, entity, field_name):
                        original.set(field_name, entity.get(field_name))
            return self.process_serialized_fields(original)

        duplicate = entity.create_duplicate()
        uuid_field = kind.get_key(EntityKey.UUID)
        if uuid_field is not None:
            duplicate.set(uuid_field, uuid)
        return self.process_serialized_fields(duplicate)

    def is_valid_entity_field(
        self, original: ContentEntity, entity: ContentEntity, field_name: str
    ) -> bool:
        """Return whether ``field_name`` of ``entity`` may be written onto ``original``.

        Identity fields together define which entity, revision and language a record
        is. They are never changed by a merge; writes that would change them are
        ignored rather than reported.
        """

        if not entity.has_field(field_name) or not original.has_field(field_name):
            return False
        kind = entity.kind
        if field_name not in kind.key_fields:
            return True

        if field_name == kind.get_key(EntityKey.ID):
            return False
        if kind.revisionable and field_name == kind.get_key(EntityKey.REVISION):
            return False
        langcode_field = kind.get_key(EntityKey.LANGCODE)
        # The language is re-initialised when emptied, so it cannot be forced to null.
        if field_name == langcode_field and entity.is_empty(field_name):
            return False
        if original.get(field_name) == entity.get(field_name):
            return True
        return field_name == langcode_field and original.is_empty(field_name)

    def _pick_match(
        self, kind: EntityKind, uuid: str | None, matches: list[ContentEntity]
    ) -> ContentEntity:
        ordered = sorted(matches, key=lambda match: (match.id is None, match.id or 0))
        chosen = ordered[0]
        if len(ordered) > 1:
            self._log.warning(
                "Ambiguous match: %d %s entities share uuid %s, using id %s",
                len(ordered),
                kind.name,
                uuid,
                chosen.id,
            )
        return chosen

    # Serialized fields ----------------------------------------------------------

    def process_serialized_fields(self, entity: ContentEntity) -> ContentEntity:
        """Encode field properties that are stored serialized."""

        for definition in entity.kind.fields.values():
            if not definition.serialized_properties:
                continue
            items = entity.get(definition.name)
            if not items:
                continue
            try:
                encoded = [
                    encode_serialized_properties(item, definition.serialized_properties)
                    for item in items
                ]
            except TypeError as exc:
                raise DenormalizationError(
                    f"Cannot encode {definition.name} of {entity.kind.name} {entity.uuid}: {exc}"
                ) from exc
            entity.set(definition.name, encoded)
        return entity

    # Validate / persist ---------------------------------------------------------

    def validate_entity(
        self,
        entity: ContentEntity,
        context: ImportContext | Mapping[str, object] | None = None,
    ) -> bool:
        kind = entity.kind
        if not kind.requires_identity_validation:
            return True
        skipped = self._context.layered(context).skipped_constraints
        valid = True
        for violation in entity.validate(self._store):
            if violation.constraint in skipped:
                continue
            valid = False
            self._log.error("%s %s: %s", kind.name, entity.uuid, violation.message)
        return valid

    def sync_entity(
        self,
        entity: ContentEntity,
        context: ImportContext | Mapping[str, object] | None = None,
    ) -> ContentEntity | None:
        """Prepare, validate and persist ``entity``.

        Returns the saved entity; the stored entity unchanged when validation fails
        for an existing entity or updates are disabled; ``None`` when a new entity
        fails validation.
        """

        return self._sync(entity, context)[0]

    def _sync(
        self,
        entity: ContentEntity,
        context: ImportContext | Mapping[str, object] | None,
    ) -> tuple[ContentEntity | None, bool]:
        prepared = self.prepare_entity(entity)
        if not self.update_entities and not prepared.is_new():
            return prepared, False
        if self.validate_entity(prepared, context):
            self._store.save(prepared)
            return prepared, True
        if not prepared.is_new():
            return self._store.load(prepared.kind.name, prepared.id) or prepared, False
        return None, False

    # Translations ---------------------------------------------------------------

    def update_translations(
        self,
        entity: ContentEntity,
        kind: EntityKind,
        translations: Mapping[str, Any],
        context: ImportContext | Mapping[str, object] | None = None,
    ) -> None:
        """Create or update each bundled translation of ``entity``.

        Every language is attempted; when any of them fails a
        :class:`TranslationMergeError` listing the failures is raised at the end.
        """

        effective = self._context.layered(context).with_entity_type(kind.name)
        failures: dict[str, ContentSyncError] = {}
        for langcode, decoded_translation in translations.items():
            try:
                self._merge_translation(entity, kind, str(langcode), decoded_translation, effective)
            except (DenormalizationError, TranslationError, EntityStorageError) as exc:
                self._log.exception(
                    "Failed to merge %s translation of %s %s", langcode, kind.name, entity.uuid
                )
                failures[str(langcode)] = exc
        if failures:
            raise TranslationMergeError(entity, failures)

    def _merge_translation(
        self,
        entity: ContentEntity,
        kind: EntityKind,
        langcode: str,
        decoded_translation: object,
        context: ImportContext,
    ) -> None:
        if not isinstance(decoded_translation, Mapping):
            raise DenormalizationError(f"{langcode} translation is not a mapping")
        translation = self._denormalizer.denormalize(
            decoded_translation, kind.entity_class, self._format, context.as_mapping()
        )
        added = not entity.has_translation(langcode)
        target = entity.add_translation(langcode) if added else entity.get_translation(langcode)
        previous = target.to_field_values()

        langcode_field = kind.get_key(EntityKey.LANGCODE)
        changed: list[str] = []
        try:
            for field_name in _present_fields(translation):
                if field_name == langcode_field or not target.has_field(field_name):
                    continue
                if kind.field(field_name).translatable:
                    target.set(field_name, translation.get(field_name))
                    changed.append(field_name)

            if kind.revisionable:
                target.update_loaded_revision_id()
                target.set_new_revision(False)

            self._store.save(target)
        except EntityStorageError:
            # a failed language must not ride along with the next save of the entity
            if added:
                entity.remove_translation(langcode)
            else:
                for field_name in changed:
                    target.set(field_name, previous.get(field_name, []))
            raise


def _present_fields(entity: ContentEntity) -> tuple[str, ...]:
    if entity.submitted_fields is not None:
        return tuple(name for name in entity.field_names() if name in entity.submitted_fields)
    return tuple(name for name in entity.field_names() if not entity.is_empty(name))


def _is_anonymous(entity_id: object) -> bool:
    try:
        return int(str(entity_id)) == ANONYMOUS_USER_ID
    except ValueError:
        return False
