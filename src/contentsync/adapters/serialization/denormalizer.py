"""Turn decoded records into content entities of a registered kind."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import ValidationError

from contentsync.adapters.serialization.schema import RecordEnvelope
from contentsync.config.importer import DEFAULT_FORMAT
from contentsync.domain.errors import DenormalizationError
from contentsync.domain.model import EntityKey

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping

    from contentsync.domain.model import ContentEntity, EntityKind, EntityKindRegistry

log = logging.getLogger(__name__)


class RecordDenormalizer:
    """Build entities from decoded mappings.

    Keys starting with an underscore are reserved blocks and never become field
    values. Keys the kind does not define are dropped with a one-time warning per
    kind and key.
    """

    _logged_unknown_keys: ClassVar[set[tuple[str, str]]] = set()

    def __init__(
        self,
        registry: EntityKindRegistry,
        *,
        formats: Collection[str] = (DEFAULT_FORMAT,),
    ) -> None:
        self._registry = registry
        self._formats = frozenset(formats)

    def supports(self, format: str) -> bool:  # noqa: A002
        return format in self._formats

    def denormalize(
        self,
        decoded: Mapping[str, Any],
        entity_cls: type[ContentEntity],
        format: str,  # noqa: A002
        context: Mapping[str, object] | None = None,
    ) -> ContentEntity:
        if not self.supports(format):
            raise DenormalizationError(f"Unsupported format: {format!r}")
        try:
            envelope = RecordEnvelope.model_validate(dict(decoded))
        except ValidationError as exc:
            raise DenormalizationError(f"Malformed record: {exc}") from exc

        kind = self._resolve_kind(entity_cls, envelope, context or {})
        values: dict[str, object] = {}
        for name, value in decoded.items():
            if not isinstance(name, str) or name.startswith("_"):
                continue
            if not kind.has_field(name):
                self._log_unknown_key(kind, name)
                continue
            values[name] = value

        uuid_field = kind.get_key(EntityKey.UUID)
        metadata = envelope.content_sync
        if uuid_field is not None and uuid_field not in values and metadata and metadata.uuid:
            values[uuid_field] = metadata.uuid

        try:
            return kind.entity_class(
                kind=kind,
                values=values,
                submitted_fields=frozenset(values),
            )
        except (TypeError, ValueError) as exc:
            raise DenormalizationError(f"Cannot build {kind.name} entity: {exc}") from exc

    def _resolve_kind(
        self,
        entity_cls: type[ContentEntity],
        envelope: RecordEnvelope,
        context: Mapping[str, object],
    ) -> EntityKind:
        requested = context.get("entity_type")
        name = (
            requested
            if isinstance(requested, str) and requested
            else envelope.entity_type or entity_cls.ENTITY_TYPE_ID
        )
        if not name:
            raise DenormalizationError("Record does not name an entity type")
        kind = self._registry.get_definition(name)
        if not issubclass(kind.entity_class, entity_cls):
            raise DenormalizationError(
                f"{name} entities are {kind.entity_class.__name__}, not {entity_cls.__name__}"
            )
        return kind

    def _log_unknown_key(self, kind: EntityKind, name: str) -> None:
        key = (kind.name, name)
        if key in self._logged_unknown_keys:
            return
        self._logged_unknown_keys.add(key)
        log.warning("%s records: ignoring unknown field %s", kind.name, name)
