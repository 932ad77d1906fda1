"""Ports for loading and persisting content entities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from contentsync.domain.model import ContentEntity


@runtime_checkable
class EntityStore(Protocol):
    """Persistence contract for content entities of every registered kind."""

    def load(self, kind_name: str, entity_id: int) -> ContentEntity | None: ...

    def load_by_external_id(self, kind_name: str, uuid: str) -> list[ContentEntity]:
        """Return every stored entity of ``kind_name`` with ``uuid``, lowest id first."""
        ...

    def find_ids_by_field_value(
        self, kind_name: str, field_name: str, value: object
    ) -> list[int]: ...

    def save(self, entity: ContentEntity) -> None: ...
