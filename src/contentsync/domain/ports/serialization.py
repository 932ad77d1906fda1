"""Ports for turning decoded records into entities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from contentsync.domain.model import ContentEntity


@runtime_checkable
class Denormalizer(Protocol):
    """Build a typed entity from a decoded record."""

    def denormalize(
        self,
        decoded: Mapping[str, Any],
        entity_cls: type[ContentEntity],
        format: str,  # noqa: A002
        context: Mapping[str, object] | None = None,
    ) -> ContentEntity: ...
