"""Exception hierarchy raised by the content synchronisation domain."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from contentsync.domain.model import ContentEntity


class ContentSyncError(Exception):
    """Base class for all content synchronisation errors."""


class UnknownEntityKindError(ContentSyncError, LookupError):
    """Raised when an entity kind name is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown entity kind: {name!r}")
        self.name = name


class DenormalizationError(ContentSyncError, ValueError):
    """Raised when a decoded record cannot be turned into an entity."""


class TranslationError(ContentSyncError):
    """Raised for invalid translation operations on an entity."""


class EntityStorageError(ContentSyncError):
    """Raised when the entity store rejects a write."""


class StaleEntityError(EntityStorageError):
    """Raised when an entity was changed in storage after it was loaded."""


class TranslationMergeError(ContentSyncError):
    """Raised after a translation pass in which one or more languages failed.

    The primary entity is already persisted when this is raised; ``entity`` gives
    callers access to it and ``failures`` maps each failed language code to the
    underlying error.
    """

    def __init__(self, entity: ContentEntity, failures: Mapping[str, ContentSyncError]) -> None:
        languages = ", ".join(sorted(failures))
        super().__init__(
            f"Failed to merge translations ({languages}) of {entity.kind.name} {entity.uuid}"
        )
        self.entity = entity
        self.failures = dict(failures)
