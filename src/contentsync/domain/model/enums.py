"""Domain enums and constants (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class EntityKey(StrEnum):
    """Roles of the identity fields an entity kind may declare."""

    ID = "id"
    UUID = "uuid"
    REVISION = "revision"
    BUNDLE = "bundle"
    LANGCODE = "langcode"


ANONYMOUS_USER_ID: Final[int] = 0
DEFAULT_LANGCODE: Final[str] = "en"
LANGCODE_NOT_SPECIFIED: Final[str] = "und"
