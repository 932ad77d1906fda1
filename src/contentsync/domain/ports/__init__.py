"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import EntityStore
from .serialization import Denormalizer
from .unit_of_work import (
    ContentRepositories,
    ContentUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ContentRepositories",
    "ContentUnitOfWork",
    "Denormalizer",
    "EntityStore",
    "RepositoryCollection",
    "UnitOfWork",
]
