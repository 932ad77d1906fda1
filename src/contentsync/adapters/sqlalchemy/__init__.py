"""SQLAlchemy persistence for content entities."""

from __future__ import annotations

from contentsync.adapters.sqlalchemy.store import SqlAlchemyEntityStore
from contentsync.adapters.sqlalchemy.tables import (
    content_entity_data_table,
    content_entity_revision_table,
    content_entity_table,
    create_all_tables,
    metadata,
)

__all__ = [
    "SqlAlchemyEntityStore",
    "content_entity_data_table",
    "content_entity_revision_table",
    "content_entity_table",
    "create_all_tables",
    "metadata",
]
