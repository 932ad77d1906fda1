"""SQLAlchemy table metadata for stored content entities."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
)

from contentsync.domain.model.fields import json_default

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class JSONDocument(TypeDecorator[dict[str, Any]]):
    """A JSON object stored as text with stable key order."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: dict[str, Any] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(value, sort_keys=True, default=json_default)

    def process_result_value(self, value: str | None, dialect: Dialect) -> dict[str, Any]:
        _ = dialect
        if value is None:
            return {}
        loaded = json.loads(value)
        if not isinstance(loaded, dict):
            return {}
        return cast(dict[str, Any], loaded)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

# uuid is indexed but not unique: duplicates from earlier imports must stay loadable.
content_entity_table = Table(
    "content_entity",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("entity_type", String(64), nullable=False),
    Column("uuid", String(128), nullable=False),
    Column("bundle", String(128), nullable=True),
    Column("langcode", String(12), nullable=False),
    Column("revision_id", Integer, nullable=True),
    Column("changed", UTCDateTime(), nullable=True),
    Index("ix_content_entity_entity_type_uuid", "entity_type", "uuid"),
)

content_entity_data_table = Table(
    "content_entity_data",
    metadata,
    Column(
        "entity_id",
        Integer,
        ForeignKey("content_entity.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("langcode", String(12), primary_key=True),
    Column("default_langcode", Boolean, nullable=False, default=False),
    Column("fields", JSONDocument(), nullable=False),
)

content_entity_revision_table = Table(
    "content_entity_revision",
    metadata,
    Column("revision_id", Integer, primary_key=True, autoincrement=True),
    Column(
        "entity_id",
        Integer,
        ForeignKey("content_entity.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("translations", JSONDocument(), nullable=False),
    Column("created", UTCDateTime(), nullable=False),
)


def create_all_tables(engine: Engine) -> None:
    metadata.create_all(engine)
