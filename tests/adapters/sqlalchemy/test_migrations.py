from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import inspect

from contentsync.adapters.sqlalchemy.migrations import upgrade_head

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


def test_upgrade_head_creates_schema(sqlite_engine: Engine) -> None:
    table_names = set(inspect(sqlite_engine).get_table_names())

    assert {
        "alembic_version",
        "content_entity",
        "content_entity_data",
        "content_entity_revision",
    } <= table_names


def test_upgrade_head_is_idempotent(sqlite_engine: Engine) -> None:
    upgrade_head(engine=sqlite_engine)

    indexes = {index["name"] for index in inspect(sqlite_engine).get_indexes("content_entity")}
    assert "ix_content_entity_entity_type_uuid" in indexes
