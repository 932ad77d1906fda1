"""Initial content entity schema.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00

"""

from __future__ import annotations

from typing import TYPE_CHECKING

import sqlalchemy as sa
from alembic import op

from contentsync.adapters.sqlalchemy.tables import JSONDocument, UTCDateTime

if TYPE_CHECKING:
    from collections.abc import Sequence

revision: str = "0001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "content_entity",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("entity_type", sa.String(length=64), nullable=False),
        sa.Column("uuid", sa.String(length=128), nullable=False),
        sa.Column("bundle", sa.String(length=128), nullable=True),
        sa.Column("langcode", sa.String(length=12), nullable=False),
        sa.Column("revision_id", sa.Integer(), nullable=True),
        sa.Column("changed", UTCDateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_content_entity")),
    )
    op.create_index(
        "ix_content_entity_entity_type_uuid",
        "content_entity",
        ["entity_type", "uuid"],
        unique=False,
    )
    op.create_table(
        "content_entity_data",
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("langcode", sa.String(length=12), nullable=False),
        sa.Column("default_langcode", sa.Boolean(), nullable=False),
        sa.Column("fields", JSONDocument(), nullable=False),
        sa.ForeignKeyConstraint(
            ["entity_id"],
            ["content_entity.id"],
            name=op.f("fk_content_entity_data_entity_id_content_entity"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("entity_id", "langcode", name=op.f("pk_content_entity_data")),
    )
    op.create_table(
        "content_entity_revision",
        sa.Column("revision_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("translations", JSONDocument(), nullable=False),
        sa.Column("created", UTCDateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["entity_id"],
            ["content_entity.id"],
            name=op.f("fk_content_entity_revision_entity_id_content_entity"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("revision_id", name=op.f("pk_content_entity_revision")),
    )
    op.create_index(
        op.f("ix_content_entity_revision_entity_id"),
        "content_entity_revision",
        ["entity_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(
        op.f("ix_content_entity_revision_entity_id"), table_name="content_entity_revision"
    )
    op.drop_table("content_entity_revision")
    op.drop_table("content_entity_data")
    op.drop_index("ix_content_entity_entity_type_uuid", table_name="content_entity")
    op.drop_table("content_entity")
