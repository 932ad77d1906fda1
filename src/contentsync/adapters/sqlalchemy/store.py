"""Entity store backed by SQLAlchemy sessions."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from contentsync.adapters.sqlalchemy.tables import (
    content_entity_data_table,
    content_entity_revision_table,
    content_entity_table,
)
from contentsync.domain.errors import EntityStorageError, StaleEntityError
from contentsync.domain.model import LANGCODE_NOT_SPECIFIED, EntityKey

if TYPE_CHECKING:
    from sqlalchemy import Row
    from sqlalchemy.orm import Session

    from contentsync.domain.model import ContentEntity, EntityKindRegistry

log = logging.getLogger(__name__)


class SqlAlchemyEntityStore:
    """Persist content entities of every registered kind in three tables.

    ``content_entity`` holds identity columns, ``content_entity_data`` one row of
    field values per language, and ``content_entity_revision`` a snapshot of all
    languages per revision of revisionable kinds. Loaded entities are detached
    copies; nothing is cached between calls.
    """

    def __init__(self, session: Session, registry: EntityKindRegistry) -> None:
        self.session = session
        self._registry = registry

    def load(self, kind_name: str, entity_id: int) -> ContentEntity | None:
        stmt = (
            select(content_entity_table)
            .where(content_entity_table.c.entity_type == kind_name)
            .where(content_entity_table.c.id == entity_id)
        )
        row = self.session.execute(stmt).one_or_none()
        return None if row is None else self._hydrate(row)

    def load_by_external_id(self, kind_name: str, uuid: str) -> list[ContentEntity]:
        stmt = (
            select(content_entity_table)
            .where(content_entity_table.c.entity_type == kind_name)
            .where(content_entity_table.c.uuid == uuid)
            .order_by(content_entity_table.c.id)
        )
        return [self._hydrate(row) for row in self.session.execute(stmt).all()]

    def find_ids_by_field_value(self, kind_name: str, field_name: str, value: object) -> list[int]:
        main_property = self._registry.get_definition(kind_name).field(field_name).main_property
        stmt = (
            select(content_entity_data_table.c.entity_id, content_entity_data_table.c.fields)
            .join(
                content_entity_table,
                content_entity_table.c.id == content_entity_data_table.c.entity_id,
            )
            .where(content_entity_table.c.entity_type == kind_name)
            .where(content_entity_data_table.c.default_langcode.is_(True))
            .order_by(content_entity_data_table.c.entity_id)
        )
        ids: list[int] = []
        for entity_id, fields in self.session.execute(stmt).all():
            items = fields.get(field_name) or []
            if any(item.get(main_property) == value for item in items):
                ids.append(entity_id)
        return ids

    def count_revisions(self, entity_id: int) -> int:
        stmt = (
            select(func.count())
            .select_from(content_entity_revision_table)
            .where(content_entity_revision_table.c.entity_id == entity_id)
        )
        return int(self.session.execute(stmt).scalar_one())

    def save(self, entity: ContentEntity) -> None:
        """Persist ``entity`` with all of its translations."""

        root = entity.untranslated()
        kind = root.kind
        try:
            if root.is_new():
                self._insert(root)
            else:
                self._update(root)
        except SQLAlchemyError as exc:
            raise EntityStorageError(f"Failed to save {kind.name} {root.uuid}: {exc}") from exc
        root.update_loaded_revision_id()
        if kind.revisionable:
            root.set_new_revision(kind.new_revision_default)
        log.debug("Saved %s %s (id=%s)", kind.name, root.uuid, root.id)

    def _insert(self, root: ContentEntity) -> None:
        now = datetime.now(UTC)
        result = self.session.execute(
            insert(content_entity_table).values(
                entity_type=root.kind.name,
                uuid=root.uuid,
                bundle=root.bundle,
                langcode=root.langcode or LANGCODE_NOT_SPECIFIED,
                changed=now,
            )
        )
        entity_id = result.inserted_primary_key[0]
        id_field = root.kind.get_key(EntityKey.ID)
        if id_field is not None:
            root.set(id_field, entity_id)
        if root.kind.revisionable:
            self._create_revision(root, entity_id, now)
        self._write_language_rows(root, entity_id)

    def _update(self, root: ContentEntity) -> None:
        kind = root.kind
        stmt = select(content_entity_table.c.revision_id).where(
            content_entity_table.c.id == root.id
        )
        row = self.session.execute(stmt).one_or_none()
        if row is None:
            raise EntityStorageError(f"{kind.name} {root.id} does not exist")
        if (
            kind.revisionable
            and root.loaded_revision_id is not None
            and row.revision_id != root.loaded_revision_id
        ):
            raise StaleEntityError(
                f"{kind.name} {root.id} was changed after revision {root.loaded_revision_id}"
            )

        now = datetime.now(UTC)
        if kind.revisionable and root.is_new_revision():
            self._create_revision(root, root.id, now)
        self.session.execute(
            update(content_entity_table)
            .where(content_entity_table.c.id == root.id)
            .values(
                bundle=root.bundle,
                langcode=root.langcode or LANGCODE_NOT_SPECIFIED,
                changed=now,
            )
        )
        self.session.execute(
            delete(content_entity_data_table).where(
                content_entity_data_table.c.entity_id == root.id
            )
        )
        self._write_language_rows(root, root.id)

    def _create_revision(self, root: ContentEntity, entity_id: int, now: datetime) -> None:
        snapshot = {
            langcode: root.get_translation(langcode).to_field_values()
            for langcode in root.translation_languages()
        }
        result = self.session.execute(
            insert(content_entity_revision_table).values(
                entity_id=entity_id,
                translations=snapshot,
                created=now,
            )
        )
        revision_id = result.inserted_primary_key[0]
        revision_field = root.kind.get_key(EntityKey.REVISION)
        if revision_field is not None:
            root.set(revision_field, revision_id)
        self.session.execute(
            update(content_entity_table)
            .where(content_entity_table.c.id == entity_id)
            .values(revision_id=revision_id)
        )

    def _write_language_rows(self, root: ContentEntity, entity_id: int) -> None:
        rows: list[dict[str, Any]] = [
            {
                "entity_id": entity_id,
                "langcode": root.langcode or LANGCODE_NOT_SPECIFIED,
                "default_langcode": True,
                "fields": root.to_field_values(),
            }
        ]
        for langcode in root.translation_languages()[1:]:
            rows.append(
                {
                    "entity_id": entity_id,
                    "langcode": langcode,
                    "default_langcode": False,
                    "fields": root.get_translation(langcode).to_field_values(),
                }
            )
        self.session.execute(insert(content_entity_data_table), rows)

    def _hydrate(self, row: Row[Any]) -> ContentEntity:
        kind = self._registry.get_definition(row.entity_type)
        stmt = select(content_entity_data_table).where(
            content_entity_data_table.c.entity_id == row.id
        )
        default_values: dict[str, Any] = {}
        translations: dict[str, dict[str, Any]] = {}
        for data_row in self.session.execute(stmt).all():
            known = {name: value for name, value in data_row.fields.items() if kind.has_field(name)}
            if data_row.default_langcode:
                default_values = known
            else:
                translations[data_row.langcode] = known

        id_field = kind.get_key(EntityKey.ID)
        if id_field is not None:
            default_values[id_field] = row.id
        revision_field = kind.get_key(EntityKey.REVISION)
        if revision_field is not None and row.revision_id is not None:
            default_values[revision_field] = row.revision_id

        entity = kind.entity_class(kind=kind, values=default_values)
        for langcode in sorted(translations):
            entity.add_translation(langcode, values=translations[langcode])
        entity.update_loaded_revision_id()
        if kind.revisionable:
            entity.set_new_revision(kind.new_revision_default)
        return entity
