"""Reusable fakes and record builders for content import tests."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any

from contentsync.domain.errors import EntityStorageError
from contentsync.domain.model import EntityKey

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contentsync.domain.model import ContentEntity, EntityKindRegistry, FieldItems


type _Row = tuple[str, dict[str, FieldItems], dict[str, dict[str, FieldItems]]]


class InMemoryEntityStore:
    """Entity store keeping field snapshots so loaded entities are independent copies."""

    def __init__(
        self,
        registry: EntityKindRegistry,
        *,
        failing_languages: Iterable[str] = (),
    ) -> None:
        self.registry = registry
        self.failing_languages = frozenset(failing_languages)
        self.saved: list[ContentEntity] = []
        self.revisions: Counter[int] = Counter()
        self._rows: dict[int, _Row] = {}
        self._next_id = 1
        self._next_revision = 1

    def seed(self, entity: ContentEntity) -> ContentEntity:
        """Persist ``entity`` without recording it as a save made by the code under test."""

        self.save(entity)
        self.saved.pop()
        return entity

    def load(self, kind_name: str, entity_id: int) -> ContentEntity | None:
        row = self._rows.get(entity_id)
        if row is None or row[0] != kind_name:
            return None
        return self._hydrate(row)

    def load_by_external_id(self, kind_name: str, uuid: str) -> list[ContentEntity]:
        matches: list[ContentEntity] = []
        for entity_id in sorted(self._rows):
            row = self._rows[entity_id]
            entity = self._hydrate(row)
            if row[0] == kind_name and entity.uuid == uuid:
                matches.append(entity)
        return matches

    def find_ids_by_field_value(self, kind_name: str, field_name: str, value: object) -> list[int]:
        main_property = self.registry.get_definition(kind_name).field(field_name).main_property
        return [
            entity_id
            for entity_id, (name, values, _translations) in sorted(self._rows.items())
            if name == kind_name
            and any(item.get(main_property) == value for item in values.get(field_name, []))
        ]

    def save(self, entity: ContentEntity) -> None:
        root = entity.untranslated()
        kind = root.kind
        if not entity.is_default_translation() and entity.langcode in self.failing_languages:
            raise EntityStorageError(f"cannot store {entity.langcode} translation")
        if root.is_new():
            id_field = kind.get_key(EntityKey.ID)
            assert id_field is not None
            root.set(id_field, self._next_id)
            self._next_id += 1
            if kind.revisionable:
                self._create_revision(root)
        else:
            if root.id not in self._rows:
                raise EntityStorageError(f"{kind.name} {root.id} does not exist")
            if kind.revisionable and root.is_new_revision():
                self._create_revision(root)
        self._rows[root.id] = (
            kind.name,
            root.to_field_values(),
            {
                langcode: root.get_translation(langcode).to_field_values()
                for langcode in root.translation_languages()[1:]
            },
        )
        self.saved.append(entity)
        root.update_loaded_revision_id()
        if kind.revisionable:
            root.set_new_revision(kind.new_revision_default)

    def stored_values(self, entity_id: int) -> dict[str, FieldItems]:
        return self._rows[entity_id][1]

    def stored_translation(self, entity_id: int, langcode: str) -> dict[str, FieldItems]:
        return self._rows[entity_id][2][langcode]

    def __len__(self) -> int:
        return len(self._rows)

    def _create_revision(self, root: ContentEntity) -> None:
        revision_field = root.kind.get_key(EntityKey.REVISION)
        assert revision_field is not None
        root.set(revision_field, self._next_revision)
        self._next_revision += 1
        self.revisions[root.id] += 1

    def _hydrate(self, row: _Row) -> ContentEntity:
        kind_name, values, translations = row
        kind = self.registry.get_definition(kind_name)
        entity = kind.entity_class(kind=kind, values=values)
        for langcode, translated in translations.items():
            entity.add_translation(langcode, values=translated)
        entity.update_loaded_revision_id()
        if kind.revisionable:
            entity.set_new_revision(kind.new_revision_default)
        return entity


def node_record(
    uuid: str,
    *,
    title: str = "Example node",
    metadata: bool = True,
    **fields: Any,
) -> dict[str, Any]:
    record: dict[str, Any] = {"uuid": uuid, "title": title, "type": "article", **fields}
    if metadata:
        record["_content_sync"] = {"entity_type": "node", "uuid": uuid}
    return record


def term_record(uuid: str, *, name: str = "Example term", **fields: Any) -> dict[str, Any]:
    return {
        "_content_sync": {"entity_type": "taxonomy_term", "uuid": uuid},
        "uuid": uuid,
        "name": name,
        "vid": "tags",
        **fields,
    }


def user_record(uuid: str, *, name: str = "editor", **fields: Any) -> dict[str, Any]:
    return {
        "_content_sync": {"entity_type": "user", "uuid": uuid},
        "uuid": uuid,
        "name": name,
        **fields,
    }


def menu_link_record(uuid: str, *, title: str = "Home", **fields: Any) -> dict[str, Any]:
    return {
        "_content_sync": {"entity_type": "menu_link_content", "uuid": uuid},
        "uuid": uuid,
        "title": title,
        "bundle": "menu_link_content",
        "menu_name": "main",
        **fields,
    }
