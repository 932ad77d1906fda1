from __future__ import annotations

import pytest

from contentsync.domain.errors import TranslationError
from contentsync.domain.model import (
    NODE,
    USER,
    EntityKeys,
    EntityKind,
    FieldDefinition,
    Node,
)

BLOCK = EntityKind(
    name="block",
    keys=EntityKeys(id="id", uuid="uuid"),
    fields={
        "id": FieldDefinition(name="id"),
        "uuid": FieldDefinition(name="uuid"),
        "info": FieldDefinition(name="info"),
    },
)


def test_new_entity_gets_uuid_and_default_language() -> None:
    node = NODE.create({"title": "Hello"})

    assert isinstance(node, Node)
    assert node.is_new()
    assert node.uuid
    assert node.langcode == "en"
    assert node.get("title") == [{"value": "Hello"}]


def test_new_revisionable_entity_starts_a_revision() -> None:
    assert NODE.create().is_new_revision()
    assert not BLOCK.create().is_new_revision()


def test_set_normalises_values_into_items() -> None:
    node = NODE.create()

    node.set("field_tags", [3, {"target_id": 4}, None])
    node.set("body", {"value": "<p>x</p>", "format": "basic_html"})
    node.set("status", None)

    assert node.get("field_tags") == [{"target_id": 3}, {"target_id": 4}]
    assert node.get("body") == [{"value": "<p>x</p>", "format": "basic_html"}]
    assert node.get("status") == []
    assert node.is_empty("status")


def test_get_returns_independent_copy() -> None:
    node = NODE.create({"title": "Hello"})

    items = node.get("title")
    items[0]["value"] = "Changed"

    assert node.get_main_value("title") == "Hello"


def test_unknown_field_raises_key_error() -> None:
    node = NODE.create()

    assert not node.has_field("nope")
    with pytest.raises(KeyError):
        node.set("nope", 1)


def test_identity_properties_read_key_fields() -> None:
    node = NODE.create({"nid": 5, "vid": 9, "type": "article", "uuid": "abc", "langcode": "de"})

    assert node.id == 5
    assert node.revision_id == 9
    assert node.bundle == "article"
    assert node.uuid == "abc"
    assert node.langcode == "de"
    assert not node.is_new()


def test_create_duplicate_clears_identity_and_keeps_content() -> None:
    node = NODE.create({"nid": 5, "vid": 9, "uuid": "abc", "title": "Hello"})
    node.add_translation("de", {"title": "Hallo"})

    duplicate = node.create_duplicate()

    assert duplicate.is_new()
    assert duplicate.revision_id is None
    assert duplicate.uuid not in (None, "abc")
    assert duplicate.get("title") == [{"value": "Hello"}]
    assert duplicate.get_translation("de").get("title") == [{"value": "Hallo"}]
    assert duplicate.is_new_revision()
    # the original is untouched
    assert node.id == 5
    assert node.uuid == "abc"


def test_translation_view_owns_only_translatable_fields() -> None:
    node = NODE.create({"title": "Hello", "uid": 1})

    view = node.add_translation("de", {"title": "Hallo", "uid": 9})

    assert view.langcode == "de"
    assert not view.is_default_translation()
    assert view.untranslated() is node
    assert view.get("title") == [{"value": "Hallo"}]
    assert view.get("uid") == [{"target_id": 1}]

    view.set("uid", 3)
    assert node.get("uid") == [{"target_id": 3}]
    assert node.get("title") == [{"value": "Hello"}]


def test_translation_lookup() -> None:
    node = NODE.create({"title": "Hello"})
    node.add_translation("de")

    assert node.translation_languages() == ("en", "de")
    assert node.has_translation("de")
    assert node.get_translation("en") is node
    with pytest.raises(TranslationError):
        node.get_translation("fr")
    with pytest.raises(TranslationError):
        node.add_translation("de")
    with pytest.raises(TranslationError):
        node.add_translation("en")


def test_remove_translation() -> None:
    node = NODE.create({"title": "Hello"})
    view = node.add_translation("de", {"title": "Hallo"})

    view.remove_translation("de")

    assert node.translation_languages() == ("en",)
    with pytest.raises(TranslationError):
        node.remove_translation("de")
    with pytest.raises(TranslationError):
        node.remove_translation("en")


def test_untranslatable_kind_rejects_translations() -> None:
    with pytest.raises(TranslationError):
        BLOCK.create().add_translation("de")


def test_revision_flags_are_shared_with_translations() -> None:
    node = NODE.create({"nid": 1, "vid": 4})
    view = node.add_translation("de")

    view.set_new_revision(False)
    view.update_loaded_revision_id()

    assert not node.is_new_revision()
    assert node.loaded_revision_id == 4


def test_set_new_revision_on_unrevisionable_kind() -> None:
    block = BLOCK.create()

    block.set_new_revision(False)
    with pytest.raises(ValueError, match="not revisionable"):
        block.set_new_revision(True)


def test_validate_runs_kind_constraints() -> None:
    user = USER.create({"name": "", "mail": "not-an-address"})

    names = {violation.constraint for violation in user.validate()}

    assert names == {"UserNameRequired", "UserMailFormat"}
