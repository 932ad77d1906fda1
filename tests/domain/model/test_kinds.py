from __future__ import annotations

import pytest

from contentsync.domain.errors import UnknownEntityKindError
from contentsync.domain.model import (
    DEFAULT_KINDS,
    NODE,
    TAXONOMY_TERM,
    EntityKey,
    EntityKeys,
    EntityKind,
    FieldDefinition,
    default_registry,
)


def test_key_fields_collect_identity_fields() -> None:
    assert NODE.key_fields == frozenset({"nid", "uuid", "vid", "type", "langcode"})
    assert TAXONOMY_TERM.get_key(EntityKey.BUNDLE) == "vid"
    assert not TAXONOMY_TERM.has_key(EntityKey.REVISION)


def test_kind_requires_definitions_for_keys() -> None:
    with pytest.raises(ValueError, match="uuid"):
        EntityKind(
            name="broken",
            keys=EntityKeys(id="id", uuid="uuid"),
            fields={"id": FieldDefinition(name="id")},
        )


def test_revisionable_kind_requires_revision_key() -> None:
    with pytest.raises(ValueError, match="revision key"):
        EntityKind(
            name="broken",
            keys=EntityKeys(id="id", uuid="uuid"),
            fields={"id": FieldDefinition(name="id"), "uuid": FieldDefinition(name="uuid")},
            revisionable=True,
        )


def test_field_lookup_raises_for_unknown_names() -> None:
    assert NODE.field("title").translatable
    with pytest.raises(KeyError):
        NODE.field("nope")


def test_default_registry_holds_shipped_kinds() -> None:
    registry = default_registry()

    assert len(registry) == len(DEFAULT_KINDS)
    assert registry.get_definition("node") is NODE
    assert registry.has_definition("user")
    assert {kind.name for kind in registry} == {
        "node",
        "taxonomy_term",
        "user",
        "menu_link_content",
    }


def test_registry_rejects_unknown_and_duplicate_kinds() -> None:
    registry = default_registry()

    with pytest.raises(UnknownEntityKindError) as excinfo:
        registry.get_definition("comment")
    assert excinfo.value.name == "comment"
    assert isinstance(excinfo.value, LookupError)

    with pytest.raises(ValueError, match="already registered"):
        registry.register(NODE)
