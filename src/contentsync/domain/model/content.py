"""Concrete entity classes and the kinds shipped with contentsync."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from contentsync.domain.model.constraints import (
    EmailFormatConstraint,
    RequiredFieldConstraint,
    UniqueFieldConstraint,
)
from contentsync.domain.model.entity import ContentEntity
from contentsync.domain.model.fields import FieldDefinition
from contentsync.domain.model.kinds import EntityKeys, EntityKind, EntityKindRegistry

if TYPE_CHECKING:
    from collections.abc import Iterable


class Node(ContentEntity):
    ENTITY_TYPE_ID: ClassVar[str | None] = "node"


class TaxonomyTerm(ContentEntity):
    ENTITY_TYPE_ID: ClassVar[str | None] = "taxonomy_term"


class User(ContentEntity):
    ENTITY_TYPE_ID: ClassVar[str | None] = "user"


class MenuLinkContent(ContentEntity):
    ENTITY_TYPE_ID: ClassVar[str | None] = "menu_link_content"


def _fields(*definitions: FieldDefinition) -> dict[str, FieldDefinition]:
    return {definition.name: definition for definition in definitions}


NODE = EntityKind(
    name="node",
    keys=EntityKeys(id="nid", uuid="uuid", revision="vid", bundle="type", langcode="langcode"),
    fields=_fields(
        FieldDefinition(name="nid"),
        FieldDefinition(name="uuid"),
        FieldDefinition(name="vid"),
        FieldDefinition(name="type", main_property="target_id"),
        FieldDefinition(name="langcode", translatable=True),
        FieldDefinition(name="title", translatable=True, required=True),
        FieldDefinition(name="status", translatable=True),
        FieldDefinition(name="uid", main_property="target_id"),
        FieldDefinition(name="created", translatable=True),
        FieldDefinition(name="changed", translatable=True),
        FieldDefinition(name="promote", translatable=True),
        FieldDefinition(name="sticky", translatable=True),
        FieldDefinition(name="body", translatable=True),
        FieldDefinition(name="path", translatable=True, main_property="alias"),
        FieldDefinition(name="field_tags", main_property="target_id"),
    ),
    entity_class=Node,
    revisionable=True,
    translatable=True,
)

TAXONOMY_TERM = EntityKind(
    name="taxonomy_term",
    keys=EntityKeys(id="tid", uuid="uuid", bundle="vid", langcode="langcode"),
    fields=_fields(
        FieldDefinition(name="tid"),
        FieldDefinition(name="uuid"),
        FieldDefinition(name="vid", main_property="target_id"),
        FieldDefinition(name="langcode", translatable=True),
        FieldDefinition(name="name", translatable=True, required=True),
        FieldDefinition(name="description", translatable=True),
        FieldDefinition(name="weight"),
        FieldDefinition(name="parent", main_property="target_id"),
        FieldDefinition(name="changed", translatable=True),
        FieldDefinition(name="path", translatable=True, main_property="alias"),
    ),
    entity_class=TaxonomyTerm,
    translatable=True,
)

USER = EntityKind(
    name="user",
    keys=EntityKeys(id="uid", uuid="uuid", langcode="langcode"),
    fields=_fields(
        FieldDefinition(name="uid"),
        FieldDefinition(name="uuid"),
        FieldDefinition(name="langcode", translatable=True),
        FieldDefinition(name="preferred_langcode"),
        FieldDefinition(name="name", required=True),
        FieldDefinition(name="pass"),
        FieldDefinition(name="mail"),
        FieldDefinition(name="timezone"),
        FieldDefinition(name="status"),
        FieldDefinition(name="created"),
        FieldDefinition(name="changed", translatable=True),
        FieldDefinition(name="roles", main_property="target_id"),
        FieldDefinition(name="data", serialized_properties=("value",)),
    ),
    entity_class=User,
    translatable=True,
    requires_identity_validation=True,
    constraints=(
        RequiredFieldConstraint("name", name="UserNameRequired"),
        UniqueFieldConstraint("name", name="UserNameUnique"),
        EmailFormatConstraint("mail", name="UserMailFormat"),
        UniqueFieldConstraint("mail", name="UserMailUnique"),
    ),
)

MENU_LINK_CONTENT = EntityKind(
    name="menu_link_content",
    keys=EntityKeys(id="id", uuid="uuid", bundle="bundle", langcode="langcode"),
    fields=_fields(
        FieldDefinition(name="id"),
        FieldDefinition(name="uuid"),
        FieldDefinition(name="bundle"),
        FieldDefinition(name="langcode", translatable=True),
        FieldDefinition(name="title", translatable=True, required=True),
        FieldDefinition(name="description", translatable=True),
        FieldDefinition(name="menu_name"),
        FieldDefinition(name="link", main_property="uri", serialized_properties=("options",)),
        FieldDefinition(name="enabled"),
        FieldDefinition(name="weight"),
        FieldDefinition(name="parent"),
    ),
    entity_class=MenuLinkContent,
    translatable=True,
)

DEFAULT_KINDS: tuple[EntityKind, ...] = (NODE, TAXONOMY_TERM, USER, MENU_LINK_CONTENT)


def default_registry(extra_kinds: Iterable[EntityKind] = ()) -> EntityKindRegistry:
    """Return a registry holding the shipped kinds plus ``extra_kinds``."""

    return EntityKindRegistry.of((*DEFAULT_KINDS, *extra_kinds))
