"""Public domain model surface."""

from __future__ import annotations

from contentsync.domain.model.constraints import (
    Constraint,
    ConstraintViolation,
    EmailFormatConstraint,
    EntityLookup,
    RequiredFieldConstraint,
    UniqueFieldConstraint,
)
from contentsync.domain.model.content import (
    DEFAULT_KINDS,
    MENU_LINK_CONTENT,
    NODE,
    TAXONOMY_TERM,
    USER,
    MenuLinkContent,
    Node,
    TaxonomyTerm,
    User,
    default_registry,
)
from contentsync.domain.model.entity import ContentEntity, new_uuid
from contentsync.domain.model.enums import (
    ANONYMOUS_USER_ID,
    DEFAULT_LANGCODE,
    LANGCODE_NOT_SPECIFIED,
    EntityKey,
)
from contentsync.domain.model.fields import (
    FieldDefinition,
    FieldItem,
    FieldItems,
    encode_serialized_properties,
    normalize_field_value,
)
from contentsync.domain.model.kinds import EntityKeys, EntityKind, EntityKindRegistry

__all__ = [  # noqa: RUF022
    # constraints
    "Constraint",
    "ConstraintViolation",
    "EmailFormatConstraint",
    "EntityLookup",
    "RequiredFieldConstraint",
    "UniqueFieldConstraint",
    # kinds
    "DEFAULT_KINDS",
    "MENU_LINK_CONTENT",
    "NODE",
    "TAXONOMY_TERM",
    "USER",
    "EntityKeys",
    "EntityKind",
    "EntityKindRegistry",
    "default_registry",
    # entities
    "ContentEntity",
    "MenuLinkContent",
    "Node",
    "TaxonomyTerm",
    "User",
    "new_uuid",
    # fields
    "FieldDefinition",
    "FieldItem",
    "FieldItems",
    "encode_serialized_properties",
    "normalize_field_value",
    # enums
    "ANONYMOUS_USER_ID",
    "DEFAULT_LANGCODE",
    "LANGCODE_NOT_SPECIFIED",
    "EntityKey",
]
