"""Entity kinds: schema descriptors resolved by name from a closed registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from contentsync.domain.errors import UnknownEntityKindError
from contentsync.domain.model.entity import ContentEntity
from contentsync.domain.model.enums import DEFAULT_LANGCODE, EntityKey

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from contentsync.domain.model.constraints import Constraint
    from contentsync.domain.model.fields import FieldDefinition


@dataclass(frozen=True, slots=True, kw_only=True)
class EntityKeys:
    """Field names of the identity fields; ``None`` where a kind lacks the key."""

    id: str
    uuid: str
    revision: str | None = None
    bundle: str | None = None
    langcode: str | None = None

    def get(self, key: EntityKey) -> str | None:
        return getattr(self, key.value)

    def field_names(self) -> frozenset[str]:
        return frozenset(
            name for name in (self.id, self.uuid, self.revision, self.bundle, self.langcode) if name
        )


@dataclass(frozen=True, eq=False, kw_only=True)
class EntityKind:
    """Schema descriptor of one entity kind.

    ``requires_identity_validation`` marks account/principal kinds whose constraints
    are enforced on import; every other kind is accepted as deserialized.
    ``new_revision_default`` is the new-revision flag an existing entity carries
    after it has been loaded or saved.
    """

    name: str
    keys: EntityKeys
    fields: Mapping[str, FieldDefinition]
    entity_class: type[ContentEntity] = ContentEntity
    revisionable: bool = False
    translatable: bool = False
    requires_identity_validation: bool = False
    new_revision_default: bool = False
    default_langcode: str = DEFAULT_LANGCODE
    constraints: tuple[Constraint, ...] = ()

    def __post_init__(self) -> None:
        missing = sorted(name for name in self.keys.field_names() if name not in self.fields)
        if missing:
            raise ValueError(f"{self.name}: key fields without definition: {', '.join(missing)}")
        if self.revisionable and self.keys.revision is None:
            raise ValueError(f"{self.name}: revisionable kinds need a revision key")

    def get_key(self, key: EntityKey) -> str | None:
        return self.keys.get(key)

    def has_key(self, key: EntityKey) -> bool:
        return self.keys.get(key) is not None

    @property
    def key_fields(self) -> frozenset[str]:
        return self.keys.field_names()

    def has_field(self, name: str) -> bool:
        return name in self.fields

    def field(self, name: str) -> FieldDefinition:
        try:
            return self.fields[name]
        except KeyError:
            raise KeyError(f"{self.name} has no field {name!r}") from None

    def create(self, values: Mapping[str, object] | None = None) -> ContentEntity:
        """Instantiate a new entity of this kind."""

        return self.entity_class(kind=self, values=values)


@dataclass(slots=True)
class EntityKindRegistry:
    """Closed lookup of entity kinds by name."""

    _kinds: dict[str, EntityKind] = field(default_factory=dict[str, EntityKind])

    @classmethod
    def of(cls, kinds: Iterable[EntityKind]) -> EntityKindRegistry:
        registry = cls()
        for kind in kinds:
            registry.register(kind)
        return registry

    def register(self, kind: EntityKind) -> None:
        if kind.name in self._kinds:
            raise ValueError(f"Entity kind already registered: {kind.name!r}")
        self._kinds[kind.name] = kind

    def get_definition(self, name: str) -> EntityKind:
        try:
            return self._kinds[name]
        except KeyError:
            raise UnknownEntityKindError(name) from None

    def has_definition(self, name: str) -> bool:
        return name in self._kinds

    def __iter__(self) -> Iterator[EntityKind]:
        return iter(self._kinds.values())

    def __len__(self) -> int:
        return len(self._kinds)
