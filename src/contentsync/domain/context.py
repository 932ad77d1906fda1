"""Import context: immutable per-call configuration of the importer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Mapping

ENTITY_TYPE: Final[str] = "entity_type"
SKIPPED_CONSTRAINTS: Final[str] = "skipped_constraints"


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportContext:
    """Hints for one import call.

    ``entity_type`` overrides the kind named inside a record and
    ``skipped_constraints`` lists constraint names ignored during validation. Any
    other keys are kept in ``extras`` and handed to the deserializer untouched.
    """

    entity_type: str | None = None
    skipped_constraints: frozenset[str] = field(default_factory=frozenset[str])
    extras: Mapping[str, object] = field(default_factory=dict[str, object])

    @classmethod
    def from_mapping(cls, values: Mapping[str, object] | None) -> ImportContext:
        if not values:
            return cls()
        entity_type = values.get(ENTITY_TYPE)
        if entity_type is not None and not isinstance(entity_type, str):
            raise TypeError(f"{ENTITY_TYPE} must be a string, got {type(entity_type).__name__}")
        return cls(
            entity_type=entity_type or None,
            skipped_constraints=_constraint_names(values.get(SKIPPED_CONSTRAINTS)),
            extras={
                key: value
                for key, value in values.items()
                if key not in {ENTITY_TYPE, SKIPPED_CONSTRAINTS}
            },
        )

    def layered(self, overrides: ImportContext | Mapping[str, object] | None) -> ImportContext:
        """Return a new context with non-empty values of ``overrides`` on top of this one."""

        if overrides is None:
            return self
        top = overrides if isinstance(overrides, ImportContext) else self.from_mapping(overrides)
        return ImportContext(
            entity_type=top.entity_type or self.entity_type,
            skipped_constraints=top.skipped_constraints or self.skipped_constraints,
            extras={**self.extras, **top.extras},
        )

    def with_entity_type(self, entity_type: str) -> ImportContext:
        return ImportContext(
            entity_type=entity_type,
            skipped_constraints=self.skipped_constraints,
            extras=self.extras,
        )

    def as_mapping(self) -> dict[str, object]:
        mapping: dict[str, object] = dict(self.extras)
        if self.entity_type:
            mapping[ENTITY_TYPE] = self.entity_type
        if self.skipped_constraints:
            mapping[SKIPPED_CONSTRAINTS] = sorted(self.skipped_constraints)
        return mapping


def _constraint_names(raw: object) -> frozenset[str]:
    if raw is None:
        return frozenset()
    if isinstance(raw, str):
        return frozenset({raw})
    if isinstance(raw, list | tuple | set | frozenset):
        return frozenset(str(name) for name in raw)
    raise TypeError(f"{SKIPPED_CONSTRAINTS} must be a list of constraint names")
