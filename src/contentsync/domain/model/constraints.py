"""Entity-level validation constraints and their violations."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from contentsync.domain.model.entity import ContentEntity


_EMAIL_PATTERN: Final[re.Pattern[str]] = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")


@dataclass(frozen=True, slots=True)
class ConstraintViolation:
    constraint: str
    message: str
    field_name: str | None = None


@runtime_checkable
class EntityLookup(Protocol):
    """Read access needed by constraints that compare against stored entities."""

    def find_ids_by_field_value(
        self, kind_name: str, field_name: str, value: object
    ) -> list[int]: ...


@runtime_checkable
class Constraint(Protocol):
    """A named check producing violations for one entity."""

    @property
    def name(self) -> str: ...

    def check(
        self, entity: ContentEntity, lookup: EntityLookup | None
    ) -> Iterable[ConstraintViolation]: ...


@dataclass(frozen=True, slots=True)
class RequiredFieldConstraint:
    field_name: str
    name: str = "NotNull"

    def check(
        self, entity: ContentEntity, lookup: EntityLookup | None
    ) -> Iterable[ConstraintViolation]:
        _ = lookup
        if entity.is_empty(self.field_name):
            yield ConstraintViolation(
                constraint=self.name,
                message=f"{self.field_name}: This value should not be null.",
                field_name=self.field_name,
            )


@dataclass(frozen=True, slots=True)
class UniqueFieldConstraint:
    field_name: str
    name: str = "UniqueField"

    def check(
        self, entity: ContentEntity, lookup: EntityLookup | None
    ) -> Iterable[ConstraintViolation]:
        value = entity.get_main_value(self.field_name)
        if lookup is None or value in (None, ""):
            return
        taken_by = [
            entity_id
            for entity_id in lookup.find_ids_by_field_value(
                entity.kind.name, self.field_name, value
            )
            if entity_id != entity.id
        ]
        if taken_by:
            yield ConstraintViolation(
                constraint=self.name,
                message=f"{self.field_name}: The value {value!r} is already taken.",
                field_name=self.field_name,
            )


@dataclass(frozen=True, slots=True)
class EmailFormatConstraint:
    field_name: str
    name: str = "Email"

    def check(
        self, entity: ContentEntity, lookup: EntityLookup | None
    ) -> Iterable[ConstraintViolation]:
        _ = lookup
        value = entity.get_main_value(self.field_name)
        if value in (None, ""):
            return
        if not isinstance(value, str) or not _EMAIL_PATTERN.fullmatch(value):
            yield ConstraintViolation(
                constraint=self.name,
                message=f"{self.field_name}: {value!r} is not a valid email address.",
                field_name=self.field_name,
            )
