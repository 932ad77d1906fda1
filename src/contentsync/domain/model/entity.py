"""
Content entities:
typed, mutable records with named multi-item fields, translations and revisions.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import InitVar, dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar
from uuid import uuid4

from contentsync.domain.errors import TranslationError
from contentsync.domain.model.enums import EntityKey
from contentsync.domain.model.fields import FieldItems, is_empty_items, normalize_field_value

if TYPE_CHECKING:
    from collections.abc import Mapping

    from contentsync.domain.model.constraints import ConstraintViolation, EntityLookup
    from contentsync.domain.model.kinds import EntityKind


def new_uuid() -> str:
    return str(uuid4())


@dataclass(eq=False, kw_only=True, repr=False)
class ContentEntity:
    """One entity instance of an :class:`EntityKind`.

    Every field holds a list of items (``dict`` of property -> value); identity
    values such as the primary id or uuid live in ordinary fields named by the
    kind's keys. A translation view shares the entity's identity: it owns only the
    values of translatable fields and delegates everything else to the default
    translation.
    """

    # class-level discriminator; subclasses bound to one kind override it
    ENTITY_TYPE_ID: ClassVar[str | None] = None

    kind: EntityKind
    values: InitVar[Mapping[str, object] | None] = None
    translation_of: InitVar[ContentEntity | None] = None
    submitted_fields: frozenset[str] | None = None

    _fields: dict[str, FieldItems] = field(default_factory=dict[str, FieldItems], init=False)
    _default: ContentEntity | None = field(default=None, init=False)
    _translations: dict[str, ContentEntity] = field(
        default_factory=dict[str, "ContentEntity"], init=False
    )
    _new_revision: bool = field(default=False, init=False)
    _loaded_revision_id: int | None = field(default=None, init=False)

    def __post_init__(
        self,
        values: Mapping[str, object] | None,
        translation_of: ContentEntity | None,
    ) -> None:
        self._default = translation_of
        for name, value in (values or {}).items():
            self.set(name, value)
        if translation_of is None:
            self._ensure_key_defaults()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.name!r}, id={self.id!r}, "
            f"uuid={self.uuid!r}, langcode={self.langcode!r})"
        )

    # Field access ---------------------------------------------------------------

    def has_field(self, name: str) -> bool:
        return self.kind.has_field(name)

    def field_names(self) -> tuple[str, ...]:
        return tuple(self.kind.fields)

    def get(self, name: str) -> FieldItems:
        """Return a copy of the items stored for ``name``."""

        self.kind.field(name)
        return deepcopy(self._owner(name)._fields.get(name, []))

    def set(self, name: str, value: object) -> None:
        definition = self.kind.field(name)
        self._owner(name)._fields[name] = normalize_field_value(
            value, main_property=definition.main_property
        )

    def get_main_value(self, name: str) -> Any:
        definition = self.kind.field(name)
        items = self._owner(name)._fields.get(name) or []
        if not items:
            return None
        return items[0].get(definition.main_property)

    def is_empty(self, name: str) -> bool:
        definition = self.kind.field(name)
        items = self._owner(name)._fields.get(name) or []
        return is_empty_items(items, main_property=definition.main_property)

    def to_field_values(self) -> dict[str, FieldItems]:
        """Snapshot of the values this object owns (all fields for a default translation)."""

        return deepcopy(self._fields)

    # Identity -------------------------------------------------------------------

    @property
    def id(self) -> Any:
        return self._key_value(EntityKey.ID)

    @property
    def uuid(self) -> str | None:
        return self._key_value(EntityKey.UUID)

    @property
    def revision_id(self) -> Any:
        return self._key_value(EntityKey.REVISION)

    @property
    def bundle(self) -> str | None:
        return self._key_value(EntityKey.BUNDLE)

    @property
    def langcode(self) -> str | None:
        return self._key_value(EntityKey.LANGCODE)

    def is_new(self) -> bool:
        return self.id is None

    def create_duplicate(self) -> ContentEntity:
        """Copy all values and translations into a new entity with a fresh uuid."""

        root = self.untranslated()
        duplicate = type(root)(kind=root.kind)
        duplicate._fields = deepcopy(root._fields)
        for key in (EntityKey.ID, EntityKey.REVISION):
            name = root.kind.get_key(key)
            if name is not None:
                duplicate._fields[name] = []
        uuid_field = root.kind.get_key(EntityKey.UUID)
        if uuid_field is not None:
            duplicate.set(uuid_field, new_uuid())
        for langcode, view in root._translations.items():
            copy = type(root)(kind=root.kind, translation_of=duplicate)
            copy._fields = deepcopy(view._fields)
            duplicate._translations[langcode] = copy
        duplicate.submitted_fields = root.submitted_fields
        duplicate._new_revision = root.kind.revisionable
        return duplicate

    # Translations ---------------------------------------------------------------

    def untranslated(self) -> ContentEntity:
        return self._default or self

    def is_default_translation(self) -> bool:
        return self._default is None

    def translation_languages(self) -> tuple[str, ...]:
        root = self.untranslated()
        languages = [root.langcode] if root.langcode else []
        return (*languages, *root._translations)

    def has_translation(self, langcode: str) -> bool:
        root = self.untranslated()
        return langcode == root.langcode or langcode in root._translations

    def get_translation(self, langcode: str) -> ContentEntity:
        root = self.untranslated()
        if langcode == root.langcode:
            return root
        try:
            return root._translations[langcode]
        except KeyError:
            raise TranslationError(
                f"{root.kind.name} {root.uuid} has no {langcode!r} translation"
            ) from None

    def add_translation(
        self, langcode: str, values: Mapping[str, object] | None = None
    ) -> ContentEntity:
        root = self.untranslated()
        langcode_field = root.kind.get_key(EntityKey.LANGCODE)
        if not root.kind.translatable or langcode_field is None:
            raise TranslationError(f"{root.kind.name} entities are not translatable")
        if not langcode:
            raise TranslationError("Translations need a language code")
        if root.has_translation(langcode):
            raise TranslationError(
                f"{root.kind.name} {root.uuid} already has a {langcode!r} translation"
            )
        view = type(root)(kind=root.kind, translation_of=root)
        view.set(langcode_field, langcode)
        for name, value in (values or {}).items():
            if name != langcode_field and root.kind.field(name).translatable:
                view.set(name, value)
        root._translations[langcode] = view
        return view

    def remove_translation(self, langcode: str) -> None:
        root = self.untranslated()
        if langcode == root.langcode:
            raise TranslationError(f"Cannot remove the default translation of {root.uuid}")
        if root._translations.pop(langcode, None) is None:
            raise TranslationError(
                f"{root.kind.name} {root.uuid} has no {langcode!r} translation"
            )

    # Revisions ------------------------------------------------------------------

    def is_new_revision(self) -> bool:
        return self.untranslated()._new_revision

    def set_new_revision(self, value: bool = True) -> None:
        root = self.untranslated()
        if value and not root.kind.revisionable:
            raise ValueError(f"{root.kind.name} entities are not revisionable")
        root._new_revision = value

    @property
    def loaded_revision_id(self) -> Any:
        return self.untranslated()._loaded_revision_id

    def update_loaded_revision_id(self) -> ContentEntity:
        root = self.untranslated()
        root._loaded_revision_id = root.revision_id
        return self

    # Validation -----------------------------------------------------------------

    def validate(self, lookup: EntityLookup | None = None) -> list[ConstraintViolation]:
        violations: list[ConstraintViolation] = []
        for constraint in self.kind.constraints:
            violations.extend(constraint.check(self, lookup))
        return violations

    # Internals ------------------------------------------------------------------

    def _owner(self, name: str) -> ContentEntity:
        if self._default is not None and not self.kind.field(name).translatable:
            return self._default
        return self

    def _key_value(self, key: EntityKey) -> Any:
        name = self.kind.get_key(key)
        if name is None:
            return None
        return self.get_main_value(name)

    def _ensure_key_defaults(self) -> None:
        uuid_field = self.kind.get_key(EntityKey.UUID)
        if uuid_field is not None and self.is_empty(uuid_field):
            self.set(uuid_field, new_uuid())
        langcode_field = self.kind.get_key(EntityKey.LANGCODE)
        if langcode_field is not None and self.is_empty(langcode_field):
            self.set(langcode_field, self.kind.default_langcode)
        if self.is_new():
            self._new_revision = self.kind.revisionable
