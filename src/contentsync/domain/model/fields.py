"""Field definitions and field-item value handling."""

from __future__ import annotations

import json
from collections.abc import Mapping
from copy import deepcopy
from dataclasses import dataclass
from datetime import date, time
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

type FieldItem = dict[str, Any]
type FieldItems = list[FieldItem]


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldDefinition:
    """Schema metadata of one named field on an entity kind.

    ``serialized_properties`` lists the item properties whose storage is an opaque
    encoded string rather than structured data.
    """

    name: str
    translatable: bool = False
    main_property: str = "value"
    serialized_properties: tuple[str, ...] = ()
    required: bool = False


def normalize_field_value(value: object, *, main_property: str = "value") -> FieldItems:
    """Return ``value`` as a list of field items.

    Scalars become a single item keyed by ``main_property``, mappings a single item,
    and sequences one item per entry. ``None`` clears the field.
    """

    if value is None:
        return []
    if isinstance(value, Mapping):
        return [_copy_item(value)]
    if isinstance(value, list | tuple):
        items: FieldItems = []
        for entry in value:
            if entry is None:
                continue
            if isinstance(entry, Mapping):
                items.append(_copy_item(entry))
            else:
                items.append({main_property: deepcopy(entry)})
        return items
    return [{main_property: deepcopy(value)}]


def is_empty_items(items: Iterable[FieldItem], *, main_property: str = "value") -> bool:
    return all(item.get(main_property) in (None, "") for item in items)


def json_default(value: object) -> str:
    """Encode dates and times as ISO 8601; any other non-JSON value is an error."""

    if isinstance(value, date | time):
        return value.isoformat()
    raise TypeError(f"{type(value).__name__} values cannot be encoded as JSON")


def encode_serialized_properties(item: FieldItem, property_names: Iterable[str]) -> FieldItem:
    """Encode structured values of ``property_names`` into their stored string form.

    Values that are already scalar (including previously encoded strings) are left
    untouched, so encoding an item twice yields the same result.
    """

    encoded = dict(item)
    for property_name in property_names:
        if property_name not in encoded:
            continue
        value = encoded[property_name]
        if isinstance(value, Mapping | list | tuple):
            encoded[property_name] = json.dumps(value, sort_keys=True, default=json_default)
    return encoded


def _copy_item(item: Mapping[Any, Any]) -> FieldItem:
    return {str(key): deepcopy(value) for key, value in item.items()}
