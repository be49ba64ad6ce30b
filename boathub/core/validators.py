"""Closed-set validators for boat types and list sorting parameters.

The ``is_valid_*`` predicates accept ``None`` (and, for boat types, blank
strings): whether a value is required is decided by the caller.
"""

from __future__ import annotations

from boathub.models.boat import BoatType
from boathub.services import ValidationError

# API sort token -> Boat attribute name
SORT_FIELDS: dict[str, str] = {
    "id": "id",
    "name": "name",
    "description": "description",
    "boatType": "boat_type",
}
SORT_DIRECTIONS = ("asc", "desc")


def _normalize_boat_type(value: str) -> str:
    return value.strip().upper()


def is_valid_boat_type(value: str | None) -> bool:
    """Case- and whitespace-tolerant membership check against :class:`BoatType`."""
    if value is None or not value.strip():
        return True
    return _normalize_boat_type(value) in BoatType.__members__


def is_valid_sort_field(value: str | None) -> bool:
    """Exact, case-sensitive match against the sortable field tokens."""
    if value is None:
        return True
    return value in SORT_FIELDS


def is_valid_sort_direction(value: str | None) -> bool:
    """Case-insensitive match against ``asc`` / ``desc``."""
    if value is None:
        return True
    return value.lower() in SORT_DIRECTIONS


def coerce_boat_type(value: str | None) -> BoatType:
    """Trim, uppercase and map *value* to a :class:`BoatType`.

    Raises :class:`ValidationError` for blank or unknown values.
    """
    if value is None or not value.strip():
        raise ValidationError("type: Boat type is required")
    normalized = _normalize_boat_type(value)
    try:
        return BoatType[normalized]
    except KeyError:
        allowed = ", ".join(BoatType.__members__)
        raise ValidationError(
            f"type: Invalid boat type {value!r}. Allowed values: {allowed}"
        ) from None
