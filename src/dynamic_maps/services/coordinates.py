"""Coordinate helpers: ID generation and location normalization."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Mapping
from numbers import Real
from typing import Any, NotRequired, TypedDict

from ..config import settings
from ..models.domain import FieldKind, HasFieldLayout, Location

# No 0/O, 1/l/I lookalikes.
ID_ALPHABET = "abcdefghijkmnpqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ23456789"

logger = logging.getLogger(__name__)


class Coordinate(TypedDict):
    lat: Any
    lng: Any
    id: NotRequired[str]


def generate_id(prefix: str | None = None) -> str:
    """Generate a short random ID, optionally prefixed (e.g. ``map-x7Kq2m``)."""
    token = "".join(random.choices(ID_ALPHABET, k=settings.map_id_length))
    return f"{prefix}-{token}" if prefix else token


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, Real):
        return True
    if isinstance(value, str):
        try:
            float(value)
        except ValueError:
            return False
        return True
    return False


def is_coordinate_pair(value: Any) -> bool:
    """Return True for a mapping carrying numeric ``lat`` and ``lng`` values."""
    if not isinstance(value, Mapping):
        return False
    return _is_number(value.get("lat")) and _is_number(value.get("lng"))


def _location_coords(location: Location) -> list[Coordinate]:
    coords = location.get_coords()
    return [coords] if is_coordinate_pair(coords) else []


def _field_filter(options: Mapping[str, Any] | None) -> set[str] | None:
    value = (options or {}).get("field")
    if isinstance(value, str):
        return {value}
    if isinstance(value, Iterable) and not isinstance(value, (bytes, Mapping)):
        return {str(handle) for handle in value}
    return None


def _as_list(locations: Any) -> list[Any]:
    if isinstance(locations, Mapping):
        return list(locations.values())
    if isinstance(locations, Iterable) and not isinstance(locations, (str, bytes)):
        return list(locations)
    return [locations]


def _entity_coords(entity: HasFieldLayout, handles: set[str] | None) -> list[Coordinate]:
    results: list[Coordinate] = []
    for descriptor in entity.get_field_layout().get_fields():
        if handles is not None and descriptor.handle not in handles:
            continue
        if descriptor.kind is not FieldKind.ADDRESS:
            continue
        address = entity.get_field_value(descriptor.handle)
        if not isinstance(address, Location) or not address.has_coords():
            continue
        coords = address.get_coords()
        if not is_coordinate_pair(coords):
            continue
        results.append({**coords, "id": f"{entity.id}-{descriptor.handle}"})
    return results


def extract_coordinates(locations: Any, options: Mapping[str, Any] | None = None) -> list[Coordinate]:
    """Retrieve all coordinates from a set of locations.

    Accepts a coordinate mapping, a ``Location``, an entity implementing
    ``HasFieldLayout``, or any collection mixing them. The result is always a
    flat list, since an entity with several address fields yields one
    coordinate per populated field (tagged ``"{entity_id}-{field_handle}"``).

    Args:
        locations: Location input(s) to normalize
        options: Optional settings; ``field`` restricts which address field
            handles are read from entities (string or collection of strings)

    Returns:
        Coordinates in input traversal order; unusable inputs are skipped
    """
    if isinstance(locations, Location):
        return _location_coords(locations)

    if is_coordinate_pair(locations):
        return [locations]

    handles = _field_filter(options)

    results: list[Coordinate] = []
    for location in _as_list(locations):
        if isinstance(location, Location):
            results.extend(_location_coords(location))
        elif is_coordinate_pair(location):
            results.append(location)
        elif isinstance(location, HasFieldLayout):
            results.extend(_entity_coords(location, handles))
        else:
            logger.debug("Skipping unsupported location input of type %s", type(location).__name__)
    return results


def string_coords(coords: Mapping[str, Any]) -> str:
    """Convert a set of coordinates into a ``"lat,lng"`` string."""
    if coords.get("lat") is None or coords.get("lng") is None:
        return ""
    return f"{coords['lat']},{coords['lng']}"
