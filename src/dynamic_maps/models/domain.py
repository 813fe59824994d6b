"""Domain models for locations, addresses and the entities that carry them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Protocol, runtime_checkable


@dataclass(slots=True)
class Location:
    """A single point on the map."""

    lat: Optional[float] = None
    lng: Optional[float] = None

    def has_coords(self) -> bool:
        return self.lat is not None and self.lng is not None

    def get_coords(self) -> dict[str, Any]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(slots=True)
class Address(Location):
    """Value of an address field: postal parts plus optional coordinates."""

    formatted: Optional[str] = None
    street1: Optional[str] = None
    street2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    neighborhood: Optional[str] = None
    county: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None
    place_id: Optional[str] = None

    def multiline(self) -> list[str]:
        """Return the non-empty address lines in mailing order."""
        locality = " ".join(part for part in (self.city, self.state, self.zip) if part)
        lines = [self.street1, self.street2, locality, self.country]
        return [line for line in lines if line]

    def __str__(self) -> str:
        if self.formatted:
            return self.formatted
        return ", ".join(self.multiline())


class FieldKind(str, Enum):
    ADDRESS = "address"
    OTHER = "other"


@dataclass(slots=True, frozen=True)
class FieldDescriptor:
    handle: str
    kind: FieldKind = FieldKind.OTHER


@dataclass(slots=True)
class FieldLayout:
    """Ordered field definitions attached to an entity type."""

    fields: list[FieldDescriptor] = field(default_factory=list)

    def get_fields(self) -> list[FieldDescriptor]:
        return list(self.fields)


@runtime_checkable
class HasFieldLayout(Protocol):
    """Contract for content entities whose fields may hold addresses."""

    id: Any

    def get_field_layout(self) -> FieldLayout: ...

    def get_field_value(self, handle: str) -> Any: ...


@dataclass(slots=True)
class Element:
    """Plain content entity: an id, a field layout and the field values."""

    id: Any
    field_layout: FieldLayout = field(default_factory=FieldLayout)
    values: dict[str, Any] = field(default_factory=dict)

    def get_field_layout(self) -> FieldLayout:
        return self.field_layout

    def get_field_value(self, handle: str) -> Any:
        return self.values.get(handle)
