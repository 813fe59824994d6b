"""Typed records making up a map's DNA sequence.

Each record is one instruction for the JS runtime, tagged by ``type``. Field
names match what the runtime reads, hence the camelCase.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class DnaRecord(BaseModel):
    model_config = ConfigDict(frozen=True)


class MapRecord(DnaRecord):
    type: Literal["map"] = "map"
    locations: list[dict[str, Any]] = Field(default_factory=list)
    options: dict[str, Any] = Field(default_factory=dict)


class MarkersRecord(DnaRecord):
    type: Literal["markers"] = "markers"
    locations: list[dict[str, Any]] = Field(default_factory=list)
    options: dict[str, Any] = Field(default_factory=dict)


class KmlRecord(DnaRecord):
    type: Literal["kml"] = "kml"
    url: str
    options: dict[str, Any] = Field(default_factory=dict)


class StylesRecord(DnaRecord):
    type: Literal["styles"] = "styles"
    styleSet: list[Any] | dict[str, Any]


class ZoomRecord(DnaRecord):
    type: Literal["zoom"] = "zoom"
    level: Any


class CenterRecord(DnaRecord):
    type: Literal["center"] = "center"
    coords: Any


class FitRecord(DnaRecord):
    type: Literal["fit"] = "fit"


class RefreshRecord(DnaRecord):
    type: Literal["refresh"] = "refresh"


class PanToMarkerRecord(DnaRecord):
    type: Literal["panToMarker"] = "panToMarker"
    markerId: Any


class SetMarkerIconRecord(DnaRecord):
    type: Literal["setMarkerIcon"] = "setMarkerIcon"
    markerId: Any
    icon: Any


class HideMarkerRecord(DnaRecord):
    type: Literal["hideMarker"] = "hideMarker"
    markerId: Any


class ShowMarkerRecord(DnaRecord):
    type: Literal["showMarker"] = "showMarker"
    markerId: Any


DnaSegment = Annotated[
    Union[
        MapRecord,
        MarkersRecord,
        KmlRecord,
        StylesRecord,
        ZoomRecord,
        CenterRecord,
        FitRecord,
        RefreshRecord,
        PanToMarkerRecord,
        SetMarkerIconRecord,
        HideMarkerRecord,
        ShowMarkerRecord,
    ],
    Field(discriminator="type"),
]

dna_adapter: TypeAdapter[list[DnaSegment]] = TypeAdapter(list[DnaSegment])


def parse_dna(payload: Any) -> list[DnaSegment]:
    """Validate serialized DNA (JSON string/bytes or list of dicts) into records."""
    if isinstance(payload, (str, bytes)):
        return dna_adapter.validate_json(payload)
    return dna_adapter.validate_python(payload)


def dump_dna(records: list[DnaSegment]) -> list[dict[str, Any]]:
    return dna_adapter.dump_python(records, mode="json")


def dna_to_json(records: list[DnaSegment]) -> str:
    return dna_adapter.dump_json(records).decode("utf-8")
