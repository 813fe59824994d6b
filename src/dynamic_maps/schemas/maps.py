"""Pydantic request/response models for map endpoints."""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field

ChainMethod = Literal[
    "markers",
    "kml",
    "styles",
    "zoom",
    "center",
    "fit",
    "refresh",
    "panToMarker",
    "pan_to_marker",
    "setMarkerIcon",
    "set_marker_icon",
    "hideMarker",
    "hide_marker",
    "showMarker",
    "show_marker",
]


class MapOperation(BaseModel):
    """One chained call replayed against the map builder."""

    method: ChainMethod
    args: List[Any] = Field(default_factory=list)
    kwargs: dict[str, Any] = Field(default_factory=dict)


class MapRenderRequest(BaseModel):
    locations: Any = Field(default=None, description="Coordinates (or a list of them) for the initial markers.")
    options: dict[str, Any] = Field(default_factory=dict, description="Map options, e.g. id, js, zoom.")
    chain: List[MapOperation] = Field(default_factory=list, description="Chained calls applied in order.")
    init: bool = Field(default=True, description="Register the page-load initialization script.")


class MapRenderResponse(BaseModel):
    id: str
    dna: List[dict[str, Any]]
    html: str
    assets: List[str]
    scripts: List[str]


class MapTagRequest(BaseModel):
    id: str = Field(..., description="DOM id of the map container.")
    dna: List[dict[str, Any]] = Field(..., description="Previously built DNA sequence.")
    init: bool = True


class CoordinatesRequest(BaseModel):
    locations: Any = None
    field: Optional[str | List[str]] = Field(default=None, description="Restrict to these address field handles.")


class CoordinatesResponse(BaseModel):
    coordinates: List[dict[str, Any]]
