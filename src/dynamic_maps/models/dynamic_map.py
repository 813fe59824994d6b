"""Dynamic map model: an append-only log of map-building instructions."""

from __future__ import annotations

import copy
import html
import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from ..config import settings
from ..schemas.dna import (
    CenterRecord,
    DnaSegment,
    FitRecord,
    HideMarkerRecord,
    KmlRecord,
    MapRecord,
    MarkersRecord,
    PanToMarkerRecord,
    RefreshRecord,
    SetMarkerIconRecord,
    ShowMarkerRecord,
    StylesRecord,
    ZoomRecord,
    dna_to_json,
    dump_dna,
    parse_dna,
)
from ..services.coordinates import extract_coordinates, generate_id
from ..services.view import POS_END, View
from .domain import Location

logger = logging.getLogger(__name__)


class MisconfiguredModel(ValueError):
    """The DNA cannot be rendered as a map."""


class EmptyDna(MisconfiguredModel):
    pass


class InvalidDnaHead(MisconfiguredModel):
    pass


def _snapshot(value: Any) -> Any:
    """Detached copy of a caller value, with mapping keys as strings (as in JSON)."""
    if isinstance(value, Mapping):
        return {str(key): _snapshot(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_snapshot(item) for item in value]
    return copy.deepcopy(value)


def _normalize_options(options: Any) -> dict[str, Any]:
    if not options or not isinstance(options, Mapping):
        return {}
    return _snapshot(options)


class DynamicMap:
    """Fluent builder for a single map.

    Every chained call appends one record to the DNA, or does nothing when its
    input is unusable, so templates can chain freely. Errors surface only when
    the map is rendered with ``tag()``.
    """

    def __init__(self, locations: Any = None, options: Any = None, *, view: View | None = None) -> None:
        self.view = view or View()
        options = _normalize_options(options)

        # If no ID, automatically generate a random one
        if options.get("id") is None:
            options["id"] = generate_id(settings.map_id_prefix)
        self.id = options["id"]

        # Unless otherwise specified, preload the necessary JavaScript
        if not isinstance(options.get("js"), bool):
            options["js"] = True

        if options["js"]:
            self.view.register_asset_bundle(settings.js_api_bundle)

        if settings.dev_mode:
            self.view.register_js("googleMaps.log = true;", POS_END)

        self._dna: list[DnaSegment] = [
            MapRecord(locations=_snapshot(extract_coordinates(locations)), options=options)
        ]

    def __str__(self) -> str:
        return "To display a map, append `.tag()` to the map object."

    @classmethod
    def from_dna(cls, dna: Any, map_id: str, *, view: View | None = None) -> "DynamicMap":
        """Rebuild a map from serialized DNA without re-running construction."""
        instance = cls.__new__(cls)
        instance.view = view or View()
        instance.id = map_id
        instance._dna = list(parse_dna(dna))
        return instance

    def _append(self, record: DnaSegment) -> "DynamicMap":
        self._dna.append(record)
        return self

    def markers(self, locations: Any, options: Any = None) -> "DynamicMap":
        """Add one or more markers to the map."""
        if not locations:
            logger.debug("Map %s: markers() called without locations, skipping", self.id)
            return self
        return self._append(
            MarkersRecord(locations=_snapshot(extract_coordinates(locations)), options=_normalize_options(options))
        )

    def kml(self, url: Any, options: Any = None) -> "DynamicMap":
        """Add a KML layer to the map."""
        if not url:
            logger.debug("Map %s: kml() called without a URL, skipping", self.id)
            return self
        return self._append(KmlRecord(url=str(url), options=_normalize_options(options)))

    def styles(self, style_set: Any) -> "DynamicMap":
        """Style the map."""
        valid = isinstance(style_set, Mapping) or (
            isinstance(style_set, Sequence) and not isinstance(style_set, (str, bytes))
        )
        if not style_set or not valid:
            logger.debug("Map %s: styles() called without a valid style set, skipping", self.id)
            return self
        if isinstance(style_set, Mapping):
            return self._append(StylesRecord(styleSet=_snapshot(style_set)))
        return self._append(StylesRecord(styleSet=_snapshot(list(style_set))))

    def zoom(self, level: Any) -> "DynamicMap":
        return self._append(ZoomRecord(level=_snapshot(level)))

    def center(self, coords: Any) -> "DynamicMap":
        """Re-center the map."""
        if isinstance(coords, Location):
            coords = coords.get_coords() if coords.has_coords() else None
        if not coords:
            logger.debug("Map %s: center() called without coordinates, skipping", self.id)
            return self
        return self._append(CenterRecord(coords=_snapshot(coords)))

    def fit(self) -> "DynamicMap":
        """Fit map to existing marker bounds."""
        return self._append(FitRecord())

    def refresh(self) -> "DynamicMap":
        return self._append(RefreshRecord())

    def pan_to_marker(self, marker_id: Any) -> "DynamicMap":
        return self._append(PanToMarkerRecord(markerId=_snapshot(marker_id)))

    def set_marker_icon(self, marker_id: Any, icon: Any) -> "DynamicMap":
        return self._append(SetMarkerIconRecord(markerId=_snapshot(marker_id), icon=_snapshot(icon)))

    def hide_marker(self, marker_id: Any) -> "DynamicMap":
        return self._append(HideMarkerRecord(markerId=_snapshot(marker_id)))

    def show_marker(self, marker_id: Any) -> "DynamicMap":
        return self._append(ShowMarkerRecord(markerId=_snapshot(marker_id)))

    def tag(self, init: bool = True) -> str:
        """Render the map container holding the serialized DNA.

        Args:
            init: Register the script that initializes the map on page load

        Returns:
            HTML for the container element

        Raises:
            EmptyDna: The DNA holds no records
            InvalidDnaHead: The DNA does not begin with a ``map`` record
        """
        if not self._dna:
            raise EmptyDna("Model misconfigured. The map DNA is empty.")

        if self._dna[0].type != "map":
            raise InvalidDnaHead("Map model misconfigured. The chain must begin with a `map()` segment.")

        attributes = {
            "id": self.id,
            "class": settings.container_class,
            "data-dna": dna_to_json(self._dna),
        }
        rendered = " ".join(f'{name}="{html.escape(str(value), quote=True)}"' for name, value in attributes.items())
        markup = f"<div {rendered}>{html.escape(settings.loading_text)}</div>"

        if init:
            # JSON string literal; "<" escaped so the snippet cannot close a script tag
            map_id = json.dumps(str(self.id)).replace("<", "\\u003c")
            js = f"addEventListener('load', function(){{googleMaps.init({map_id})}});"
            self.view.register_js(js, POS_END)

        return markup

    def get_dna(self) -> list[DnaSegment]:
        """Return a copy of the DNA; the map's own log is never exposed."""
        return [record.model_copy(deep=True) for record in self._dna]

    def dna_payload(self) -> list[dict[str, Any]]:
        return dump_dna(self._dna)
