"""High-level orchestration for map rendering requests."""

from __future__ import annotations

import logging

from ..models.dynamic_map import DynamicMap
from ..schemas.maps import MapOperation, MapRenderRequest, MapRenderResponse, MapTagRequest
from .view import View

logger = logging.getLogger(__name__)

# Chain method names as written in templates, mapped to builder methods.
_CHAIN_METHODS = {
    "markers": "markers",
    "kml": "kml",
    "styles": "styles",
    "zoom": "zoom",
    "center": "center",
    "fit": "fit",
    "refresh": "refresh",
    "panToMarker": "pan_to_marker",
    "pan_to_marker": "pan_to_marker",
    "setMarkerIcon": "set_marker_icon",
    "set_marker_icon": "set_marker_icon",
    "hideMarker": "hide_marker",
    "hide_marker": "hide_marker",
    "showMarker": "show_marker",
    "show_marker": "show_marker",
}


def apply_operation(dynamic_map: DynamicMap, operation: MapOperation) -> DynamicMap:
    method = getattr(dynamic_map, _CHAIN_METHODS[operation.method])
    try:
        return method(*operation.args, **operation.kwargs)
    except TypeError as exc:
        raise ValueError(f"Invalid arguments for '{operation.method}': {exc}") from exc


def _response(dynamic_map: DynamicMap, html: str, view: View) -> MapRenderResponse:
    return MapRenderResponse(
        id=str(dynamic_map.id),
        dna=dynamic_map.dna_payload(),
        html=html,
        assets=list(view.asset_bundles),
        scripts=view.all_js(),
    )


def render_map(request: MapRenderRequest, view: View | None = None) -> MapRenderResponse:
    """Build a map from a request, replay its chain and render the container."""
    view = view or View()
    dynamic_map = DynamicMap(request.locations, request.options, view=view)
    for operation in request.chain:
        dynamic_map = apply_operation(dynamic_map, operation)

    html = dynamic_map.tag(init=request.init)
    logger.info(f"Rendered map '{dynamic_map.id}' with {len(dynamic_map.get_dna())} DNA segments")
    return _response(dynamic_map, html, view)


def render_dna(request: MapTagRequest, view: View | None = None) -> MapRenderResponse:
    """Render previously built DNA without re-running the chain."""
    view = view or View()
    dynamic_map = DynamicMap.from_dna(request.dna, request.id, view=view)
    html = dynamic_map.tag(init=request.init)
    return _response(dynamic_map, html, view)
