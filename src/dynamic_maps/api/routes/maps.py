"""API routes for dynamic map rendering."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.maps import (
    CoordinatesRequest,
    CoordinatesResponse,
    MapRenderRequest,
    MapRenderResponse,
    MapTagRequest,
)
from ...services.coordinates import extract_coordinates
from ...services.rendering import render_dna, render_map

router = APIRouter(prefix="/maps", tags=["maps"])

logger = logging.getLogger(__name__)


@router.post("/render", response_model=MapRenderResponse, status_code=status.HTTP_200_OK)
def render(payload: MapRenderRequest) -> MapRenderResponse:
    """Build a map, apply the chained calls and return its DNA and markup."""
    try:
        return render_map(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error rendering map: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to render map: {str(exc)}"
        ) from exc


@router.post("/tag", response_model=MapRenderResponse, status_code=status.HTTP_200_OK)
def tag(payload: MapTagRequest) -> MapRenderResponse:
    """Render a container for DNA that was built earlier."""
    try:
        return render_dna(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error rendering stored map DNA: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to render map: {str(exc)}"
        ) from exc


@router.post("/coordinates", response_model=CoordinatesResponse, status_code=status.HTTP_200_OK)
def coordinates(payload: CoordinatesRequest) -> CoordinatesResponse:
    options = {"field": payload.field} if payload.field else None
    return CoordinatesResponse(coordinates=extract_coordinates(payload.locations, options))
