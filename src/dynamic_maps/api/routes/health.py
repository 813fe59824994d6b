"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/config", status_code=status.HTTP_200_OK)
def health_config() -> dict:
    """Report the non-secret settings the map runtime depends on."""
    return {
        "container_class": settings.container_class,
        "js_api_bundle": settings.js_api_bundle,
        "dev_mode": settings.dev_mode,
    }
