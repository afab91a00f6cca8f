"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...config import Settings
from ...persistence.base import PersistentRecordStore
from ..dependencies import get_settings, get_store

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/store", status_code=status.HTTP_200_OK)
def health_store(
    config: Settings = Depends(get_settings),
    store: PersistentRecordStore = Depends(get_store),
) -> dict:
    """Check that the configured record store can be read."""
    try:
        routes = store.list_records(config.saved_routes_collection)
        return {"backend": config.store_backend, "healthy": True, "saved_routes": len(routes)}
    except Exception as e:
        return {"backend": config.store_backend, "healthy": False, "error": str(e)}
