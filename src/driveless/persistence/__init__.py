"""Record store backends."""

from __future__ import annotations

from ..config import Settings, settings as default_settings
from .base import InMemoryRecordStore, PersistentRecordStore, StoreWriteError


def create_store(config: Settings | None = None) -> PersistentRecordStore:
    """Build the store selected by ``store_backend``."""
    config = config or default_settings
    if config.store_backend == "memory":
        return InMemoryRecordStore()
    if config.store_backend == "supabase":
        from .database import SupabaseRecordStore

        return SupabaseRecordStore()
    from .filesystem import FileRecordStore

    return FileRecordStore(config.store_path)


__all__ = ["InMemoryRecordStore", "PersistentRecordStore", "StoreWriteError", "create_store"]
