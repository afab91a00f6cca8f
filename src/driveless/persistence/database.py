"""Supabase-backed record store.

Settings live in a two-column ``app_settings`` table (``key`` text primary key,
``value`` jsonb). Each record collection maps to a table of the same name with an
``id`` text primary key and a ``data`` jsonb column holding the record.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, Optional

from supabase import Client

from ..db.supabase import get_supabase_client
from .base import StoreWriteError

SETTINGS_TABLE = "app_settings"

logger = logging.getLogger(__name__)


class SupabaseRecordStore:
    def __init__(self, client: Client | None = None) -> None:
        self.client = client or get_supabase_client()
        if self.client is None:
            raise ValueError(
                "Supabase is not configured. Set DRIVELESS_SUPABASE_URL and DRIVELESS_SUPABASE_KEY."
            )

    def _get_value(self, key: str) -> Any:
        try:
            response = self.client.table(SETTINGS_TABLE).select("value").eq("key", key).limit(1).execute()
        except Exception as e:
            logger.warning(f"Failed to read setting '{key}' from database: {e}")
            return None
        rows = response.data or []
        return rows[0].get("value") if rows else None

    def _set_value(self, key: str, value: Any) -> None:
        try:
            self.client.table(SETTINGS_TABLE).upsert({"key": key, "value": value}).execute()
        except Exception as e:
            raise StoreWriteError(f"Failed to write setting '{key}': {e}") from e

    def get_string_set(self, key: str) -> set[str]:
        value = self._get_value(key)
        if not isinstance(value, list):
            return set()
        return {str(item) for item in value}

    def set_string_set(self, key: str, values: Iterable[str]) -> None:
        self._set_value(key, sorted(set(values)))

    def get_flag(self, key: str) -> bool:
        return bool(self._get_value(key))

    def set_flag(self, key: str, value: bool) -> None:
        self._set_value(key, bool(value))

    def get_timestamp(self, key: str) -> Optional[datetime]:
        value = self._get_value(key)
        if not value:
            return None
        try:
            return datetime.fromisoformat(str(value))
        except ValueError:
            logger.warning(f"Ignoring malformed timestamp stored under '{key}': {value!r}")
            return None

    def set_timestamp(self, key: str, value: datetime) -> None:
        self._set_value(key, value.isoformat())

    def put_record(self, collection: str, record_id: str, data: dict[str, Any]) -> None:
        try:
            self.client.table(collection).upsert({"id": record_id, "data": data}).execute()
        except Exception as e:
            raise StoreWriteError(f"Failed to save record {record_id} to '{collection}': {e}") from e

    def get_record(self, collection: str, record_id: str) -> Optional[dict[str, Any]]:
        try:
            response = self.client.table(collection).select("data").eq("id", record_id).limit(1).execute()
        except Exception as e:
            logger.warning(f"Failed to read record {record_id} from '{collection}': {e}")
            return None
        rows = response.data or []
        return rows[0].get("data") if rows else None

    def list_records(self, collection: str) -> list[dict[str, Any]]:
        try:
            response = self.client.table(collection).select("data").execute()
        except Exception as e:
            logger.warning(f"Failed to retrieve records from '{collection}': {e}")
            return []
        return [row["data"] for row in (response.data or []) if isinstance(row.get("data"), dict)]

    def delete_record(self, collection: str, record_id: str) -> bool:
        try:
            response = self.client.table(collection).delete().eq("id", record_id).execute()
        except Exception as e:
            raise StoreWriteError(f"Failed to delete record {record_id} from '{collection}': {e}") from e
        return bool(response.data)
