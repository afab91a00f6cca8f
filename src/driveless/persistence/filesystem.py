"""File-based persistence for admin settings and saved routes."""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from ..config import settings
from .base import StoreWriteError

logger = logging.getLogger(__name__)


def _empty_document() -> dict[str, Any]:
    return {"values": {}, "records": {}}


def _is_store_document(document: Any) -> bool:
    return (
        isinstance(document, dict)
        and isinstance(document.get("values", {}), dict)
        and isinstance(document.get("records", {}), dict)
        and all(isinstance(records, dict) for records in document.get("records", {}).values())
    )


class FileRecordStore:
    """JSON document on disk holding ``values`` and per-collection ``records``.

    The whole document is rewritten on every change; writes go to a temporary
    sibling file first and are then moved into place. A file that cannot be
    parsed as a store document is renamed to ``<name>.corrupt-<timestamp>`` and
    never overwritten.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = (path or settings.store_path).resolve()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _quarantine(self, reason: str, for_write: bool) -> None:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
        target = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
        try:
            self.path.rename(target)
        except OSError as exc:
            if for_write:
                raise StoreWriteError(f"Store file {self.path} is corrupt and could not be moved aside: {exc}") from exc
            logger.warning(f"Store file {self.path} is corrupt ({reason}) and could not be moved aside: {exc}")
            return
        logger.error(f"Store file {self.path} is corrupt ({reason}); moved it to {target} and starting empty")

    def _read(self, for_write: bool = False) -> dict[str, Any]:
        if not self.path.exists():
            return _empty_document()
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                document = json.load(handle)
        except ValueError as exc:
            self._quarantine(str(exc), for_write)
            return _empty_document()
        except OSError as exc:
            if for_write:
                raise StoreWriteError(f"Failed to read store file {self.path}: {exc}") from exc
            logger.warning(f"Unreadable store file {self.path}: {exc}")
            return _empty_document()
        if not _is_store_document(document):
            self._quarantine(f"unexpected document shape ({type(document).__name__})", for_write)
            return _empty_document()
        document.setdefault("values", {})
        document.setdefault("records", {})
        return document

    def _write(self, document: dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as handle:
                json.dump(document, handle, ensure_ascii=False, indent=2)
            tmp_path.replace(self.path)
        except (OSError, TypeError, ValueError) as exc:
            raise StoreWriteError(f"Failed to write store file {self.path}: {exc}") from exc

    def _set_value(self, key: str, value: Any) -> None:
        with self._lock:
            document = self._read(for_write=True)
            document["values"][key] = value
            self._write(document)

    def get_string_set(self, key: str) -> set[str]:
        with self._lock:
            values = self._read()["values"].get(key) or []
        return {str(value) for value in values}

    def set_string_set(self, key: str, values: Iterable[str]) -> None:
        self._set_value(key, sorted(set(values)))

    def get_flag(self, key: str) -> bool:
        with self._lock:
            return bool(self._read()["values"].get(key, False))

    def set_flag(self, key: str, value: bool) -> None:
        self._set_value(key, bool(value))

    def get_timestamp(self, key: str) -> Optional[datetime]:
        with self._lock:
            raw = self._read()["values"].get(key)
        if not raw:
            return None
        try:
            return datetime.fromisoformat(raw)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring malformed timestamp stored under '{key}': {raw!r}")
            return None

    def set_timestamp(self, key: str, value: datetime) -> None:
        self._set_value(key, value.isoformat())

    def put_record(self, collection: str, record_id: str, data: dict[str, Any]) -> None:
        with self._lock:
            document = self._read(for_write=True)
            document["records"].setdefault(collection, {})[record_id] = data
            self._write(document)

    def get_record(self, collection: str, record_id: str) -> Optional[dict[str, Any]]:
        with self._lock:
            return self._read()["records"].get(collection, {}).get(record_id)

    def list_records(self, collection: str) -> list[dict[str, Any]]:
        with self._lock:
            return list(self._read()["records"].get(collection, {}).values())

    def delete_record(self, collection: str, record_id: str) -> bool:
        with self._lock:
            document = self._read(for_write=True)
            records = document["records"].get(collection, {})
            if record_id not in records:
                return False
            del records[record_id]
            self._write(document)
            return True
