"""Contract for persistent record store implementations."""

from __future__ import annotations

import copy
from datetime import datetime
from typing import Any, Iterable, Optional, Protocol, runtime_checkable


class StoreWriteError(RuntimeError):
    """Raised when a store backend fails to persist or delete a value."""


@runtime_checkable
class PersistentRecordStore(Protocol):
    """Durable key/value settings plus keyed record collections."""

    def get_string_set(self, key: str) -> set[str]: ...

    def set_string_set(self, key: str, values: Iterable[str]) -> None: ...

    def get_flag(self, key: str) -> bool: ...

    def set_flag(self, key: str, value: bool) -> None: ...

    def get_timestamp(self, key: str) -> Optional[datetime]: ...

    def set_timestamp(self, key: str, value: datetime) -> None: ...

    def put_record(self, collection: str, record_id: str, data: dict[str, Any]) -> None: ...

    def get_record(self, collection: str, record_id: str) -> Optional[dict[str, Any]]: ...

    def list_records(self, collection: str) -> list[dict[str, Any]]: ...

    def delete_record(self, collection: str, record_id: str) -> bool: ...


class InMemoryRecordStore:
    """Process-local store, used for tests and the ``memory`` backend."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    def get_string_set(self, key: str) -> set[str]:
        return set(self._values.get(key) or ())

    def set_string_set(self, key: str, values: Iterable[str]) -> None:
        self._values[key] = set(values)

    def get_flag(self, key: str) -> bool:
        return bool(self._values.get(key, False))

    def set_flag(self, key: str, value: bool) -> None:
        self._values[key] = bool(value)

    def get_timestamp(self, key: str) -> Optional[datetime]:
        return self._values.get(key)

    def set_timestamp(self, key: str, value: datetime) -> None:
        self._values[key] = value

    def put_record(self, collection: str, record_id: str, data: dict[str, Any]) -> None:
        self._collections.setdefault(collection, {})[record_id] = copy.deepcopy(data)

    def get_record(self, collection: str, record_id: str) -> Optional[dict[str, Any]]:
        record = self._collections.get(collection, {}).get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def list_records(self, collection: str) -> list[dict[str, Any]]:
        return [copy.deepcopy(record) for record in self._collections.get(collection, {}).values()]

    def delete_record(self, collection: str, record_id: str) -> bool:
        records = self._collections.get(collection, {})
        return records.pop(record_id, None) is not None
