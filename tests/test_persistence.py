from datetime import datetime, timezone
from pathlib import Path

import pytest

from driveless.config import Settings
from driveless.persistence import InMemoryRecordStore, StoreWriteError, create_store
from driveless.persistence.database import SupabaseRecordStore
from driveless.persistence.filesystem import FileRecordStore

STAMP = datetime(2026, 10, 18, 7, 0, tzinfo=timezone.utc)


def test_file_store_persists_values_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    store = FileRecordStore(path)
    store.set_string_set("admins", ["b", "a", "a"])
    store.set_flag("mode", True)
    store.set_timestamp("login", STAMP)

    reopened = FileRecordStore(path)

    assert reopened.get_string_set("admins") == {"a", "b"}
    assert reopened.get_flag("mode") is True
    assert reopened.get_timestamp("login") == STAMP
    assert reopened.get_flag("missing") is False
    assert reopened.get_timestamp("missing") is None


def test_file_store_records(tmp_path: Path) -> None:
    store = FileRecordStore(tmp_path / "store.json")
    store.put_record("saved_routes", "r1", {"id": "r1", "route_name": "Home → Work"})
    store.put_record("saved_routes", "r2", {"id": "r2"})

    assert store.get_record("saved_routes", "r1") == {"id": "r1", "route_name": "Home → Work"}
    assert len(store.list_records("saved_routes")) == 2
    assert store.delete_record("saved_routes", "r1") is True
    assert store.delete_record("saved_routes", "r1") is False
    assert store.get_record("saved_routes", "r1") is None
    assert store.list_records("other") == []


def test_file_store_moves_corrupt_file_aside(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    path.write_text('{"values": {"admins": ["u1"]}, "records": {"saved', encoding="utf-8")

    store = FileRecordStore(path)

    assert store.get_string_set("admins") == set()
    store.set_flag("mode", True)
    assert store.get_flag("mode") is True

    preserved = list(tmp_path.glob("store.json.corrupt-*"))
    assert len(preserved) == 1
    assert preserved[0].read_text(encoding="utf-8") == '{"values": {"admins": ["u1"]}, "records": {"saved'


@pytest.mark.parametrize("content", ["[]", '"text"', '{"values": [], "records": {}}', '{"records": {"saved_routes": []}}'])
def test_file_store_treats_unexpected_shapes_as_corrupt(tmp_path: Path, content: str) -> None:
    path = tmp_path / "store.json"
    path.write_text(content, encoding="utf-8")

    store = FileRecordStore(path)

    assert store.get_flag("x") is False
    assert store.list_records("saved_routes") == []
    store.put_record("saved_routes", "r1", {"id": "r1"})
    assert store.get_record("saved_routes", "r1") == {"id": "r1"}
    assert [p.read_text(encoding="utf-8") for p in tmp_path.glob("store.json.corrupt-*")] == [content]


def test_file_store_refuses_write_when_corrupt_file_cannot_be_moved(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")
    store = FileRecordStore(path)

    def broken_rename(self, target):
        raise OSError("permission denied")

    monkeypatch.setattr(Path, "rename", broken_rename)

    with pytest.raises(StoreWriteError):
        store.set_flag("mode", True)
    assert path.read_text(encoding="utf-8") == "{not json"


def test_file_store_write_failure_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = FileRecordStore(tmp_path / "store.json")

    def broken_replace(self, target):
        raise OSError("read-only file system")

    monkeypatch.setattr(Path, "replace", broken_replace)

    with pytest.raises(StoreWriteError):
        store.set_flag("mode", True)


def test_memory_store_returns_copies() -> None:
    store = InMemoryRecordStore()
    record = {"id": "r1", "stops": ["a"]}
    store.put_record("saved_routes", "r1", record)
    record["stops"].append("b")

    fetched = store.get_record("saved_routes", "r1")
    fetched["stops"].append("c")

    assert store.get_record("saved_routes", "r1") == {"id": "r1", "stops": ["a"]}


def test_create_store_selects_backend(tmp_path: Path) -> None:
    assert isinstance(create_store(Settings(store_backend="memory")), InMemoryRecordStore)

    file_store = create_store(Settings(store_backend="file", data_root=tmp_path, store_file="s.json"))
    assert isinstance(file_store, FileRecordStore)
    assert file_store.path == (tmp_path / "s.json").resolve()


class _Response:
    def __init__(self, data):
        self.data = data


class _Query:
    def __init__(self, table: "_Table", action: str, payload=None) -> None:
        self.table = table
        self.action = action
        self.payload = payload
        self.filters: dict = {}

    def eq(self, column, value):
        self.filters[column] = value
        return self

    def limit(self, _count):
        return self

    def execute(self):
        rows = self.table.rows
        if self.action == "upsert":
            key = "key" if "key" in self.payload else "id"
            rows[:] = [row for row in rows if row.get(key) != self.payload[key]] + [self.payload]
            return _Response([self.payload])
        matched = [row for row in rows if all(row.get(k) == v for k, v in self.filters.items())]
        if self.action == "delete":
            rows[:] = [row for row in rows if row not in matched]
        return _Response(matched)


class _Table:
    def __init__(self) -> None:
        self.rows: list[dict] = []

    def select(self, _columns):
        return _Query(self, "select")

    def upsert(self, payload):
        return _Query(self, "upsert", payload)

    def delete(self):
        return _Query(self, "delete")


class FakeSupabase:
    def __init__(self) -> None:
        self.tables: dict[str, _Table] = {}

    def table(self, name):
        return self.tables.setdefault(name, _Table())


def test_supabase_store_round_trip() -> None:
    store = SupabaseRecordStore(client=FakeSupabase())

    store.set_string_set("admins", {"u1", "u2"})
    store.set_flag("mode", True)
    store.set_timestamp("login", STAMP)
    store.put_record("saved_routes", "r1", {"id": "r1"})

    assert store.get_string_set("admins") == {"u1", "u2"}
    assert store.get_flag("mode") is True
    assert store.get_timestamp("login") == STAMP
    assert store.list_records("saved_routes") == [{"id": "r1"}]
    assert store.delete_record("saved_routes", "r1") is True
    assert store.delete_record("saved_routes", "r1") is False


def test_supabase_store_wraps_write_errors() -> None:
    class BrokenClient(FakeSupabase):
        def table(self, name):
            raise ConnectionError("getaddrinfo failed")

    store = SupabaseRecordStore(client=BrokenClient())

    with pytest.raises(StoreWriteError):
        store.set_flag("mode", True)
    assert store.get_flag("mode") is False
    assert store.list_records("saved_routes") == []


def test_supabase_client_is_none_without_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    from driveless.config import settings
    from driveless.db import get_supabase_client

    monkeypatch.setattr(settings, "supabase_url", None)
    monkeypatch.setattr(settings, "supabase_key", None)
    get_supabase_client.cache_clear()
    try:
        assert get_supabase_client() is None
        with pytest.raises(ValueError):
            SupabaseRecordStore()
    finally:
        get_supabase_client.cache_clear()
