from datetime import datetime, timedelta, timezone

import pytest

from driveless.config import Settings
from driveless.models.domain import RouteData
from driveless.persistence.base import InMemoryRecordStore, StoreWriteError
from driveless.services.history import RouteHistoryRepository

START = datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc)


class TickingClock:
    def __init__(self) -> None:
        self.now = START

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=1)
        return self.now


def _route_data(start: str = "Home, Springfield", distance: str = "4.2 miles") -> RouteData:
    return RouteData(
        start_location=start,
        end_location="Work, Shelbyville",
        stops=["Gym, Springfield"],
        total_distance=distance,
        estimated_time="15 min",
    )


def _repository(store=None, **overrides) -> RouteHistoryRepository:
    config = Settings(store_backend="memory", **overrides)
    return RouteHistoryRepository(store or InMemoryRecordStore(), config=config, clock=TickingClock())


def test_save_route_assigns_id_date_and_name():
    repository = _repository()

    saved = repository.save_route(_route_data())

    assert saved.id
    assert saved.created_date == START + timedelta(minutes=1)
    assert saved.route_name == "Home → Work"
    assert repository.get_route(saved.id) == saved


def test_load_history_is_newest_first_and_limited():
    repository = _repository(history_fetch_limit=2)
    first = repository.save_route(_route_data("A, Town"))
    second = repository.save_route(_route_data("B, Town"))
    third = repository.save_route(_route_data("C, Town"))

    history = repository.load_history()

    assert [route.id for route in history] == [third.id, second.id]
    assert [route.id for route in repository.load_history(limit=10)] == [third.id, second.id, first.id]


def test_load_history_skips_unreadable_records():
    store = InMemoryRecordStore()
    repository = _repository(store)
    saved = repository.save_route(_route_data())
    store.put_record(repository.collection, "broken", {"routeName": "no id"})

    assert [route.id for route in repository.load_history()] == [saved.id]


def test_save_favorite_marks_existing_route():
    repository = _repository()
    saved = repository.save_route(_route_data())

    favorite = repository.save_favorite(_route_data(), custom_name="Commute")

    assert favorite.id == saved.id
    assert favorite.is_favorite
    assert favorite.custom_name == "Commute"
    assert len(repository.load_history()) == 1
    assert repository.is_favorited(_route_data())


def test_save_favorite_creates_route_when_missing():
    repository = _repository()

    favorite = repository.save_favorite(_route_data(), custom_name="  ")

    assert favorite.is_favorite
    assert favorite.custom_name is None
    assert favorite.route_name == "Home → Work"
    assert [route.id for route in repository.load_favorites()] == [favorite.id]


def test_remove_favorite_and_toggle():
    repository = _repository()
    saved = repository.save_favorite(_route_data(), custom_name="Commute")
    repository.save_route(_route_data(distance="9.9 miles"))

    assert repository.remove_favorite(_route_data()) == 1
    assert not repository.is_favorited(_route_data())
    assert repository.load_favorites() == []

    toggled = repository.set_favorite(saved.id, True)
    assert toggled is not None and toggled.is_favorite
    assert repository.set_favorite("missing", True) is None


def test_store_write_errors_propagate():
    class ReadOnlyStore(InMemoryRecordStore):
        def put_record(self, collection, record_id, data):
            raise StoreWriteError("read-only")

    repository = _repository(ReadOnlyStore())

    with pytest.raises(StoreWriteError):
        repository.save_route(_route_data())
