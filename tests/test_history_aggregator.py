from datetime import datetime, timedelta, timezone

from driveless.config import Settings
from driveless.models.domain import SavedRoute
from driveless.persistence.base import InMemoryRecordStore, StoreWriteError
from driveless.services.history import DeleteStatus, RouteHistoryAggregator, RouteHistoryRepository
from driveless.services.history.codec import saved_route_to_record
from driveless.services.history.formatting import format_relative, parse_distance

NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)
CONFIG = Settings(store_backend="memory")


def _route(rid: str, distance: str | None = "1.0 miles", age: timedelta = timedelta(hours=1)) -> SavedRoute:
    return SavedRoute(
        id=rid,
        created_date=NOW - age,
        route_name=f"Route {rid}",
        start_location="Home",
        end_location="Work",
        total_distance=distance,
        estimated_time="20 min",
    )


def _aggregator(store=None) -> RouteHistoryAggregator:
    return RouteHistoryAggregator(store or InMemoryRecordStore(), config=CONFIG, clock=lambda: NOW)


def _seed(store, routes):
    for route in routes:
        store.put_record(CONFIG.saved_routes_collection, route.id, saved_route_to_record(route))


def test_summarize_empty_history():
    summary = _aggregator().summarize([])

    assert summary.count == 0
    assert summary.total_distance_saved == "0.0"
    assert summary.most_recent_label == "None"


def test_summarize_tolerates_malformed_distances():
    routes = [_route("a", "10.0 miles"), _route("b", "5.5 miles"), _route("c", "bad")]

    summary = _aggregator().summarize(routes)

    assert summary.count == 3
    assert summary.total_distance_saved == "15.5"


def test_summarize_handles_missing_and_structured_distances():
    structured = _route("a", None)
    structured.distance_value = 2.2
    routes = [structured, _route("b", None), _route("c", "1,000.5 miles"), _route("d", "")]

    summary = _aggregator().summarize(routes)

    assert summary.total_distance_saved == "1002.7"


def test_summarize_ignores_non_finite_distance_values():
    not_a_number = _route("a", "3 miles")
    not_a_number.distance_value = "nan"
    infinite = _route("b", None)
    infinite.distance_value = float("inf")
    garbage = _route("c", "1.5 miles")
    garbage.distance_value = "lots"

    summary = _aggregator().summarize([not_a_number, infinite, garbage])

    assert summary.total_distance_saved == "4.5"


def test_summarize_legacy_records_with_numeric_fields():
    store = InMemoryRecordStore()
    store.put_record(CONFIG.saved_routes_collection, "x", {"id": "x", "totalDistance": 12.5, "distanceValue": "nan"})
    store.put_record(CONFIG.saved_routes_collection, "y", {"id": "y", "totalDistance": 7, "estimatedTime": 20})
    routes = RouteHistoryRepository(store, config=CONFIG).load_history()

    summary = _aggregator(store).summarize(routes)

    assert summary.count == 2
    assert summary.total_distance_saved == "19.5"


def test_summarize_uses_first_route_without_sorting():
    routes = [_route("old", age=timedelta(days=2, minutes=5)), _route("new", age=timedelta(minutes=3))]

    summary = _aggregator().summarize(routes)

    assert summary.most_recent_label == "2 days ago"


def test_summarize_without_created_date():
    route = _route("a")
    route.created_date = None

    assert _aggregator().summarize([route]).most_recent_label == "None"


def test_delete_at_skips_out_of_range_positions():
    store = InMemoryRecordStore()
    routes = [_route("a"), _route("b"), _route("c")]
    _seed(store, routes)

    outcomes = _aggregator(store).delete_at(routes, {1, 7, -1})

    by_index = {outcome.index: outcome for outcome in outcomes}
    assert by_index[1].status is DeleteStatus.DELETED
    assert by_index[1].route_id == "b"
    assert by_index[7].status is DeleteStatus.SKIPPED
    assert by_index[-1].status is DeleteStatus.SKIPPED
    remaining = {record["id"] for record in store.list_records(CONFIG.saved_routes_collection)}
    assert remaining == {"a", "c"}


def test_delete_at_uses_original_positions():
    store = InMemoryRecordStore()
    routes = [_route("a"), _route("b"), _route("c"), _route("d")]
    _seed(store, routes)

    outcomes = _aggregator(store).delete_at(routes, [3, 0, 2])

    assert [outcome.index for outcome in outcomes] == [0, 2, 3]
    assert [outcome.route_id for outcome in outcomes] == ["a", "c", "d"]
    remaining = {record["id"] for record in store.list_records(CONFIG.saved_routes_collection)}
    assert remaining == {"b"}


def test_delete_at_reports_failures_per_route():
    class FlakyStore(InMemoryRecordStore):
        def delete_record(self, collection, record_id):
            if record_id == "b":
                raise StoreWriteError("network down")
            return super().delete_record(collection, record_id)

    store = FlakyStore()
    routes = [_route("a"), _route("b"), _route("c")]
    _seed(store, routes[:2])

    outcomes = _aggregator(store).delete_at(routes, [0, 1, 2])

    assert [outcome.status for outcome in outcomes] == [
        DeleteStatus.DELETED,
        DeleteStatus.FAILED,
        DeleteStatus.NOT_FOUND,
    ]
    assert outcomes[1].error == "network down"


def test_parse_distance():
    assert parse_distance("12.3 miles").value == 12.3
    assert parse_distance("12.3 miles").unit == "miles"
    assert parse_distance("7").unit is None
    assert parse_distance("bad") is None
    assert parse_distance("12 miles and change") is None
    assert parse_distance(None) is None
    assert parse_distance(12.5) is None


def test_format_relative_labels():
    assert format_relative(NOW - timedelta(seconds=3), NOW) == "just now"
    assert format_relative(NOW - timedelta(minutes=1, seconds=20), NOW) == "1 minute ago"
    assert format_relative(NOW - timedelta(hours=5), NOW) == "5 hours ago"
    assert format_relative(NOW - timedelta(days=15), NOW) == "2 weeks ago"
    assert format_relative(NOW - timedelta(days=400), NOW) == "1 year ago"
    assert format_relative(NOW + timedelta(hours=3, minutes=1), NOW) == "in 3 hours"
    assert format_relative((NOW - timedelta(days=1, hours=1)).replace(tzinfo=None), NOW) == "1 day ago"
