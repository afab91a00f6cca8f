"""Summary statistics, positional deletion and reconstruction for route history."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence

from ...config import Settings, settings as default_settings
from ...models.domain import RouteData, SavedRoute
from ...persistence.base import PersistentRecordStore, StoreWriteError
from .codec import reconstruct as reconstruct_route
from .formatting import format_relative, parse_distance

NO_RECENT_ROUTE_LABEL = "None"

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class HistorySummary:
    count: int
    total_distance_saved: str
    most_recent_label: str


class DeleteStatus(str, Enum):
    DELETED = "deleted"
    NOT_FOUND = "not_found"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class DeleteOutcome:
    index: int
    status: DeleteStatus
    route_id: Optional[str] = None
    error: Optional[str] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _route_distance(route: SavedRoute) -> float:
    if route.distance_value is not None:
        try:
            value = float(route.distance_value)
        except (TypeError, ValueError):
            value = math.nan
        if math.isfinite(value):
            return value
    distance = parse_distance(route.total_distance)
    if distance is None or not math.isfinite(distance.value):
        return 0.0
    return distance.value


class RouteHistoryAggregator:
    """Read-only statistics over saved routes, plus deletion by list position.

    The aggregator never sorts: callers hand it routes in display order (newest
    first) and positions refer to that order.
    """

    def __init__(
        self,
        store: PersistentRecordStore,
        config: Settings | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.config = config or default_settings
        self._clock = clock

    def summarize(self, routes: Sequence[SavedRoute], now: datetime | None = None) -> HistorySummary:
        total = sum(_route_distance(route) for route in routes)

        most_recent = NO_RECENT_ROUTE_LABEL
        if routes and routes[0].created_date is not None:
            most_recent = format_relative(routes[0].created_date, now or self._clock())

        return HistorySummary(
            count=len(routes),
            total_distance_saved=f"{total:.1f}",
            most_recent_label=most_recent,
        )

    def delete_at(self, routes: Sequence[SavedRoute], indices: Iterable[int]) -> list[DeleteOutcome]:
        """Delete the records at ``indices`` of ``routes``, one store call per position."""
        snapshot = list(routes)
        outcomes: list[DeleteOutcome] = []
        for index in sorted(set(indices)):
            if index < 0 or index >= len(snapshot):
                logger.debug("Skipping out-of-range history position %s", index)
                outcomes.append(DeleteOutcome(index=index, status=DeleteStatus.SKIPPED))
                continue

            route = snapshot[index]
            try:
                deleted = self.store.delete_record(self.config.saved_routes_collection, route.id)
            except StoreWriteError as exc:
                logger.warning(f"Failed to delete saved route {route.id}: {exc}")
                outcomes.append(
                    DeleteOutcome(index=index, status=DeleteStatus.FAILED, route_id=route.id, error=str(exc))
                )
                continue

            status = DeleteStatus.DELETED if deleted else DeleteStatus.NOT_FOUND
            if deleted:
                logger.info("Deleted route: %s", route.route_name or "Unnamed Route")
            outcomes.append(DeleteOutcome(index=index, status=status, route_id=route.id))
        return outcomes

    def reconstruct(self, route: SavedRoute) -> RouteData:
        return reconstruct_route(route)
