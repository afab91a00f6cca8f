"""Saved route history backed by the record store."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from ...config import Settings, settings as default_settings
from ...models.domain import RouteData, SavedRoute
from ...persistence.base import PersistentRecordStore
from .codec import save_route_data, saved_route_from_record, saved_route_to_record

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _newest_first(routes: list[SavedRoute]) -> list[SavedRoute]:
    return sorted(routes, key=lambda route: route.created_date or _OLDEST, reverse=True)


class RouteHistoryRepository:
    """Save, list and favorite routes.

    Store write failures propagate as ``StoreWriteError``.
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

    @property
    def collection(self) -> str:
        return self.config.saved_routes_collection

    def _put(self, route: SavedRoute) -> None:
        self.store.put_record(self.collection, route.id, saved_route_to_record(route))

    def _all_routes(self) -> list[SavedRoute]:
        routes: list[SavedRoute] = []
        for record in self.store.list_records(self.collection):
            try:
                routes.append(saved_route_from_record(record))
            except (TypeError, ValueError) as exc:
                logger.warning(f"Skipping unreadable saved route record: {exc}")
        return routes

    def _matching(self, route_data: RouteData) -> list[SavedRoute]:
        return [
            route
            for route in _newest_first(self._all_routes())
            if route.start_location == route_data.start_location
            and route.end_location == route_data.end_location
            and route.total_distance == route_data.total_distance
        ]

    def save_route(self, route_data: RouteData, route_name: Optional[str] = None) -> SavedRoute:
        saved = save_route_data(
            route_data,
            route_id=str(uuid.uuid4()),
            created_date=self._clock(),
            route_name=route_name,
        )
        self._put(saved)
        logger.info("Route saved to history: %s", saved.route_name)
        return saved

    def load_history(self, limit: Optional[int] = None) -> list[SavedRoute]:
        limit = limit if limit is not None else self.config.history_fetch_limit
        routes = _newest_first(self._all_routes())[: max(limit, 0)]
        logger.debug("Loaded %s routes from history", len(routes))
        return routes

    def get_route(self, route_id: str) -> Optional[SavedRoute]:
        record = self.store.get_record(self.collection, route_id)
        if record is None:
            return None
        try:
            return saved_route_from_record(record)
        except (TypeError, ValueError) as exc:
            logger.warning(f"Saved route {route_id} is unreadable: {exc}")
            return None

    def delete_route(self, route_id: str) -> bool:
        return self.store.delete_record(self.collection, route_id)

    def save_favorite(self, route_data: RouteData, custom_name: str = "") -> SavedRoute:
        """Mark the matching saved route as favorite, creating one if none exists."""
        custom_name = custom_name.strip()
        existing = self._matching(route_data)
        if existing:
            route = existing[0]
            route.is_favorite = True
            route.custom_name = custom_name or None
            self._put(route)
            logger.info("Marked existing route %s as favorite", route.id)
            return route

        saved = save_route_data(
            route_data,
            route_id=str(uuid.uuid4()),
            created_date=self._clock(),
            route_name=custom_name or None,
        )
        saved.is_favorite = True
        saved.custom_name = custom_name or None
        self._put(saved)
        logger.info("Created new favorite route %s", saved.id)
        return saved

    def remove_favorite(self, route_data: RouteData) -> int:
        changed = 0
        for route in self._matching(route_data):
            if route.is_favorite:
                route.is_favorite = False
                self._put(route)
                changed += 1
        return changed

    def set_favorite(self, route_id: str, favorite: bool) -> Optional[SavedRoute]:
        route = self.get_route(route_id)
        if route is None:
            return None
        route.is_favorite = favorite
        self._put(route)
        return route

    def load_favorites(self) -> list[SavedRoute]:
        return [route for route in _newest_first(self._all_routes()) if route.is_favorite]

    def is_favorited(self, route_data: RouteData) -> bool:
        return any(route.is_favorite for route in self._matching(route_data))
