"""Domain models for routes, saved history records and admin state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Set


class StopType(str, Enum):
    START = "start"
    STOP = "stop"
    END = "end"


@dataclass(slots=True)
class RouteStop:
    """A single stop of an optimized route."""

    address: str
    name: str
    original_input: str
    type: StopType
    distance: Optional[str] = None
    duration: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.name and self.name != self.address:
            return self.name
        if "," in self.address:
            first_part = self.address.split(",", 1)[0].strip()
            if first_part and not first_part[0].isdigit():
                return first_part
        return self.original_input or self.address


@dataclass(slots=True)
class RouteData:
    """Operational representation of a multi-stop route.

    ``stops`` keeps the intermediate stops in the order the user entered them,
    ``optimized_stops`` holds start, intermediate and end stops in driving order.
    """

    start_location: str
    end_location: str
    stops: List[str] = field(default_factory=list)
    is_round_trip: bool = False
    consider_traffic: bool = False
    total_distance: str = "0 miles"
    estimated_time: str = "0 min"
    optimized_stops: List[RouteStop] = field(default_factory=list)


@dataclass(slots=True)
class SavedRoute:
    """Persisted summary of a previously computed route.

    List-valued fields (``stops``, ``waypoint_order``, ``stop_display_names``) are
    stored as JSON text so records stay compatible with the mobile client's store.
    """

    id: str
    created_date: Optional[datetime]
    route_name: Optional[str] = None
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    total_distance: Optional[str] = None
    distance_value: Optional[float] = None
    distance_unit: Optional[str] = None
    estimated_time: Optional[str] = None
    consider_traffic: bool = False
    is_round_trip: bool = False
    stops: Optional[str] = None
    waypoint_order: Optional[str] = None
    stop_display_names: Optional[str] = None
    start_location_display_name: Optional[str] = None
    end_location_display_name: Optional[str] = None
    is_favorite: bool = False
    custom_name: Optional[str] = None


@dataclass(slots=True)
class AdminState:
    """Admin allow-list plus the global admin-mode flag."""

    admin_users: Set[str] = field(default_factory=set)
    admin_mode: bool = False
    last_login_at: Optional[datetime] = None

    def grants(self, identity: Optional[str]) -> bool:
        if self.admin_mode:
            return True
        return identity is not None and identity in self.admin_users
