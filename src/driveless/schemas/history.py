"""Route history request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import RouteData, RouteStop, SavedRoute, StopType
from ..services.history import DeleteOutcome, HistorySummary


class RouteStopModel(BaseModel):
    address: str
    name: str = ""
    original_input: str = ""
    type: StopType = StopType.STOP
    distance: Optional[str] = None
    duration: Optional[str] = None

    @classmethod
    def from_domain(cls, stop: RouteStop) -> "RouteStopModel":
        return cls(
            address=stop.address,
            name=stop.name,
            original_input=stop.original_input,
            type=stop.type,
            distance=stop.distance,
            duration=stop.duration,
        )

    def to_domain(self) -> RouteStop:
        return RouteStop(
            address=self.address,
            name=self.name,
            original_input=self.original_input,
            type=self.type,
            distance=self.distance,
            duration=self.duration,
        )


class RouteDataModel(BaseModel):
    start_location: str = Field(..., min_length=1)
    end_location: str = Field(..., min_length=1)
    stops: List[str] = Field(default_factory=list)
    is_round_trip: bool = False
    consider_traffic: bool = False
    total_distance: str = "0 miles"
    estimated_time: str = "0 min"
    optimized_stops: List[RouteStopModel] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, route: RouteData) -> "RouteDataModel":
        return cls(
            start_location=route.start_location,
            end_location=route.end_location,
            stops=list(route.stops),
            is_round_trip=route.is_round_trip,
            consider_traffic=route.consider_traffic,
            total_distance=route.total_distance,
            estimated_time=route.estimated_time,
            optimized_stops=[RouteStopModel.from_domain(stop) for stop in route.optimized_stops],
        )

    def to_domain(self) -> RouteData:
        return RouteData(
            start_location=self.start_location,
            end_location=self.end_location,
            stops=list(self.stops),
            is_round_trip=self.is_round_trip,
            consider_traffic=self.consider_traffic,
            total_distance=self.total_distance,
            estimated_time=self.estimated_time,
            optimized_stops=[stop.to_domain() for stop in self.optimized_stops],
        )


class SavedRouteModel(BaseModel):
    id: str
    route_name: Optional[str] = None
    custom_name: Optional[str] = None
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    start_location_display_name: Optional[str] = None
    end_location_display_name: Optional[str] = None
    total_distance: Optional[str] = None
    distance_value: Optional[float] = None
    distance_unit: Optional[str] = None
    estimated_time: Optional[str] = None
    created_date: Optional[datetime] = None
    consider_traffic: bool = False
    is_round_trip: bool = False
    is_favorite: bool = False

    @classmethod
    def from_domain(cls, route: SavedRoute) -> "SavedRouteModel":
        return cls(
            id=route.id,
            route_name=route.route_name,
            custom_name=route.custom_name,
            start_location=route.start_location,
            end_location=route.end_location,
            start_location_display_name=route.start_location_display_name,
            end_location_display_name=route.end_location_display_name,
            total_distance=route.total_distance,
            distance_value=route.distance_value,
            distance_unit=route.distance_unit,
            estimated_time=route.estimated_time,
            created_date=route.created_date,
            consider_traffic=route.consider_traffic,
            is_round_trip=route.is_round_trip,
            is_favorite=route.is_favorite,
        )


class HistorySummaryModel(BaseModel):
    count: int
    total_distance_saved: str
    most_recent_label: str

    @classmethod
    def from_domain(cls, summary: HistorySummary) -> "HistorySummaryModel":
        return cls(
            count=summary.count,
            total_distance_saved=summary.total_distance_saved,
            most_recent_label=summary.most_recent_label,
        )


class SaveRouteRequest(BaseModel):
    route: RouteDataModel
    route_name: Optional[str] = Field(default=None, description="Overrides the generated route name.")


class DeleteRoutesRequest(BaseModel):
    indices: List[int] = Field(..., description="Positions in the current history list (newest first).")


class DeleteOutcomeModel(BaseModel):
    index: int
    status: str
    route_id: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_domain(cls, outcome: DeleteOutcome) -> "DeleteOutcomeModel":
        return cls(
            index=outcome.index,
            status=outcome.status.value,
            route_id=outcome.route_id,
            error=outcome.error,
        )


class DeleteRoutesResponse(BaseModel):
    outcomes: List[DeleteOutcomeModel]


class FavoriteRequest(BaseModel):
    route: RouteDataModel
    custom_name: str = ""


class FavoriteToggleRequest(BaseModel):
    favorite: bool = True
