"""Route history endpoints."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...persistence.base import StoreWriteError
from ...schemas.history import (
    DeleteOutcomeModel,
    DeleteRoutesRequest,
    DeleteRoutesResponse,
    FavoriteRequest,
    FavoriteToggleRequest,
    HistorySummaryModel,
    RouteDataModel,
    SavedRouteModel,
    SaveRouteRequest,
)
from ...services.history import RouteHistoryAggregator, RouteHistoryRepository
from ..dependencies import get_history_aggregator, get_history_repository

router = APIRouter(prefix="/history", tags=["history"])

logger = logging.getLogger(__name__)


def _store_unavailable(exc: StoreWriteError) -> HTTPException:
    logger.warning(f"Route history write failed: {exc}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Route history could not be saved: {exc}",
    )


@router.get("", response_model=List[SavedRouteModel], status_code=status.HTTP_200_OK)
def list_history(
    limit: int | None = Query(default=None, ge=1, description="Maximum number of routes, newest first."),
    repository: RouteHistoryRepository = Depends(get_history_repository),
) -> List[SavedRouteModel]:
    return [SavedRouteModel.from_domain(route) for route in repository.load_history(limit)]


@router.post("", response_model=SavedRouteModel, status_code=status.HTTP_201_CREATED)
def save_route(
    payload: SaveRouteRequest,
    repository: RouteHistoryRepository = Depends(get_history_repository),
) -> SavedRouteModel:
    try:
        saved = repository.save_route(payload.route.to_domain(), route_name=payload.route_name)
    except StoreWriteError as exc:
        raise _store_unavailable(exc) from exc
    return SavedRouteModel.from_domain(saved)


@router.get("/summary", response_model=HistorySummaryModel, status_code=status.HTTP_200_OK)
def history_summary(
    repository: RouteHistoryRepository = Depends(get_history_repository),
    aggregator: RouteHistoryAggregator = Depends(get_history_aggregator),
) -> HistorySummaryModel:
    return HistorySummaryModel.from_domain(aggregator.summarize(repository.load_history()))


@router.post("/delete", response_model=DeleteRoutesResponse, status_code=status.HTTP_200_OK)
def delete_routes(
    payload: DeleteRoutesRequest,
    repository: RouteHistoryRepository = Depends(get_history_repository),
    aggregator: RouteHistoryAggregator = Depends(get_history_aggregator),
) -> DeleteRoutesResponse:
    """Delete routes by their position in the current history list."""
    outcomes = aggregator.delete_at(repository.load_history(), payload.indices)
    return DeleteRoutesResponse(outcomes=[DeleteOutcomeModel.from_domain(outcome) for outcome in outcomes])


@router.get("/favorites", response_model=List[SavedRouteModel], status_code=status.HTTP_200_OK)
def list_favorites(repository: RouteHistoryRepository = Depends(get_history_repository)) -> List[SavedRouteModel]:
    return [SavedRouteModel.from_domain(route) for route in repository.load_favorites()]


@router.post("/favorites", response_model=SavedRouteModel, status_code=status.HTTP_200_OK)
def save_favorite(
    payload: FavoriteRequest,
    repository: RouteHistoryRepository = Depends(get_history_repository),
) -> SavedRouteModel:
    try:
        saved = repository.save_favorite(payload.route.to_domain(), payload.custom_name)
    except StoreWriteError as exc:
        raise _store_unavailable(exc) from exc
    return SavedRouteModel.from_domain(saved)


@router.post("/favorites/remove", status_code=status.HTTP_200_OK)
def remove_favorite(
    payload: RouteDataModel,
    repository: RouteHistoryRepository = Depends(get_history_repository),
) -> dict:
    try:
        changed = repository.remove_favorite(payload.to_domain())
    except StoreWriteError as exc:
        raise _store_unavailable(exc) from exc
    return {"success": True, "updated": changed}


@router.get("/{route_id}/route-data", response_model=RouteDataModel, status_code=status.HTTP_200_OK)
def route_data(
    route_id: str,
    repository: RouteHistoryRepository = Depends(get_history_repository),
    aggregator: RouteHistoryAggregator = Depends(get_history_aggregator),
) -> RouteDataModel:
    saved = repository.get_route(route_id)
    if saved is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Route {route_id} not found")
    try:
        return RouteDataModel.from_domain(aggregator.reconstruct(saved))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error reconstructing route {route_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Could not rebuild route {route_id}",
        ) from exc


@router.put("/{route_id}/favorite", response_model=SavedRouteModel, status_code=status.HTTP_200_OK)
def toggle_favorite(
    route_id: str,
    payload: FavoriteToggleRequest,
    repository: RouteHistoryRepository = Depends(get_history_repository),
) -> SavedRouteModel:
    try:
        route = repository.set_favorite(route_id, payload.favorite)
    except StoreWriteError as exc:
        raise _store_unavailable(exc) from exc
    if route is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Route {route_id} not found")
    return SavedRouteModel.from_domain(route)
