"""Route history services."""

from .aggregator import DeleteOutcome, DeleteStatus, HistorySummary, RouteHistoryAggregator
from .codec import reconstruct, save_route_data
from .repository import RouteHistoryRepository

__all__ = [
    "DeleteOutcome",
    "DeleteStatus",
    "HistorySummary",
    "RouteHistoryAggregator",
    "RouteHistoryRepository",
    "reconstruct",
    "save_route_data",
]
