"""Conversion between operational routes, saved routes and store records."""

from __future__ import annotations

import json
import math
import re
from dataclasses import asdict, fields
from datetime import datetime, timezone
from typing import Any, Optional

from ...models.domain import RouteData, RouteStop, SavedRoute, StopType
from .formatting import parse_distance
from .naming import extract_business_name, generate_route_name

LEGACY_STOP_SEPARATOR = "|||"

_SAVED_ROUTE_FIELDS = {item.name for item in fields(SavedRoute)}
_LIST_FIELDS = ("stops", "waypoint_order", "stop_display_names")
_TEXT_FIELDS = (
    "route_name",
    "start_location",
    "end_location",
    "total_distance",
    "distance_unit",
    "estimated_time",
    "start_location_display_name",
    "end_location_display_name",
    "custom_name",
)
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _encode_list(values: list[str]) -> Optional[str]:
    return json.dumps(values, ensure_ascii=False) if values else None


def _decode_list(text: Optional[str]) -> Optional[list[str]]:
    if not text:
        return None
    try:
        decoded = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(decoded, list):
        return None
    return [str(item) for item in decoded]


def _decode_stops(text: Optional[str]) -> list[str]:
    decoded = _decode_list(text)
    if decoded is not None:
        return decoded
    if not text:
        return []
    return [part for part in text.split(LEGACY_STOP_SEPARATOR) if part]


def save_route_data(
    route_data: RouteData,
    *,
    route_id: str,
    created_date: datetime,
    route_name: Optional[str] = None,
) -> SavedRoute:
    """Build the stored form of ``route_data``. ``reconstruct`` is its left inverse."""
    saved = SavedRoute(
        id=route_id,
        created_date=created_date,
        start_location=route_data.start_location,
        end_location=route_data.end_location,
        total_distance=route_data.total_distance,
        estimated_time=route_data.estimated_time,
        consider_traffic=route_data.consider_traffic,
        is_round_trip=route_data.is_round_trip,
        stops=_encode_list(list(route_data.stops)),
    )

    distance = parse_distance(route_data.total_distance)
    if distance is not None:
        saved.distance_value = distance.value
        saved.distance_unit = distance.unit

    optimized = route_data.optimized_stops
    if optimized:
        first, last = optimized[0], optimized[-1]
        saved.start_location_display_name = first.display_name
        saved.end_location_display_name = last.display_name
        saved.stop_display_names = _encode_list(
            [stop.display_name for stop in optimized[1:-1]]
        )
        saved.waypoint_order = _encode_list([stop.address for stop in optimized])
    else:
        saved.start_location_display_name = extract_business_name(route_data.start_location)
        saved.end_location_display_name = extract_business_name(route_data.end_location)

    saved.route_name = route_name or generate_route_name(route_data, created_date)
    return saved


def reconstruct(route: SavedRoute) -> RouteData:
    start = route.start_location or ""
    end = route.end_location or ""
    stops = _decode_stops(route.stops)
    display_names = _decode_list(route.stop_display_names) or []

    waypoints = _decode_list(route.waypoint_order) or []
    if len(waypoints) >= 2:
        addresses = waypoints
    else:
        addresses = [start, *stops, end]

    start_name = route.start_location_display_name or extract_business_name(addresses[0])
    end_name = route.end_location_display_name or extract_business_name(addresses[-1])

    optimized_stops = [RouteStop(address=addresses[0], name=start_name, original_input=start_name, type=StopType.START)]
    for index, address in enumerate(addresses[1:-1]):
        name = display_names[index] if index < len(display_names) else extract_business_name(address)
        optimized_stops.append(RouteStop(address=address, name=name, original_input=name, type=StopType.STOP))
    optimized_stops.append(RouteStop(address=addresses[-1], name=end_name, original_input=end_name, type=StopType.END))

    return RouteData(
        start_location=start,
        end_location=end,
        stops=stops,
        is_round_trip=route.is_round_trip,
        consider_traffic=route.consider_traffic,
        total_distance=route.total_distance or "0 miles",
        estimated_time=route.estimated_time or "0 min",
        optimized_stops=optimized_stops,
    )


def saved_route_to_record(route: SavedRoute) -> dict[str, Any]:
    record = asdict(route)
    record["created_date"] = route.created_date.isoformat() if route.created_date else None
    return record


def _parse_created_date(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _as_list_text(value: Any) -> Optional[str]:
    if isinstance(value, (list, tuple)):
        return _encode_list([str(item) for item in value])
    return _as_text(value)


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def saved_route_from_record(record: dict[str, Any]) -> SavedRoute:
    """Build a ``SavedRoute`` from a store record.

    Accepts both snake_case keys and the camelCase keys used by the mobile client's
    local store. Unknown keys are ignored. Values of the wrong type are coerced to
    text, or dropped when they cannot carry a number.
    """
    values: dict[str, Any] = {}
    for key, value in record.items():
        name = key if key in _SAVED_ROUTE_FIELDS else _CAMEL_BOUNDARY.sub("_", key).lower()
        if name in _SAVED_ROUTE_FIELDS:
            values[name] = value

    if not values.get("id"):
        raise ValueError("Saved route record is missing an id.")
    values["id"] = str(values["id"])
    values["created_date"] = _parse_created_date(values.get("created_date"))
    for flag in ("consider_traffic", "is_round_trip", "is_favorite"):
        values[flag] = bool(values.get(flag, False))
    for name in _TEXT_FIELDS:
        if name in values:
            values[name] = _as_text(values[name])
    for name in _LIST_FIELDS:
        if name in values:
            values[name] = _as_list_text(values[name])
    if "distance_value" in values:
        values["distance_value"] = _as_number(values["distance_value"])
    return SavedRoute(**values)
