"""Route and location naming."""

from __future__ import annotations

from datetime import datetime

from ...models.domain import RouteData

MAX_ROUTE_NAME_LENGTH = 50


def extract_business_name(address: str) -> str:
    if "," in address:
        return address.split(",", 1)[0].strip()
    return address


def extract_location_name(address: str) -> str:
    """Short location name; street addresses fall back to their city segment."""
    components = address.split(",")
    first = components[0].strip()
    if first[:1].isdigit() and len(components) > 1:
        return components[1].strip()
    return first or "Unknown"


def generate_route_name(route_data: RouteData, now: datetime) -> str:
    start_name = extract_location_name(route_data.start_location)
    end_name = extract_location_name(route_data.end_location)
    route_name = f"{start_name} → {end_name}"
    if len(route_name) > MAX_ROUTE_NAME_LENGTH:
        hour = now.strftime("%I").lstrip("0") or "12"
        return f"Route from {now:%b} {now.day}, {now.year} at {hour}:{now:%M %p}"
    return route_name
