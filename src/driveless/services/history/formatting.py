"""Parsing and display helpers for saved route history."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

# Leading number (optional sign, thousands separators, decimals) plus an optional unit word.
_DISTANCE_PATTERN = re.compile(
    r"^\s*(?P<value>[-+]?(?:\d[\d,]*(?:\.\d+)?|\.\d+))\s*(?P<unit>[A-Za-z][A-Za-z.]*)?\s*$"
)

_RELATIVE_UNITS = (
    ("year", 365 * 86400),
    ("month", 30 * 86400),
    ("week", 7 * 86400),
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)
JUST_NOW_SECONDS = 10


@dataclass(slots=True, frozen=True)
class Distance:
    value: float
    unit: Optional[str] = None


def parse_distance(text: Optional[str]) -> Optional[Distance]:
    """Parse legacy distance text such as ``"12.3 miles"``.

    Returns ``None`` for missing or malformed values instead of raising.
    """
    if not text or not isinstance(text, str):
        return None
    match = _DISTANCE_PATTERN.match(text)
    if match is None:
        return None
    try:
        value = float(match.group("value").replace(",", ""))
    except ValueError:
        return None
    unit = match.group("unit")
    return Distance(value=value, unit=unit.lower() if unit else None)


def format_relative(moment: datetime, now: datetime) -> str:
    """Describe ``moment`` relative to ``now``, e.g. ``"2 days ago"`` or ``"in 3 hours"``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    delta = (now - moment).total_seconds()
    magnitude = abs(delta)
    if magnitude < JUST_NOW_SECONDS:
        return "just now"

    for unit, size in _RELATIVE_UNITS:
        if magnitude >= size:
            count = int(magnitude // size)
            label = f"{count} {unit}" + ("" if count == 1 else "s")
            return f"{label} ago" if delta > 0 else f"in {label}"
    return "just now"
