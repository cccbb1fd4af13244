"""Human-readable rendering of route distances, durations and clock times."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from ...config import settings

INVALID_DATE = "Invalid Date"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_distance(distance_m: float) -> str:
    if distance_m < 1000:
        return f"{_round_half_up(distance_m)} m"
    return f"{distance_m / 1000:.1f} km"


def format_duration(minutes: float) -> str:
    if minutes < 60:
        return f"{_round_half_up(minutes)} min"
    hours = math.floor(minutes / 60)
    mins = _round_half_up(minutes % 60)
    return f"{hours} h {mins} min"


def format_time(timestamp: str | datetime, tz_name: str | None = None) -> str:
    """Render a timestamp as a 12-hour clock time such as ``9:30 AM``.

    Strings are parsed as ISO-8601; naive values are read as UTC and the result is
    shown in ``tz_name`` (defaults to the configured display timezone). Unparseable
    input renders as ``Invalid Date``.
    """
    if isinstance(timestamp, datetime):
        moment = timestamp
    else:
        try:
            moment = datetime.fromisoformat(str(timestamp).strip().replace("Z", "+00:00"))
        except ValueError:
            return INVALID_DATE
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    zone_name = tz_name or settings.display_timezone
    local = moment.astimezone(timezone.utc if zone_name.upper() == "UTC" else ZoneInfo(zone_name))
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {suffix}"
