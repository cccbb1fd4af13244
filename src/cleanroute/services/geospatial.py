"""Geospatial helper functions."""

from __future__ import annotations

import math

EARTH_RADIUS_M = 6_371_000.0
DEFAULT_AVERAGE_SPEED_KMH = 30.0


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute great-circle distance in meters using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push antipodal pairs just past 1; NaN passes through untouched.
    if a > 1.0:
        a = 1.0
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def calculate_travel_time(distance_m: float, average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH) -> float:
    """Convert a distance in meters to minutes of travel at a constant speed.

    The speed must be positive; callers validate it before reaching this point.
    """

    distance_km = distance_m / 1000
    hours = distance_km / average_speed_kmh
    return hours * 60
