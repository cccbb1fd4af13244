"""Timed itinerary construction for an ordered list of locations."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Sequence

from ...models.domain import Location, RoutePoint, RouteResult
from ..geospatial import DEFAULT_AVERAGE_SPEED_KMH, calculate_distance, calculate_travel_time


def normalize_start_time(start_time: datetime) -> datetime:
    """Treat naive timestamps as UTC so arithmetic and serialization stay unambiguous."""
    if start_time.tzinfo is None:
        return start_time.replace(tzinfo=timezone.utc)
    return start_time


def leg_distance(origin: Location, destination: Location) -> float:
    return calculate_distance(origin.latitude, origin.longitude, destination.latitude, destination.longitude)


def path_distance(ordered: Sequence[Location]) -> float:
    return sum(leg_distance(ordered[k - 1], ordered[k]) for k in range(1, len(ordered)))


def build_itinerary(
    ordered: Sequence[Location],
    *,
    start_time: datetime,
    average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH,
) -> RouteResult:
    """Walk the locations in order with a running clock and return a fresh RouteResult.

    The first stop arrives and departs at ``start_time``. Each later stop arrives
    after the previous stop's dwell time plus the travel time of the leg, and
    departs once its own dwell time has elapsed.
    """
    if not ordered:
        return RouteResult()

    clock = normalize_start_time(start_time)
    first = ordered[0]
    points: list[RoutePoint] = [
        RoutePoint(
            location=first,
            arrival_time=clock,
            departure_time=clock,
            distance_from_previous=0.0,
            travel_time_from_previous=0.0,
        )
    ]
    clock += timedelta(minutes=first.dwell_minutes)

    total_distance = 0.0
    total_travel_time = 0.0
    previous = first
    for location in ordered[1:]:
        distance = leg_distance(previous, location)
        travel_time = calculate_travel_time(distance, average_speed_kmh)
        clock += timedelta(minutes=travel_time)
        arrival = clock
        clock += timedelta(minutes=location.dwell_minutes)
        points.append(
            RoutePoint(
                location=location,
                arrival_time=arrival,
                departure_time=clock,
                distance_from_previous=distance,
                travel_time_from_previous=travel_time,
            )
        )
        total_distance += distance
        total_travel_time += travel_time
        previous = location

    dwell_total = sum(location.dwell_minutes for location in ordered)
    return RouteResult(
        points=tuple(points),
        total_distance=total_distance,
        total_duration=total_travel_time + dwell_total,
        total_travel_time=total_travel_time,
    )
