"""Greedy nearest-neighbor route construction."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ...models.domain import Location, RouteResult
from ..geospatial import DEFAULT_AVERAGE_SPEED_KMH
from .itinerary import build_itinerary, leg_distance

logger = logging.getLogger(__name__)


def nearest_neighbor_order(
    locations: Sequence[Location],
    start_index: int = 0,
    end_index: Optional[int] = None,
) -> list[Location]:
    """Return the visiting order produced by always stepping to the closest unvisited location.

    A distinct ``end_index`` pins that location to the final position: it is taken
    out of the greedy pool up front, so every input location is visited exactly once.
    An ``end_index`` outside the input is ignored.
    """
    if not locations:
        return []
    if not 0 <= start_index < len(locations):
        raise IndexError(f"start index {start_index} is out of range for {len(locations)} locations")

    forced_end = end_index is not None and end_index != start_index and 0 <= end_index < len(locations)
    excluded = {start_index, end_index} if forced_end else {start_index}
    unvisited = [location for index, location in enumerate(locations) if index not in excluded]

    current = locations[start_index]
    order = [current]
    while unvisited:
        nearest_index = 0
        min_distance = float("inf")
        for index, candidate in enumerate(unvisited):
            distance = leg_distance(current, candidate)
            # Strict comparison keeps the first of equally close candidates.
            if distance < min_distance:
                min_distance = distance
                nearest_index = index
        current = unvisited.pop(nearest_index)
        order.append(current)

    if forced_end:
        order.append(locations[end_index])
    return order


def optimize_route_nearest_neighbor(
    locations: Sequence[Location],
    *,
    start_time: datetime,
    start_index: int = 0,
    end_index: Optional[int] = None,
    average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH,
) -> RouteResult:
    """Build a timed route with the nearest-neighbor heuristic.

    Runs in O(n^2) for n locations. Empty input yields an empty result and a single
    location yields a one-stop route whose total duration is its dwell time.
    """
    order = nearest_neighbor_order(locations, start_index, end_index)
    result = build_itinerary(order, start_time=start_time, average_speed_kmh=average_speed_kmh)
    logger.debug(
        "Nearest-neighbor route: %d stops, %.1f m, %.1f min travel",
        len(result.points),
        result.total_distance,
        result.total_travel_time,
    )
    return result
