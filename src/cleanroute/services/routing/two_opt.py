"""2-opt local search on top of the nearest-neighbor route."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ...models.domain import Location, RouteResult
from ..geospatial import DEFAULT_AVERAGE_SPEED_KMH
from .itinerary import build_itinerary, leg_distance
from .nearest_neighbor import optimize_route_nearest_neighbor

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 100
DEFAULT_EARLY_EXIT_RATIO = 0.8


def reverse_segment(order: Sequence[Location], i: int, j: int) -> list[Location]:
    """Return a new order with positions ``i..j`` (inclusive) reversed."""
    return [*order[:i], *reversed(order[i : j + 1]), *order[j + 1 :]]


def optimize_route_2opt(
    locations: Sequence[Location],
    *,
    start_time: datetime,
    start_index: int = 0,
    end_index: Optional[int] = None,
    average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    early_exit_ratio: float = DEFAULT_EARLY_EXIT_RATIO,
) -> RouteResult:
    """Refine the nearest-neighbor route by reversing sub-tours that shorten it.

    The first and last stops never move. Each accepted reversal rebuilds the whole
    itinerary from the new order. The search ends after a pass with no improvement,
    after ``max_iterations`` passes, or as soon as the route falls below
    ``early_exit_ratio`` of the nearest-neighbor distance.
    """
    baseline = optimize_route_nearest_neighbor(
        locations,
        start_time=start_time,
        start_index=start_index,
        end_index=end_index,
        average_speed_kmh=average_speed_kmh,
    )
    if len(locations) <= 3:
        return baseline

    exit_threshold = baseline.total_distance * early_exit_ratio

    best = baseline
    order = best.locations
    improved = True
    iterations = 0

    while improved and iterations < max_iterations:
        improved = False
        iterations += 1

        for i in range(1, len(order) - 2):
            for j in range(i + 2, len(order) - 1):
                current_edges = leg_distance(order[i - 1], order[i]) + leg_distance(order[j], order[j + 1])
                swapped_edges = leg_distance(order[i - 1], order[j]) + leg_distance(order[i], order[j + 1])
                if swapped_edges >= current_edges:
                    continue

                candidate_order = reverse_segment(order, i, j)
                candidate = build_itinerary(
                    candidate_order,
                    start_time=start_time,
                    average_speed_kmh=average_speed_kmh,
                )
                if candidate.total_distance >= best.total_distance:
                    continue

                logger.debug(
                    "2-opt pass %d: reversed %d..%d, distance %.1f -> %.1f m",
                    iterations,
                    i,
                    j,
                    best.total_distance,
                    candidate.total_distance,
                )
                best = candidate
                order = candidate_order
                improved = True

                if best.total_distance < exit_threshold:
                    logger.debug("2-opt early exit after pass %d at %.1f m", iterations, best.total_distance)
                    return best

    logger.debug(
        "2-opt finished after %d pass(es): %.1f m (nearest-neighbor %.1f m)",
        iterations,
        best.total_distance,
        baseline.total_distance,
    )
    return best
