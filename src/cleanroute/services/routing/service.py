"""Routing orchestration service."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from ...config import settings
from ...models.domain import Location, RouteResult
from ...persistence.filesystem import FileStorage
from ...schemas.routing import OptimizeRouteRequest, OptimizeRouteResponse, RoutingAlgorithm
from ..outputs.display import format_distance, format_duration, format_time
from ..outputs.routing_formatter import route_result_to_model
from .errors import InvalidParameterError
from .itinerary import normalize_start_time
from .nearest_neighbor import optimize_route_nearest_neighbor
from .two_opt import DEFAULT_EARLY_EXIT_RATIO, optimize_route_2opt

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _to_locations(payload: OptimizeRouteRequest) -> list[Location]:
    return [
        Location(
            id=item.id,
            name=item.name,
            latitude=item.latitude,
            longitude=item.longitude,
            duration=item.duration,
        )
        for item in payload.locations
    ]


def _validate(payload: OptimizeRouteRequest) -> None:
    count = len(payload.locations)
    if count == 0:
        raise InvalidParameterError("Locations array is required and must not be empty")
    if count > settings.max_locations_per_request:
        raise InvalidParameterError(
            f"Too many locations: {count} (maximum {settings.max_locations_per_request} per request)"
        )
    if not 0 <= payload.start_location_index < count:
        raise InvalidParameterError("Invalid startLocationIndex")
    if payload.end_location_index is not None and not 0 <= payload.end_location_index < count:
        raise InvalidParameterError("Invalid endLocationIndex")
    if payload.average_speed is not None and payload.average_speed <= 0:
        raise InvalidParameterError("averageSpeed must be greater than zero")
    if payload.max_iterations is not None and payload.max_iterations < 1:
        raise InvalidParameterError("maxIterations must be at least 1")


def run_algorithm(
    algorithm: RoutingAlgorithm,
    locations: list[Location],
    *,
    start_time: datetime,
    start_index: int,
    end_index: int | None,
    average_speed_kmh: float,
    max_iterations: int,
    early_exit_ratio: float = DEFAULT_EARLY_EXIT_RATIO,
) -> RouteResult:
    """Dispatch to the pure routing function selected by ``algorithm``.

    A schedule that runs past the representable datetime range (huge dwell times
    or a very slow speed) is reported as an invalid parameter.
    """
    try:
        if algorithm is RoutingAlgorithm.TWO_OPT:
            return optimize_route_2opt(
                locations,
                start_time=start_time,
                start_index=start_index,
                end_index=end_index,
                average_speed_kmh=average_speed_kmh,
                max_iterations=max_iterations,
                early_exit_ratio=early_exit_ratio,
            )
        return optimize_route_nearest_neighbor(
            locations,
            start_time=start_time,
            start_index=start_index,
            end_index=end_index,
            average_speed_kmh=average_speed_kmh,
        )
    except IndexError as exc:
        raise InvalidParameterError(str(exc)) from exc
    except OverflowError as exc:
        raise InvalidParameterError(
            "Route schedule exceeds the supported date range; check location durations and averageSpeed"
        ) from exc


def optimize_route(payload: OptimizeRouteRequest, *, clock: Clock = utc_now) -> OptimizeRouteResponse:
    """Validate a request, compute the route and optionally persist the run."""
    _validate(payload)

    algorithm = payload.algorithm or RoutingAlgorithm(settings.default_algorithm)
    average_speed = payload.average_speed or settings.default_average_speed_kmh
    max_iterations = payload.max_iterations or settings.default_max_iterations
    start_time = normalize_start_time(payload.start_time or clock())
    locations = _to_locations(payload)

    result = run_algorithm(
        algorithm,
        locations,
        start_time=start_time,
        start_index=payload.start_location_index,
        end_index=payload.end_location_index,
        average_speed_kmh=average_speed,
        max_iterations=max_iterations,
        early_exit_ratio=settings.improvement_early_exit_ratio,
    )
    logger.info(
        f"Optimized route with {algorithm.value}: {len(result.points)} stops, "
        f"{format_distance(result.total_distance)}, {format_duration(result.total_duration)}"
    )

    metadata = {
        "algorithm": algorithm.value,
        "stopCount": len(result.points),
        "startTime": start_time.isoformat(),
        "averageSpeedKmh": average_speed,
        "display": {
            "totalDistance": format_distance(result.total_distance),
            "totalDuration": format_duration(result.total_duration),
            "totalTravelTime": format_duration(result.total_travel_time),
            "start": format_time(start_time),
            "finish": format_time(result.points[-1].departure_time) if result.points else None,
        },
    }
    if algorithm is RoutingAlgorithm.TWO_OPT:
        metadata["maxIterations"] = max_iterations

    if payload.persist:
        try:
            run_dir = FileStorage().write_route_run(result, label=f"route_{algorithm.value}")
            metadata["outputDir"] = str(run_dir)
        except OSError as exc:
            logger.warning(f"Failed to persist route outputs: {exc}")

    return OptimizeRouteResponse(route=route_result_to_model(result), metadata=metadata)
