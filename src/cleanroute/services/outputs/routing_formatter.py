"""Serializers for routing outputs."""

from __future__ import annotations

import csv
import io

from ...models.domain import RouteResult
from ...schemas.routing import RoutePointModel, RouteResultModel


def route_result_to_model(result: RouteResult) -> RouteResultModel:
    return RouteResultModel(
        points=[
            RoutePointModel(
                id=point.id,
                name=point.name,
                latitude=point.latitude,
                longitude=point.longitude,
                duration=point.duration,
                arrival_time=point.arrival_time,
                departure_time=point.departure_time,
                distance_from_previous=point.distance_from_previous,
                travel_time_from_previous=point.travel_time_from_previous,
            )
            for point in result.points
        ],
        total_distance=result.total_distance,
        total_duration=result.total_duration,
        total_travel_time=result.total_travel_time,
    )


def route_result_to_json(result: RouteResult) -> dict:
    return route_result_to_model(result).model_dump(mode="json", by_alias=True)


def route_result_to_csv(result: RouteResult) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "sequence",
        "location_id",
        "name",
        "latitude",
        "longitude",
        "duration_min",
        "arrival_time",
        "departure_time",
        "distance_from_previous_m",
        "travel_time_from_previous_min",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for sequence, point in enumerate(result.points, start=1):
        writer.writerow(
            {
                "sequence": sequence,
                "location_id": point.id,
                "name": point.name,
                "latitude": point.latitude,
                "longitude": point.longitude,
                "duration_min": point.duration or 0,
                "arrival_time": point.arrival_time.isoformat(),
                "departure_time": point.departure_time.isoformat(),
                "distance_from_previous_m": point.distance_from_previous,
                "travel_time_from_previous_min": point.travel_time_from_previous,
            }
        )
    return buffer.getvalue()
