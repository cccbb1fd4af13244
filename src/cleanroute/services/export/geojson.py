"""GeoJSON export of optimized routes."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from shapely.geometry import LineString, Point, mapping

from ...models.domain import RouteResult
from ..outputs.display import format_distance, format_duration


def route_to_feature_collection(result: RouteResult, *, name: str = "Optimized route") -> Dict[str, Any]:
    """Convert a route into a GeoJSON FeatureCollection.

    Each stop becomes a Point feature carrying its sequence and schedule. Routes
    with two or more stops also get a LineString feature for the travelled path.
    Coordinates follow GeoJSON (lon, lat) order.
    """
    features: List[Dict[str, Any]] = []

    for sequence, point in enumerate(result.points, start=1):
        features.append(
            {
                "type": "Feature",
                "geometry": mapping(Point(point.longitude, point.latitude)),
                "properties": {
                    "kind": "stop",
                    "sequence": sequence,
                    "id": point.id,
                    "name": point.name,
                    "duration": point.duration or 0,
                    "arrivalTime": point.arrival_time.isoformat(),
                    "departureTime": point.departure_time.isoformat(),
                    "distanceFromPrevious": point.distance_from_previous,
                    "travelTimeFromPrevious": point.travel_time_from_previous,
                },
            }
        )

    if len(result.points) >= 2:
        path = LineString([(point.longitude, point.latitude) for point in result.points])
        features.append(
            {
                "type": "Feature",
                "geometry": mapping(path),
                "properties": {
                    "kind": "path",
                    "name": name,
                    "stopCount": len(result.points),
                    "totalDistance": result.total_distance,
                    "totalDuration": result.total_duration,
                    "totalTravelTime": result.total_travel_time,
                    "label": f"{format_distance(result.total_distance)} / {format_duration(result.total_duration)}",
                },
            }
        )

    return {"type": "FeatureCollection", "features": features}


def save_geojson(collection: Dict[str, Any], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(collection, f, indent=2, ensure_ascii=False)
