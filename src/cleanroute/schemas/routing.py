"""Routing request/response schemas."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase JSON while keeping snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RoutingAlgorithm(str, Enum):
    NEAREST = "nearest"
    TWO_OPT = "2opt"


class LocationModel(CamelModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    duration: Optional[int] = Field(default=None, ge=0, description="Minutes of work at this stop.")


class OptimizeRouteRequest(CamelModel):
    locations: List[LocationModel]
    start_location_index: int = 0
    end_location_index: Optional[int] = Field(
        default=None,
        description="Location to visit last. Defaults to the start location (open path).",
    )
    start_time: Optional[datetime] = Field(
        default=None,
        description="ISO-8601 departure time. The current time is used when omitted.",
    )
    algorithm: Optional[RoutingAlgorithm] = None
    average_speed: Optional[float] = Field(default=None, gt=0, description="Average travel speed in km/h.")
    max_iterations: Optional[int] = Field(default=None, ge=1, description="Upper bound on 2-opt passes.")
    persist: bool = Field(default=False, description="Write summary, CSV and GeoJSON outputs for this run.")


class RoutePointModel(CamelModel):
    id: str
    name: str
    latitude: float
    longitude: float
    duration: Optional[int] = None
    arrival_time: datetime
    departure_time: datetime
    distance_from_previous: float
    travel_time_from_previous: float


class RouteResultModel(CamelModel):
    points: List[RoutePointModel]
    total_distance: float
    total_duration: float
    total_travel_time: float


class OptimizeRouteResponse(CamelModel):
    success: bool = True
    route: RouteResultModel
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ShareRouteRequest(CamelModel):
    route: RouteResultModel
    team_member_ids: List[str] = Field(..., min_length=1)
    name: Optional[str] = None
    description: Optional[str] = None
    requested_by: Optional[str] = Field(default=None, description="Person or system sharing the route.")


class SharedRouteSummary(CamelModel):
    id: str
    name: str
    description: str = ""
    shared_with: int


class ShareRouteResponse(CamelModel):
    success: bool = True
    shared_route: SharedRouteSummary
