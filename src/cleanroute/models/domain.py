"""Domain models for job locations and timed routes."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True, slots=True)
class Location:
    """A job site to visit, with the minutes of work required once there."""

    id: str
    name: str
    latitude: float
    longitude: float
    duration: Optional[int] = None

    @property
    def dwell_minutes(self) -> int:
        return self.duration or 0


@dataclass(frozen=True, slots=True)
class RoutePoint:
    """A location placed into a route with its computed schedule."""

    location: Location
    arrival_time: datetime
    departure_time: datetime
    distance_from_previous: float
    travel_time_from_previous: float

    @property
    def id(self) -> str:
        return self.location.id

    @property
    def name(self) -> str:
        return self.location.name

    @property
    def latitude(self) -> float:
        return self.location.latitude

    @property
    def longitude(self) -> float:
        return self.location.longitude

    @property
    def duration(self) -> Optional[int]:
        return self.location.duration


@dataclass(frozen=True, slots=True)
class RouteResult:
    """Ordered stops with route totals. Distances are meters, times are minutes."""

    points: tuple[RoutePoint, ...] = field(default_factory=tuple)
    total_distance: float = 0.0
    total_duration: float = 0.0
    total_travel_time: float = 0.0

    @property
    def locations(self) -> list[Location]:
        return [point.location for point in self.points]
