"""Route optimization: nearest-neighbor construction and 2-opt refinement."""

from .itinerary import build_itinerary
from .nearest_neighbor import optimize_route_nearest_neighbor
from .two_opt import optimize_route_2opt

__all__ = [
    "build_itinerary",
    "optimize_route_nearest_neighbor",
    "optimize_route_2opt",
]
