# route_projector.py
# Maps a live position onto the fixed route geometry.
# Build one per tracking session; the route never changes afterwards.

from dataclasses import dataclass

import numpy as np

from .geo_utils import haversine_vector
from .models import Coord, Route


@dataclass(frozen=True)
class Projection:
    """Closest route vertex to a position."""
    closest_point_index: int
    distance_to_route_m: float


class RouteProjector:
    """
    Nearest-vertex projection and along-route distances for one route.

    Hop lengths and their running sum are computed once at construction.

    Usage:
        projector = RouteProjector(route)
        hit = projector.project(Coord(lat, lng))
        remaining = projector.remaining_distance_m(hit.closest_point_index)
    """

    def __init__(self, route: Route) -> None:
        self.route = route
        self._lats = np.array([p.lat for p in route.points], dtype=float)
        self._lngs = np.array([p.lng for p in route.points], dtype=float)

        if len(route) > 1:
            hops = haversine_vector(self._lats[:-1], self._lngs[:-1], self._lats[1:], self._lngs[1:])
        else:
            hops = np.zeros(0)
        # _cumulative[i] = distance along the route from vertex 0 to vertex i
        self._cumulative = np.concatenate(([0.0], np.cumsum(hops)))

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def total_distance_m(self) -> float:
        return float(self._cumulative[-1])

    @property
    def is_empty(self) -> bool:
        return self._lats.size == 0

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def project(self, position: Coord) -> Projection:
        """
        Linear scan for the route vertex closest to position.

        Ties resolve to the earliest vertex. An empty route projects to
        index 0 at distance 0.
        """
        if self.is_empty:
            return Projection(closest_point_index=0, distance_to_route_m=0.0)

        dists = haversine_vector(position.lat, position.lng, self._lats, self._lngs)
        index = int(np.argmin(dists))
        return Projection(closest_point_index=index, distance_to_route_m=float(dists[index]))

    def traveled_distance_m(self, index: int) -> float:
        """Along-route distance from the first vertex to vertex `index`."""
        if self.is_empty:
            return 0.0
        index = min(max(index, 0), self._lats.size - 1)
        return float(self._cumulative[index])

    def remaining_distance_m(self, index: int) -> float:
        return max(self.total_distance_m - self.traveled_distance_m(index), 0.0)

    def progress_percentage(self, index: int) -> float:
        total = self.total_distance_m
        if total <= 0:
            return 0.0
        return min(max(self.traveled_distance_m(index) / total * 100.0, 0.0), 100.0)
