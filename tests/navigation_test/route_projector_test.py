"""Tests for nearest-vertex projection and along-route distances."""

import pytest

from navigation.progress.geo_utils import distance
from navigation.progress.models import Coord, Route
from navigation.progress.route_projector import RouteProjector
from progress_helpers import metres_to_lat_deg


@pytest.fixture
def projector(northbound_route) -> RouteProjector:
    return RouteProjector(Route(points=tuple(northbound_route)))


@pytest.mark.unit
class TestRouteProjector:
    """Tests for RouteProjector."""

    def test_total_distance_is_sum_of_hops(self, northbound_route, projector) -> None:
        expected = sum(distance(a, b) for a, b in zip(northbound_route, northbound_route[1:]))
        assert projector.total_distance_m == pytest.approx(expected, rel=1e-9)
        assert projector.total_distance_m == pytest.approx(10_000, abs=5)

    def test_projects_onto_each_vertex(self, northbound_route, projector) -> None:
        for i, point in enumerate(northbound_route):
            hit = projector.project(point)
            assert hit.closest_point_index == i
            assert hit.distance_to_route_m == 0.0

    def test_projects_to_nearest_vertex(self, northbound_route, projector) -> None:
        # 300 m past vertex 4 is still closest to vertex 4
        position = Coord(northbound_route[4].lat + metres_to_lat_deg(300), 10.0)
        hit = projector.project(position)

        assert hit.closest_point_index == 4
        assert hit.distance_to_route_m == pytest.approx(300, abs=5)

    def test_traveled_and_remaining(self, projector) -> None:
        assert projector.traveled_distance_m(0) == 0.0
        assert projector.traveled_distance_m(5) == pytest.approx(5_000, abs=5)
        assert projector.remaining_distance_m(5) == pytest.approx(5_000, abs=5)
        assert projector.remaining_distance_m(10) == 0.0

    def test_progress_bounds(self, projector) -> None:
        assert projector.progress_percentage(0) == 0.0
        assert projector.progress_percentage(10) == 100.0
        assert projector.progress_percentage(5) == pytest.approx(50.0, abs=0.1)

    def test_out_of_range_index_is_clamped(self, projector) -> None:
        assert projector.traveled_distance_m(-3) == 0.0
        assert projector.traveled_distance_m(99) == projector.total_distance_m
        assert projector.remaining_distance_m(99) == 0.0

    def test_ties_resolve_to_first_vertex(self) -> None:
        point = Coord(1.0, 1.0)
        projector = RouteProjector(Route(points=(Coord(0.0, 0.0), point, point)))
        assert projector.project(point).closest_point_index == 1

    def test_single_vertex_route(self) -> None:
        only = Coord(39.92, 32.85)
        projector = RouteProjector(Route(points=(only,)))
        position = Coord(39.921, 32.85)

        hit = projector.project(position)
        assert hit.closest_point_index == 0
        assert hit.distance_to_route_m == pytest.approx(distance(only, position))
        assert projector.total_distance_m == 0.0
        assert projector.progress_percentage(0) == 0.0
        assert projector.remaining_distance_m(0) == 0.0

    def test_empty_route(self) -> None:
        projector = RouteProjector(Route(points=()))

        hit = projector.project(Coord(39.92, 32.85))
        assert hit.closest_point_index == 0
        assert hit.distance_to_route_m == 0.0
        assert projector.total_distance_m == 0.0
        assert projector.remaining_distance_m(0) == 0.0
        assert projector.progress_percentage(0) == 0.0
