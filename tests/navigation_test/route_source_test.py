"""Tests for resolving the accepted route shapes into a canonical Route."""

import warnings

import pytest

from navigation.progress.errors import DegenerateInputWarning, ValidationError
from navigation.progress.models import Coord
from navigation.progress.polyline_codec import encode
from navigation.progress.route_source import (
    EncodedPolyline,
    OverviewPolyline,
    StepPolylines,
    extract_geometry,
    resolve_route,
)

FIRST_HALF = [Coord(39.92409, 32.84538), Coord(39.92405, 32.84515)]
SECOND_HALF = [Coord(39.92326, 32.84418), Coord(39.92401, 32.84523)]


@pytest.fixture
def encoded() -> str:
    return encode(FIRST_HALF + SECOND_HALF)


@pytest.mark.unit
class TestExtractGeometry:
    """Tests for picking the polyline out of each route shape."""

    def test_raw_string(self, encoded) -> None:
        assert extract_geometry(encoded) == EncodedPolyline(encoded)

    def test_backend_points_field(self, encoded) -> None:
        assert extract_geometry({"points": encoded}) == EncodedPolyline(encoded)

    def test_overview_polyline(self, encoded) -> None:
        assert extract_geometry({"overview_polyline": {"points": encoded}}) == OverviewPolyline(encoded)

    def test_polyline_string_on_route(self, encoded) -> None:
        assert extract_geometry({"polyline": encoded}) == EncodedPolyline(encoded)

    def test_polyline_mapping_on_route(self, encoded) -> None:
        assert extract_geometry({"polyline": {"points": encoded}}) == EncodedPolyline(encoded)

    def test_step_polylines(self) -> None:
        route = {
            "legs": [{
                "steps": [
                    {"polyline": {"points": encode(FIRST_HALF)}},
                    {"html_instructions": "no geometry here"},
                    {"polyline": {"points": encode(SECOND_HALF)}},
                ],
            }],
        }
        geometry = extract_geometry(route)
        assert isinstance(geometry, StepPolylines)
        assert len(geometry.polylines) == 2

    def test_directions_response_uses_first_route(self, encoded) -> None:
        directions = {
            "routes": [
                {"overview_polyline": {"points": encoded}},
                {"overview_polyline": {"points": "ignored"}},
            ],
        }
        assert extract_geometry(directions) == OverviewPolyline(encoded)

    def test_overview_preferred_over_steps(self, encoded) -> None:
        route = {
            "overview_polyline": {"points": encoded},
            "legs": [{"steps": [{"polyline": {"points": encode(FIRST_HALF)}}]}],
        }
        assert isinstance(extract_geometry(route), OverviewPolyline)

    @pytest.mark.parametrize(
        "route_data",
        [
            {},
            {"summary": "Atatürk Blv."},
            {"points": ""},
            {"overview_polyline": {}},
            {"legs": [{"steps": [{"distance": {"value": 10}}]}]},
            {"routes": []},
            {1: "x", "summary": "no geometry"},
            "",
            None,
            123,
        ],
    )
    def test_missing_polyline_raises(self, route_data) -> None:
        with pytest.raises(ValidationError):
            extract_geometry(route_data)


@pytest.mark.unit
class TestResolveRoute:
    """Tests for decoding geometry into a Route."""

    def test_decodes_points(self, encoded) -> None:
        route = resolve_route({"overview_polyline": {"points": encoded}})

        assert len(route) == 4
        assert route.source == "overview_polyline"
        assert route.points[0].lat == pytest.approx(39.92409, abs=1e-5)

    def test_concatenates_steps_in_order(self) -> None:
        route = resolve_route({
            "legs": [{"steps": [
                {"polyline": {"points": encode(FIRST_HALF)}},
                {"polyline": {"points": encode(SECOND_HALF)}},
            ]}],
        })

        assert route.source == "step_polylines"
        assert len(route) == 4
        assert route.points[2].lat == pytest.approx(SECOND_HALF[0].lat, abs=1e-5)

    def test_route_is_immutable(self, encoded) -> None:
        route = resolve_route(encoded)
        assert isinstance(route.points, tuple)
        with pytest.raises(AttributeError):
            route.points = ()

    def test_undecodable_polyline_warns(self) -> None:
        with pytest.warns(DegenerateInputWarning):
            route = resolve_route({"points": "!!!"})
        assert len(route) == 0

    def test_single_vertex_warns(self) -> None:
        with pytest.warns(DegenerateInputWarning):
            route = resolve_route(encode([Coord(39.9, 32.8)]))
        assert len(route) == 1

    def test_regular_route_does_not_warn(self, encoded) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("error", DegenerateInputWarning)
            resolve_route(encoded)
