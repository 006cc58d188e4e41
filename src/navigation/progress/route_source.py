# route_source.py
# Resolves the route shapes handed over by the directions layer into one
# canonical Route. Accepted shapes, first match wins:
#
#   "encoded..."                                   raw polyline string
#   {"points": "..."}                              backend format
#   {"overview_polyline": {"points": "..."}}       directions API format
#   {"polyline": "..." | {"points": "..."}}        polyline on the route itself
#   {"legs": [{"steps": [{"polyline": {...}}]}]}   per-step polylines
#
# A directions response {"routes": [...]} is unwrapped to its first route.

import logging
import warnings
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple, Union

from .errors import DegenerateInputWarning, ValidationError
from .models import Coord, Route
from .polyline_codec import decode

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Geometry variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EncodedPolyline:
    """A single polyline covering the whole route."""
    points: str
    kind: str = "encoded_polyline"


@dataclass(frozen=True)
class OverviewPolyline:
    """The simplified overview polyline of a directions route."""
    points: str
    kind: str = "overview_polyline"


@dataclass(frozen=True)
class StepPolylines:
    """One polyline per navigation step, concatenated in order."""
    polylines: Tuple[str, ...]
    kind: str = "step_polylines"


RouteGeometry = Union[EncodedPolyline, OverviewPolyline, StepPolylines]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _non_empty_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _nested_points(value: Any) -> Optional[str]:
    """Return value["points"] if value is a mapping holding a polyline string."""
    if isinstance(value, Mapping):
        return _non_empty_str(value.get("points"))
    return None


def _step_polylines(route: Mapping) -> Tuple[str, ...]:
    found: List[str] = []
    legs = route.get("legs")
    if not isinstance(legs, list):
        return ()
    for leg in legs:
        steps = leg.get("steps") if isinstance(leg, Mapping) else None
        if not isinstance(steps, list):
            continue
        for step in steps:
            if isinstance(step, Mapping):
                points = _nested_points(step.get("polyline"))
                if points:
                    found.append(points)
    return tuple(found)


def _unwrap(route_data: Any) -> Any:
    if isinstance(route_data, Mapping) and "routes" in route_data:
        routes = route_data["routes"]
        if not isinstance(routes, list) or not routes:
            raise ValidationError("Directions response contains no routes.")
        return routes[0]
    return route_data


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_geometry(route_data: Any) -> RouteGeometry:
    """
    Find the route polyline in any of the recognised shapes.

    Args:
        route_data: Raw polyline string, route mapping or directions response.

    Returns:
        The geometry variant that was found.

    Raises:
        ValidationError: No polyline is present in any recognised field.
    """
    route = _unwrap(route_data)

    raw = _non_empty_str(route)
    if raw:
        return EncodedPolyline(raw)

    if not isinstance(route, Mapping):
        raise ValidationError(f"Route data must be a polyline string or a mapping, got {type(route).__name__}.")

    points = _non_empty_str(route.get("points"))
    if points:
        return EncodedPolyline(points)

    points = _nested_points(route.get("overview_polyline"))
    if points:
        return OverviewPolyline(points)

    direct = route.get("polyline")
    points = _non_empty_str(direct) or _nested_points(direct)
    if points:
        return EncodedPolyline(points)

    steps = _step_polylines(route)
    if steps:
        return StepPolylines(steps)

    logger.error(f"Route missing polyline data. Available keys: {list(route.keys())}")
    raise ValidationError("Invalid or incomplete route data: no polyline found.")


def decode_geometry(geometry: RouteGeometry, precision: int = 5) -> Route:
    """Decode a geometry variant into a canonical Route."""
    if isinstance(geometry, StepPolylines):
        points: List[Coord] = []
        for encoded in geometry.polylines:
            points.extend(decode(encoded, precision))
    else:
        points = decode(geometry.points, precision)
    return Route(points=tuple(points), source=geometry.kind)


def resolve_route(route_data: Any, precision: int = 5) -> Route:
    """
    Turn any accepted route shape into a Route.

    Empty or single-vertex geometry is accepted with a DegenerateInputWarning
    so tracking can continue with safe defaults.

    Raises:
        ValidationError: No polyline is present in any recognised field.
    """
    geometry = extract_geometry(route_data)
    route = decode_geometry(geometry, precision)

    if route.is_degenerate:
        msg = f"Route geometry ({route.source}) has {len(route)} point(s); progress will use safe defaults."
        logger.warning(msg)
        warnings.warn(msg, DegenerateInputWarning, stacklevel=2)

    logger.info(f"Route resolved from {route.source}: {len(route)} points.")
    return route
