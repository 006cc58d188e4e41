# geo_utils.py
# Pure mathematical / geographic helper functions.
# No side effects; depends only on models and progress_config.

import math

import numpy as np

from .models import Coord
from .progress_config import EARTH_RADIUS_M


COMPASS_POINTS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two points in metres.

    Args:
        lat1, lon1: Origin in decimal degrees.
        lat2, lon2: Destination in decimal degrees.

    Returns:
        Distance in metres.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def haversine_vector(lat1, lon1, lat2, lon2) -> np.ndarray:
    """
    Element-wise great-circle distance in metres.

    Arguments broadcast like numpy arrays, so a single origin can be
    compared against every vertex of a route in one call.
    """
    lat1, lon1, lat2, lon2 = map(np.radians, (lat1, lon1, lat2, lon2))
    d_lat = lat2 - lat1
    d_lon = lon2 - lon1
    a = np.sin(d_lat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(d_lon / 2) ** 2
    return EARTH_RADIUS_M * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def distance(a: Coord, b: Coord) -> float:
    """Haversine distance between two coordinates in metres."""
    return haversine_distance(a.lat, a.lng, b.lat, b.lng)


def calculate_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Forward azimuth (bearing) from point 1 to point 2 in degrees [0, 360).

    Args:
        lat1, lon1: Origin in decimal degrees.
        lat2, lon2: Destination in decimal degrees.

    Returns:
        Bearing in degrees.
    """
    rlat1, rlon1 = math.radians(lat1), math.radians(lon1)
    rlat2, rlon2 = math.radians(lat2), math.radians(lon2)
    d_lon = rlon2 - rlon1
    y = math.sin(d_lon) * math.cos(rlat2)
    x = math.cos(rlat1) * math.sin(rlat2) - math.sin(rlat1) * math.cos(rlat2) * math.cos(d_lon)
    return (math.degrees(math.atan2(y, x)) + 360) % 360


def bearing(a: Coord, b: Coord) -> float:
    """Initial compass bearing from a to b in degrees [0, 360)."""
    return calculate_bearing(a.lat, a.lng, b.lat, b.lng)


def compass_direction(bearing_deg: float) -> str:
    """
    16-point compass label for a bearing.

    Args:
        bearing_deg: Bearing in degrees; values outside [0, 360) wrap.

    Returns:
        One of "N", "NNE", ... "NNW".
    """
    # Half-way bearings round up (11.25 → "NNE")
    index = int(math.floor((bearing_deg % 360) / 22.5 + 0.5)) % len(COMPASS_POINTS)
    return COMPASS_POINTS[index]
