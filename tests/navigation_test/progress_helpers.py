# Shared builders for the progress tracking tests.

import math
from typing import Optional

from navigation.progress.models import Coord, PositionSample
from navigation.progress.progress_config import EARTH_RADIUS_M

START_TIME = 1_700_000_000.0


def metres_to_lat_deg(metres: float) -> float:
    """Latitude offset for a northward move of `metres` along a meridian."""
    return math.degrees(metres / EARTH_RADIUS_M)


def sample_at(coord: Coord, timestamp: float, speed: Optional[float] = None, accuracy: float = 5.0) -> PositionSample:
    return PositionSample(lat=coord.lat, lng=coord.lng, accuracy_m=accuracy, timestamp=timestamp, speed_mps=speed)
