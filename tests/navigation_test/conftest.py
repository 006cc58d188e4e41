from typing import List

import pytest

from navigation.progress.models import Coord
from navigation.progress.polyline_codec import encode
from navigation.progress.progress_config import TrackingConfig
from progress_helpers import START_TIME, metres_to_lat_deg


@pytest.fixture
def config() -> TrackingConfig:
    return TrackingConfig(off_route_threshold_m=50.0)


@pytest.fixture
def fixed_clock():
    """Clock that always returns START_TIME."""
    return lambda: START_TIME


@pytest.fixture
def straight_route() -> List[Coord]:
    """Two points on the equator, about 1.1 km apart (west → east)."""
    return [Coord(0.0, 0.0), Coord(0.0, 0.01)]


@pytest.fixture
def northbound_route() -> List[Coord]:
    """Eleven vertices due north along a meridian, about 1 km apart."""
    step = metres_to_lat_deg(1000.0)
    return [Coord(round(i * step, 5), 10.0) for i in range(11)]


@pytest.fixture
def northbound_polyline(northbound_route) -> str:
    return encode(northbound_route)
