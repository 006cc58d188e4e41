# models.py
# Shared data structures and enums used across the progress tracking modules.

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

from .errors import ValidationError


# ---------------------------------------------------------------------------
# Coordinate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Coord:
    """Immutable geographic coordinate in decimal degrees."""
    lat: float
    lng: float

    def is_valid(self) -> bool:
        return (
            math.isfinite(self.lat) and math.isfinite(self.lng)
            and -90.0 <= self.lat <= 90.0
            and -180.0 <= self.lng <= 180.0
        )


# ---------------------------------------------------------------------------
# Route
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Route:
    """
    Canonical route geometry, decoded once when tracking starts.

    `source` names the geometry shape the points were resolved from
    ("encoded_polyline", "overview_polyline" or "step_polylines").
    """
    points: Tuple[Coord, ...]
    source: str = "encoded_polyline"

    def __len__(self) -> int:
        return len(self.points)

    @property
    def is_degenerate(self) -> bool:
        return len(self.points) < 2


# ---------------------------------------------------------------------------
# Position samples and movement
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PositionSample:
    """A single fix delivered by the position source."""
    lat: float
    lng: float
    accuracy_m: float
    timestamp: float                    # epoch seconds
    speed_mps: Optional[float] = None   # device-reported, often missing

    @property
    def coord(self) -> Coord:
        return Coord(self.lat, self.lng)

    def validate(self) -> None:
        """Raise ValidationError if any field is missing or out of range."""
        for name in ("lat", "lng", "accuracy_m", "timestamp"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError(f"Position sample field '{name}' must be a number, got {value!r}.")
            if not math.isfinite(value):
                raise ValidationError(f"Position sample field '{name}' is not finite: {value!r}.")

        if not self.coord.is_valid():
            raise ValidationError(f"Position sample out of range: ({self.lat}, {self.lng}).")
        if self.accuracy_m < 0:
            raise ValidationError(f"Position accuracy cannot be negative: {self.accuracy_m}.")

        if self.speed_mps is not None:
            if isinstance(self.speed_mps, bool) or not isinstance(self.speed_mps, (int, float)):
                raise ValidationError(f"Position speed must be a number, got {self.speed_mps!r}.")
            if not math.isfinite(self.speed_mps) or self.speed_mps < 0:
                raise ValidationError(f"Position speed is invalid: {self.speed_mps!r}.")


@dataclass(frozen=True)
class MovementRecord:
    """Movement between two consecutive position samples."""
    distance_m: float
    duration_s: float
    speed_mps: float


# ---------------------------------------------------------------------------
# Tracking status
# ---------------------------------------------------------------------------

class TrackingState(Enum):
    IDLE     = "idle"
    TRACKING = "tracking"
    STOPPED  = "stopped"


@dataclass(frozen=True)
class ProgressSnapshot:
    """Published by TrackingSession.on_sample() for every accepted sample."""
    progress_percentage: float
    total_distance_m: float
    traveled_distance_m: float
    remaining_distance_m: float
    remaining_time_s: float
    estimated_arrival: float            # epoch seconds
    closest_point_index: int
    distance_to_route_m: float
    estimated_speed_mps: float
    is_off_route: bool

    @property
    def speed_kmh(self) -> float:
        return self.estimated_speed_mps * 3.6

    def to_dict(self) -> dict:
        return {
            "progress_percentage": self.progress_percentage,
            "total_distance_m": self.total_distance_m,
            "traveled_distance_m": self.traveled_distance_m,
            "remaining_distance_m": self.remaining_distance_m,
            "remaining_time_s": self.remaining_time_s,
            "estimated_arrival": datetime.fromtimestamp(self.estimated_arrival, tz=timezone.utc).isoformat(),
            "closest_point_index": self.closest_point_index,
            "distance_to_route_m": self.distance_to_route_m,
            "estimated_speed_mps": self.estimated_speed_mps,
            "speed_kmh": self.speed_kmh,
            "is_off_route": self.is_off_route,
        }
