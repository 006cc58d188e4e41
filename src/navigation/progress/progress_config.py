# progress_config.py
# All tuneable constants for progress tracking in one place.
# Pass a TrackingConfig instance to every component that needs settings.

from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Physical constants
# ---------------------------------------------------------------------------

EARTH_RADIUS_M: float = 6_371_000.0

WALKING_SPEED_MPS: float = 1.4     # average walking speed
MIN_SPEED_MPS: float = 1.0         # floor applied to any non-positive estimate


# ---------------------------------------------------------------------------
# Main config
# ---------------------------------------------------------------------------

@dataclass
class TrackingConfig:
    # Off-route detection
    off_route_threshold_m: float = 50.0    # distance to nearest vertex → off-route

    # Speed estimation
    history_size: int = 10                 # movement records kept for smoothing
    default_speed_mps: float = WALKING_SPEED_MPS
    min_speed_mps: float = MIN_SPEED_MPS

    # Polyline decoding
    polyline_precision: int = 5            # decimal digits in encoded polylines
