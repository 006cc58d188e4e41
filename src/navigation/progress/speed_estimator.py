# speed_estimator.py
# Smoothed speed from a bounded window of recent movements.

import logging
from collections import deque
from typing import Deque, Optional, Tuple

from .geo_utils import haversine_distance
from .models import MovementRecord, PositionSample
from .progress_config import TrackingConfig

logger = logging.getLogger(__name__)


class SpeedEstimator:
    """
    Keeps the last `config.history_size` movements and turns them into a
    speed estimate that stays finite and positive under noisy GPS.

    Usage:
        estimator = SpeedEstimator(config)

        # Inside GPS loop:
        estimator.record(previous_sample, sample)
        speed = estimator.estimate()
    """

    def __init__(self, config: Optional[TrackingConfig] = None) -> None:
        self.config = config or TrackingConfig()
        self._history: Deque[MovementRecord] = deque(maxlen=self.config.history_size)
        self._current_speed: Optional[float] = None

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def history(self) -> Tuple[MovementRecord, ...]:
        return tuple(self._history)

    @property
    def current_speed(self) -> Optional[float]:
        """Device speed if reported, else the last calculated instantaneous speed."""
        return self._current_speed

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def reset(self) -> None:
        self._history.clear()
        self._current_speed = None

    def record(self, previous: Optional[PositionSample], current: PositionSample) -> Optional[MovementRecord]:
        """
        Register the movement from previous to current.

        Args:
            previous: Last accepted sample, or None for the first one.
            current:  Newly accepted sample.

        Returns:
            The MovementRecord added to the history, or None when the pair
            does not describe forward movement in time and space.
        """
        device_speed = current.speed_mps if current.speed_mps and current.speed_mps > 0 else None
        movement = None

        if previous is not None:
            dist = haversine_distance(previous.lat, previous.lng, current.lat, current.lng)
            duration = current.timestamp - previous.timestamp
            if duration > 0 and dist > 0:
                movement = MovementRecord(distance_m=dist, duration_s=duration, speed_mps=dist / duration)
                self._history.append(movement)

        if device_speed is not None:
            self._current_speed = device_speed
        elif movement is not None:
            self._current_speed = movement.speed_mps

        return movement

    # ------------------------------------------------------------------
    # Estimate
    # ------------------------------------------------------------------

    def estimate(self) -> float:
        """
        Smoothed speed in m/s, always > 0.

        Distance-weighted over the history window; falls back to the
        current speed, then to the configured walking speed.
        """
        if self._history:
            total_dist = sum(m.distance_m for m in self._history)
            total_time = sum(m.duration_s for m in self._history)
            speed = total_dist / total_time if total_time > 0 else 0.0
        elif self._current_speed and self._current_speed > 0:
            speed = self._current_speed
        else:
            speed = self.config.default_speed_mps

        if speed <= 0:
            speed = self.config.min_speed_mps
        return speed
