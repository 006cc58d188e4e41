# tracking_session.py
# State machine that tracks a live position against a fixed route.
# Call start() once, then on_sample() on every position fix, stop() when done.

import logging
import time
from typing import Any, Callable, Optional, Tuple

from .errors import SensorError, TrackingError, ValidationError
from .eta_calculator import calculate_eta
from .models import Coord, MovementRecord, PositionSample, ProgressSnapshot, Route, TrackingState
from .position_source import PositionSubscription
from .progress_config import TrackingConfig
from .route_projector import RouteProjector
from .route_source import resolve_route
from .speed_estimator import SpeedEstimator

logger = logging.getLogger(__name__)


class TrackingSession:
    """
    Progress tracker for a single trip.

    Usage:
        session = TrackingSession(config)
        session.start(directions, subscription)

        # Inside GPS callback:
        snapshot = session.on_sample(sample)

        session.stop()

    The latest snapshot is replaced as a whole frozen object, so a reader on
    another thread always sees either the previous or the new snapshot.

    Args:
        config:    Optional TrackingConfig; defaults to TrackingConfig().
        clock:     Returns the current time in epoch seconds; used for arrival times.
        on_update: Optional callback receiving every new snapshot.
    """

    def __init__(
        self,
        config: Optional[TrackingConfig] = None,
        clock: Callable[[], float] = time.time,
        on_update: Optional[Callable[[ProgressSnapshot], Any]] = None,
    ) -> None:
        self.config = config or TrackingConfig()
        self._clock = clock
        self._on_update = on_update

        self._state: TrackingState = TrackingState.IDLE
        self._route: Optional[Route] = None
        self._projector: Optional[RouteProjector] = None
        self._estimator = SpeedEstimator(self.config)
        self._subscription: Optional[PositionSubscription] = None

        self._previous: Optional[PositionSample] = None
        self._snapshot: Optional[ProgressSnapshot] = None
        self._error: Optional[TrackingError] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, route_data: Any, subscription: Optional[PositionSubscription] = None) -> Route:
        """
        Validate the route and begin tracking.

        Args:
            route_data:   Polyline string, route mapping or directions response.
            subscription: Handle for the position watch feeding this session;
                          closed when the session stops.

        Returns:
            The resolved Route.

        Raises:
            ValidationError: No usable polyline; the session keeps its prior state.
        """
        try:
            route = resolve_route(route_data, self.config.polyline_precision)
        except ValidationError as e:
            self._error = e
            logger.warning(f"Tracking not started ({self._state.value}): {e}")
            raise

        if self._state is TrackingState.TRACKING:
            logger.info("Restarting tracking with a new route.")
        self._release()

        self._route = route
        self._projector = RouteProjector(route)
        self._subscription = subscription
        self._state = TrackingState.TRACKING

        logger.info(
            f"Tracking started — {len(route)} points, "
            f"{self._projector.total_distance_m:.0f} m total."
        )
        return route

    def stop(self) -> None:
        """End tracking and drop all session state. Safe to call any time."""
        was_tracking = self._state is TrackingState.TRACKING
        self._release()
        self._state = TrackingState.STOPPED
        if was_tracking:
            logger.info("Tracking stopped.")

    def on_sensor_error(self, error: SensorError) -> None:
        """
        Handle a failure reported by the position source.

        Tracking stops and all state is cleared; the error stays readable via
        `error` until the next start() or stop(). No retry is attempted.
        """
        logger.error(f"Position source failed ({error.code.value}): {error.message}")
        self._release()
        self._state = TrackingState.STOPPED
        self._error = error

    def _release(self) -> None:
        if self._subscription is not None:
            subscription, self._subscription = self._subscription, None
            subscription.close()
        self._route = None
        self._projector = None
        self._estimator.reset()
        self._previous = None
        self._snapshot = None
        self._error = None

    # ------------------------------------------------------------------
    # Core method — call on every position fix
    # ------------------------------------------------------------------

    def on_sample(self, sample: PositionSample) -> Optional[ProgressSnapshot]:
        """
        Process a new position sample and publish a fresh snapshot.

        Args:
            sample: Latest fix from the position source.

        Returns:
            The new ProgressSnapshot; the previous one if the sample is older
            than the last accepted sample; None when not tracking.

        Raises:
            ValidationError: The sample is malformed; nothing is updated.
        """
        if self._state is not TrackingState.TRACKING:
            logger.debug(f"Ignoring sample while {self._state.value}.")
            return None

        sample.validate()

        previous = self._previous
        if previous is not None and sample.timestamp < previous.timestamp:
            logger.warning(
                f"Skipping out-of-order sample ({sample.timestamp} < {previous.timestamp})."
            )
            return self._snapshot

        # 1. Locate on route
        projection = self._projector.project(sample.coord)
        index = projection.closest_point_index

        # 2. Update speed window
        self._estimator.record(previous, sample)

        # 3. ETA
        remaining = self._projector.remaining_distance_m(index)
        eta = calculate_eta(
            remaining,
            self._estimator.estimate(),
            self._clock(),
            self.config.min_speed_mps,
        )

        snapshot = ProgressSnapshot(
            progress_percentage=self._projector.progress_percentage(index),
            total_distance_m=self._projector.total_distance_m,
            traveled_distance_m=self._projector.traveled_distance_m(index),
            remaining_distance_m=remaining,
            remaining_time_s=eta.remaining_time_s,
            estimated_arrival=eta.estimated_arrival,
            closest_point_index=index,
            distance_to_route_m=projection.distance_to_route_m,
            estimated_speed_mps=eta.estimated_speed_mps,
            is_off_route=projection.distance_to_route_m > self.config.off_route_threshold_m,
        )

        self._previous = sample
        self._snapshot = snapshot
        logger.debug(
            f"Progress {snapshot.progress_percentage:.1f}% — "
            f"{snapshot.remaining_distance_m:.0f} m left, "
            f"{snapshot.distance_to_route_m:.0f} m from route."
        )

        if snapshot.is_off_route:
            logger.info(f"Off route: {snapshot.distance_to_route_m:.0f} m from nearest route point.")

        if self._on_update is not None:
            self._on_update(snapshot)
        return snapshot

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> TrackingState:
        return self._state

    @property
    def is_tracking(self) -> bool:
        return self._state is TrackingState.TRACKING

    @property
    def snapshot(self) -> Optional[ProgressSnapshot]:
        return self._snapshot

    @property
    def error(self) -> Optional[TrackingError]:
        return self._error

    @property
    def route(self) -> Optional[Route]:
        return self._route

    @property
    def current_location(self) -> Optional[Coord]:
        return self._previous.coord if self._previous is not None else None

    @property
    def movement_history(self) -> Tuple[MovementRecord, ...]:
        return self._estimator.history

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> "TrackingSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()
