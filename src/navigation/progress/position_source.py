# position_source.py
# Caller-side plumbing between a position source and a TrackingSession.
# The source pushes samples; the engine never polls it.

import logging
import time
from typing import Any, Callable, Iterable, List, Mapping, Optional, Union

from .errors import SensorError, ValidationError
from .models import PositionSample

logger = logging.getLogger(__name__)

SampleCallback = Callable[[PositionSample], Any]
ErrorCallback = Callable[[SensorError], Any]


class PositionSubscription:
    """
    Handle for an active position watch.

    Wraps the source's cancel function so it runs at most once, however
    many times close() is called.

    Args:
        cancel: Callable that stops the upstream watch.
    """

    def __init__(self, cancel: Optional[Callable[[], None]] = None) -> None:
        self._cancel = cancel
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._cancel is not None:
            self._cancel()

    def __enter__(self) -> "PositionSubscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def position_from_fix(fix: Mapping[str, Any], timestamp: Optional[float] = None) -> PositionSample:
    """
    Build a PositionSample from a raw geolocation fix.

    Accepts either {"coords": {"latitude", "longitude", "accuracy", "speed"}}
    or the same keys at the top level. A "timestamp" key in the fix is in
    epoch milliseconds, as geolocation APIs report it, and is converted to
    seconds. An explicit `timestamp` argument is already in epoch seconds.
    Without either, the sample is stamped with the current time.

    Raises:
        ValidationError: latitude or longitude is missing.
    """
    coords = fix.get("coords", fix)
    try:
        lat = coords["latitude"]
        lng = coords["longitude"]
    except KeyError as e:
        raise ValidationError(f"Position fix is missing {e.args[0]!r}.") from e

    if timestamp is None:
        fix_ms = fix.get("timestamp")
        if fix_ms is None:
            timestamp = time.time()
        elif isinstance(fix_ms, (int, float)) and not isinstance(fix_ms, bool):
            timestamp = fix_ms / 1000.0
        else:
            raise ValidationError(f"Position fix timestamp must be a number, got {fix_ms!r}.")

    return PositionSample(
        lat=lat,
        lng=lng,
        accuracy_m=coords.get("accuracy", 0.0),
        timestamp=timestamp,
        speed_mps=coords.get("speed"),
    )


class ReplayPositionSource:
    """
    Replays a recorded sequence of samples (and sensor errors) to a subscriber.

    Usage:
        source = ReplayPositionSource(samples)
        subscription = source.subscribe(session.on_sample, session.on_sensor_error)
        session.start(route, subscription)
        source.run()

    Args:
        items: PositionSample or SensorError values in delivery order.
    """

    def __init__(self, items: Iterable[Union[PositionSample, SensorError]]) -> None:
        self._items: List[Union[PositionSample, SensorError]] = list(items)
        self._on_sample: Optional[SampleCallback] = None
        self._on_error: Optional[ErrorCallback] = None
        self._subscription: Optional[PositionSubscription] = None
        self.delivered = 0

    def subscribe(self, on_sample: SampleCallback, on_error: Optional[ErrorCallback] = None) -> PositionSubscription:
        self._on_sample = on_sample
        self._on_error = on_error
        self._subscription = PositionSubscription(cancel=self._unsubscribe)
        return self._subscription

    def _unsubscribe(self) -> None:
        self._on_sample = None
        self._on_error = None
        logger.debug(f"Replay unsubscribed after {self.delivered} item(s).")

    def run(self) -> int:
        """
        Deliver every remaining item until the subscription is closed.

        Returns:
            Number of items delivered.
        """
        while self.delivered < len(self._items) and self._on_sample is not None:
            item = self._items[self.delivered]
            self.delivered += 1
            if isinstance(item, SensorError):
                if self._on_error is not None:
                    self._on_error(item)
                else:
                    logger.warning(f"Sensor error with no error handler: {item}")
            else:
                self._on_sample(item)
        return self.delivered
