# errors.py
# Exceptions and warnings raised by the progress tracking engine.

from enum import Enum
from typing import Optional


class TrackingError(Exception):
    """Base class for every error surfaced by the tracking engine."""


class ValidationError(TrackingError):
    """Route geometry or a position sample is missing or malformed."""


# ---------------------------------------------------------------------------
# Sensor failures
# ---------------------------------------------------------------------------

class SensorErrorCode(Enum):
    PERMISSION_DENIED    = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT              = "timeout"
    UNSUPPORTED          = "unsupported"


_SENSOR_MESSAGES = {
    SensorErrorCode.PERMISSION_DENIED:    "Location access denied by user",
    SensorErrorCode.POSITION_UNAVAILABLE: "Location information unavailable",
    SensorErrorCode.TIMEOUT:              "Location request timed out",
    SensorErrorCode.UNSUPPORTED:          "Geolocation is not supported",
}


class SensorError(TrackingError):
    """
    The position source reported a failure.

    Args:
        code:    What went wrong upstream.
        message: Optional override for the default human-readable message.
    """

    def __init__(self, code: SensorErrorCode, message: Optional[str] = None) -> None:
        self.code = code
        self.message = message or _SENSOR_MESSAGES[code]
        super().__init__(self.message)


class DegenerateInputWarning(UserWarning):
    """Route geometry is empty or has a single vertex; progress uses safe defaults."""
