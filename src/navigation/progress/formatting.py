# formatting.py
# Human-readable strings for progress values shown to the user.

from typing import Optional


def format_duration(seconds: Optional[float]) -> str:
    """'1h 5m' for an hour or more, '12 min' otherwise; '0 min' for missing values."""
    if not seconds or seconds < 0:
        return "0 min"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes} min"


def format_distance(meters: Optional[float]) -> str:
    """'850 m' below one kilometre, '2.3 km' above; '0 m' for missing values."""
    if not meters or meters < 0:
        return "0 m"

    if meters < 1000:
        return f"{int(meters + 0.5)} m"
    return f"{meters / 1000:.1f} km"
