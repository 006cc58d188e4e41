# polyline_codec.py
# Encoded-polyline <-> coordinate conversion.
# Stateless: identical input always gives identical output.

import logging
from typing import List, Sequence

import polyline

from .models import Coord

logger = logging.getLogger(__name__)

# Every character of an encoded polyline is a 6-bit chunk offset by 63
_MIN_CHAR = 63    # '?'
_MAX_CHAR = 126   # '~'


def decode(encoded: str, precision: int = 5) -> List[Coord]:
    """
    Decode an encoded polyline into coordinates.

    Args:
        encoded:   Polyline string as returned by directions APIs.
        precision: Number of decimal digits the polyline was encoded with.

    Returns:
        List of Coord; empty if the input is empty or malformed.
    """
    if not encoded or not isinstance(encoded, str):
        logger.warning("Invalid polyline data provided.")
        return []

    if any(not _MIN_CHAR <= ord(ch) <= _MAX_CHAR for ch in encoded):
        logger.warning("Polyline contains characters outside the encoding alphabet.")
        return []

    try:
        pairs = polyline.decode(encoded, precision)
    except (IndexError, ValueError) as e:
        logger.warning(f"Failed to decode polyline ({len(encoded)} chars): {e}")
        return []

    points = [Coord(lat, lng) for lat, lng in pairs]
    if not all(p.is_valid() for p in points):
        logger.warning("Polyline decoded to coordinates outside the valid range.")
        return []
    return points


def encode(points: Sequence[Coord], precision: int = 5) -> str:
    """
    Encode coordinates as a polyline string.

    Args:
        points:    Ordered coordinates.
        precision: Number of decimal digits to keep.

    Returns:
        Encoded polyline; empty string for no points.
    """
    if not points:
        return ""
    return polyline.encode([(p.lat, p.lng) for p in points], precision)
