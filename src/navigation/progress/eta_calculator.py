# eta_calculator.py
# Remaining distance + speed → remaining time and arrival estimate.

from dataclasses import dataclass

from .progress_config import MIN_SPEED_MPS


@dataclass(frozen=True)
class EtaEstimate:
    remaining_time_s: float
    estimated_arrival: float      # epoch seconds
    estimated_speed_mps: float


def calculate_eta(
    remaining_distance_m: float,
    speed_mps: float,
    now: float,
    min_speed_mps: float = MIN_SPEED_MPS,
) -> EtaEstimate:
    """
    Time left and wall-clock arrival for the remaining distance.

    Args:
        remaining_distance_m: Distance still to travel along the route.
        speed_mps:            Smoothed speed; non-positive values use min_speed_mps.
        now:                  Current time in epoch seconds.
        min_speed_mps:        Floor for a missing or non-positive speed.

    Returns:
        EtaEstimate. A finished trip (nothing remaining) reports zero time,
        arrival now and speed 0.
    """
    if remaining_distance_m <= 0:
        return EtaEstimate(remaining_time_s=0.0, estimated_arrival=now, estimated_speed_mps=0.0)

    if speed_mps <= 0:
        speed_mps = min_speed_mps

    remaining_time = remaining_distance_m / speed_mps
    return EtaEstimate(
        remaining_time_s=remaining_time,
        estimated_arrival=now + remaining_time,
        estimated_speed_mps=speed_mps,
    )
