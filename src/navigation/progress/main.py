# main.py
# Entry point — replays a simulated walk into a TrackingSession.
# In production, feed session.on_sample from your real position source.
#
# Run from src/:  python -m navigation.progress.main [--polyline ...]

import argparse
import logging

from .errors import TrackingError
from .formatting import format_distance, format_duration
from .geo_utils import bearing, compass_direction
from .models import Coord, PositionSample, ProgressSnapshot
from .polyline_codec import decode, encode
from .position_source import ReplayPositionSource
from .progress_config import TrackingConfig
from .tracking_session import TrackingSession

# ------------------------------------------------------------------
# Simulation coordinates (Sıhhiye → Kurtuluş, Ankara)
# ------------------------------------------------------------------
ROUTE_POINTS = [
    Coord(39.92409,   32.845382),
    Coord(39.9240467, 32.8451522),
    Coord(39.9232599, 32.8441792),
    Coord(39.9240102, 32.8452347),
    Coord(39.9249406, 32.8462865),
    Coord(39.9254588, 32.8477125),
    Coord(39.9208164, 32.8533392),
    Coord(39.920927,  32.8533893),
    Coord(39.9210086, 32.8529793),
]

START_TIME = 1_700_000_000.0


def simulated_walk(points, interval_s: float = 30.0):
    """One sample per route point, with a detour off the route half-way."""
    samples = []
    for i, p in enumerate(points):
        lat = p.lat + (0.001 if i == len(points) // 2 else 0.0)   # ~110 m north
        samples.append(PositionSample(
            lat=lat,
            lng=p.lng,
            accuracy_m=8.0,
            timestamp=START_TIME + i * interval_s,
        ))
    return samples


def print_snapshot(snapshot: ProgressSnapshot) -> None:
    print(
        f"  {snapshot.progress_percentage:5.1f}%  "
        f"{format_distance(snapshot.remaining_distance_m):>8} left  "
        f"{format_duration(snapshot.remaining_time_s):>8}  "
        f"{snapshot.speed_kmh:4.1f} km/h"
    )
    if snapshot.is_off_route:
        print(f"  ⚠  Off route — {format_distance(snapshot.distance_to_route_m)} from the path.")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Replay a simulated walk through the progress tracker.")
    parser.add_argument("--polyline", help="Encoded route polyline (defaults to a built-in Ankara walk).")
    parser.add_argument("--off-route-threshold", type=float, default=50.0, help="Off-route distance in metres.")
    parser.add_argument("--verbose", action="store_true", help="Log every snapshot.")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)

    # ------------------------------------------------------------------
    # Logging setup — configure once here, all modules inherit
    # ------------------------------------------------------------------
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = TrackingConfig(off_route_threshold_m=args.off_route_threshold)
    encoded = args.polyline or encode(ROUTE_POINTS)
    walk_points = decode(args.polyline) if args.polyline else ROUTE_POINTS

    # Fixed clock keeps arrival times reproducible in the replay
    session = TrackingSession(config, clock=lambda: START_TIME, on_update=print_snapshot)
    source = ReplayPositionSource(simulated_walk(walk_points))
    subscription = source.subscribe(session.on_sample, session.on_sensor_error)

    try:
        route = session.start(encoded, subscription)
    except TrackingError as e:
        print(f"[Main] Could not start tracking: {e}")
        return

    print(f"\n--- Tracking {len(route)} points ---")
    if not route.is_degenerate:
        start, end = route.points[0], route.points[-1]
        print(f"    Destination lies {compass_direction(bearing(start, end))} of the start.")

    with session:
        source.run()

    print("\n--- Session complete ---")
    print(f"    Samples replayed: {source.delivered}")


if __name__ == "__main__":
    main()
