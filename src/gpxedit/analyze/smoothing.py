# gpxedit/analyze/smoothing.py
"""
Windowed-median smoothing for gpxedit.

Two mutually exclusive passes, chosen by the sequence kind:

  - routes (distance-based): elevation := median elevation of every point
    whose cumulative distance lies within +/- window/2 of the target point
  - tracks (time-based): speed := median of the instantaneous speeds between
    consecutive points whose timestamps lie within +/- window/2 of the target

Both are plain all-pairs scans over the original (unsmoothed) values. The
window bounds are inclusive and the target point is always part of its own
window.
"""

from __future__ import annotations

from dataclasses import replace
from statistics import median as _median
from typing import Optional, Sequence

from gpxedit.analyze.geo import distance
from gpxedit.model import DistanceBasedPoint, SequenceKind, TimeBasedPoint, Track

ELEVATION_WINDOW_M = 25.0
SPEED_WINDOW_S = 15.0


def median(values: Sequence[float]) -> float:
    """Middle value; mean of the two middle values for an even count."""
    if not values:
        raise ValueError("median() of an empty sequence")
    return float(_median(values))


def smooth_elevation_by_distance(
        points: Sequence[DistanceBasedPoint],
        window_m: float = ELEVATION_WINDOW_M,
) -> list[DistanceBasedPoint]:
    """
    Replace each elevation with the median over a distance window.

    Points without an elevation stay without one and are left out of their
    neighbours' windows.
    """
    half = window_m / 2.0
    out: list[DistanceBasedPoint] = []

    for p in points:
        if p.elevation is None:
            out.append(p)
            continue

        lo, hi = p.distance - half, p.distance + half
        window = [
            q.elevation for q in points
            if q.elevation is not None and lo <= q.distance <= hi
        ]
        if len(window) < 2:
            out.append(p)
            continue

        out.append(replace(p, elevation=median(window)))

    return out


def _window_speed(window: Sequence[TimeBasedPoint]) -> float:
    speeds = []
    for p0, p1 in zip(window, window[1:]):
        dt_s = (p1.time - p0.time).total_seconds()
        if dt_s <= 0:
            continue
        speeds.append(distance(p0, p1) / dt_s)
    return median(speeds) if speeds else 0.0


def derive_speed_by_time(
        points: Sequence[TimeBasedPoint],
        window_s: float = SPEED_WINDOW_S,
) -> list[TimeBasedPoint]:
    """
    Fill in `speed` (m/s) for every point that did not come with one.

    Device-supplied speeds are kept verbatim.
    """
    half = window_s / 2.0
    out: list[TimeBasedPoint] = []

    for i, p in enumerate(points):
        if p.speed is not None:
            out.append(p)
            continue

        if i == 0:
            out.append(replace(p, speed=0.0))
            continue

        window = [
            q for q in points
            if abs((q.time - p.time).total_seconds()) <= half
        ]
        speed = _window_speed(window) if len(window) >= 2 else 0.0
        out.append(replace(p, speed=speed))

    return out


def smooth_track(
        track: Track, *,
        elevation_window_m: Optional[float] = None,
        speed_window_s: Optional[float] = None,
) -> Track:
    """Run the smoothing pass that matches `track.kind`."""
    if track.kind is SequenceKind.DISTANCE_BASED:
        pts = smooth_elevation_by_distance(
            track.points,
            window_m=ELEVATION_WINDOW_M if elevation_window_m is None else elevation_window_m,
        )
    else:
        pts = derive_speed_by_time(
            track.points,
            window_s=SPEED_WINDOW_S if speed_window_s is None else speed_window_s,
        )
    return track.with_points(pts)
