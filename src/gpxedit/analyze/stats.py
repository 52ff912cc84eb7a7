# gpxedit/analyze/stats.py
"""
Track statistics for gpxedit

Everything here is a pure function of the current point sequence and is
recomputed after every edit. Internal units are meters; kilometers are only
produced for display.
"""

from __future__ import annotations

from dataclasses import dataclass

from gpxedit.analyze.geo import distance
from gpxedit.model import TimeBasedPoint


@dataclass(frozen=True)
class TrackStats:
    points: int = 0
    total_distance_m: float = 0.0
    elevation_gain_m: float = 0.0
    elevation_loss_m: float = 0.0
    min_elevation_m: float = 0.0
    max_elevation_m: float = 0.0
    # time-based sequences only
    duration_s: float = 0.0
    avg_speed_mps: float = 0.0
    max_speed_mps: float = 0.0

    @property
    def total_distance_km(self) -> float:
        return self.total_distance_m / 1000.0


def compute_step_metrics(points):
    """Return per-segment dt (s), distance (m), speed (m/s) for timed points."""
    dts = []
    ds = []
    vs = []

    for p0, p1 in zip(points, points[1:]):
        dt_s = (p1.time - p0.time).total_seconds()
        if dt_s <= 0:
            continue

        d_m = distance(p0, p1)
        v = d_m / dt_s

        dts.append(dt_s)
        ds.append(d_m)
        vs.append(v)

    return dts, ds, vs


def elevation_changes(points) -> tuple[float, float]:
    """
    (gain, loss) summed over consecutive pairs; loss is positive.

    A pair only counts when both elevations are defined.
    """
    gain = 0.0
    loss = 0.0
    for p0, p1 in zip(points, points[1:]):
        if p0.elevation is None or p1.elevation is None:
            continue
        diff = p1.elevation - p0.elevation
        if diff > 0:
            gain += diff
        else:
            loss -= diff
    return gain, loss


def compute_stats(points) -> TrackStats:
    points = list(points)
    if len(points) < 2:
        return TrackStats(points=len(points))

    total = sum(distance(p0, p1) for p0, p1 in zip(points, points[1:]))
    gain, loss = elevation_changes(points)

    elevations = [p.elevation for p in points if p.elevation is not None]
    min_ele = min(elevations) if elevations else 0.0
    max_ele = max(elevations) if elevations else 0.0

    duration = avg_speed = max_speed = 0.0
    if isinstance(points[0], TimeBasedPoint):
        dts, ds, vs = compute_step_metrics(points)
        duration = sum(dts)
        avg_speed = (sum(ds) / duration) if duration else 0.0
        max_speed = max(vs) if vs else 0.0

    return TrackStats(
        points=len(points),
        total_distance_m=total,
        elevation_gain_m=gain,
        elevation_loss_m=loss,
        min_elevation_m=min_ele,
        max_elevation_m=max_ele,
        duration_s=duration,
        avg_speed_mps=avg_speed,
        max_speed_mps=max_speed,
    )


def format_stats(stats: TrackStats, *, tsv: bool = False) -> str:
    """Render stats for a terminal: km with 2 decimals, elevations in whole meters."""
    if tsv:
        return (
            f"{stats.points}\t"
            f"{stats.total_distance_km:.2f}\t"
            f"{round(stats.elevation_gain_m)}\t"
            f"{round(stats.elevation_loss_m)}\t"
            f"{round(stats.min_elevation_m)}\t"
            f"{round(stats.max_elevation_m)}\t"
            f"{stats.duration_s:.1f}\t"
            f"{stats.avg_speed_mps:.3f}\t"
            f"{stats.max_speed_mps:.3f}"
        )
    return "\n".join([
        f"  points         : {stats.points}",
        f"  distance (km)  : {stats.total_distance_km:.2f}",
        f"  gain (m)       : {round(stats.elevation_gain_m)}",
        f"  loss (m)       : {round(stats.elevation_loss_m)}",
        f"  min ele (m)    : {round(stats.min_elevation_m)}",
        f"  max ele (m)    : {round(stats.max_elevation_m)}",
        f"  duration (s)   : {stats.duration_s:.1f}",
        f"  avg speed m/s  : {stats.avg_speed_mps:.3f}",
        f"  max speed m/s  : {stats.max_speed_mps:.3f}",
    ])


TSV_HEADER = "file\tpoints\tdistance_km\tgain_m\tloss_m\tmin_ele_m\tmax_ele_m\tduration_s\tavg_speed_mps\tmax_speed_mps"
