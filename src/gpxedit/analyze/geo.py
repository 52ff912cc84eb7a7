# gpxedit/analyze/geo.py
"""
Great-circle distance helpers for gpxedit.

All distances are meters. Kilometers only appear in report formatting.
"""

from __future__ import annotations

from dataclasses import replace

from haversine import haversine, Unit

# Half the circumference on the haversine sphere; what an exactly antipodal
# pair measures once the inner term is clamped to 1.
HALF_CIRCUMFERENCE_M = haversine((0.0, 0.0), (0.0, 180.0), unit=Unit.METERS)


def distance(a, b) -> float:
    """
    Haversine distance (m) between two objects with `.lat`/`.lon`.

    Symmetric, exactly 0.0 for identical coordinates. Near-antipodal pairs can
    push the inner term a hair above 1.0 through rounding, which makes asin()
    raise; that case saturates at half the circumference.
    """
    if a.lat == b.lat and a.lon == b.lon:
        return 0.0
    try:
        return haversine((a.lat, a.lon), (b.lat, b.lon), unit=Unit.METERS)
    except ValueError as e:
        # Out-of-range coordinates are reported by haversine's own checks.
        if "math domain" not in str(e):
            raise
        return HALF_CIRCUMFERENCE_M


def cumulative_distance(points) -> list[float]:
    """Running distance (m) along `points`; out[0] == 0.0."""
    out: list[float] = []
    total = 0.0
    prev = None
    for p in points:
        if prev is not None:
            total += distance(prev, p)
        out.append(total)
        prev = p
    return out


def with_cumulative_distance(points) -> list:
    """
    Re-base route points so `distance` runs from 0 m at index 0.

    Points whose distance is already right are reused as-is.
    """
    return [
        p if p.distance == d else replace(p, distance=d)
        for p, d in zip(points, cumulative_distance(points))
    ]
