# gpxedit/model.py
"""
Canonical point representation for gpxedit.

A sequence is either a *track* (timestamps, speed) or a *route* (no
timestamps, positioned by cumulative distance). The kind is decided once at
ingest and every derived point keeps its class, so downstream code dispatches
on `Track.kind` instead of probing optional fields.
"""

from __future__ import annotations

import datetime as dt
import enum
from dataclasses import dataclass, replace
from typing import Optional, Union


class SequenceKind(enum.Enum):
    TIME_BASED = "time"
    DISTANCE_BASED = "distance"


@dataclass(frozen=True)
class TimeBasedPoint:
    lat: float
    lon: float
    elevation: Optional[float]
    time: dt.datetime
    speed: Optional[float] = None  # m/s; None until derived (or device-supplied)


@dataclass(frozen=True)
class DistanceBasedPoint:
    lat: float
    lon: float
    elevation: Optional[float]
    distance: float = 0.0  # cumulative meters from the first point


Point = Union[TimeBasedPoint, DistanceBasedPoint]


@dataclass(frozen=True)
class Track:
    """
    An immutable point sequence plus its kind.

    Edits never mutate a Track; they build a new one and the session swaps it
    in wholesale.
    """
    kind: SequenceKind
    points: tuple[Point, ...] = ()

    @classmethod
    def empty(cls, kind: SequenceKind = SequenceKind.TIME_BASED) -> "Track":
        return cls(kind=kind, points=())

    def __len__(self) -> int:
        return len(self.points)

    def with_points(self, points) -> "Track":
        return replace(self, points=tuple(points))
