import datetime as dt
from pathlib import Path

import matplotlib
import pytest

from gpxedit.model import DistanceBasedPoint, SequenceKind, TimeBasedPoint, Track

matplotlib.use("Agg")

T0 = dt.datetime(2024, 5, 1, 6, 0, 0, tzinfo=dt.timezone.utc)


@pytest.fixture
def sample_track_path() -> Path:
    return Path(__file__).parent / "data" / "sample_track.gpx"


@pytest.fixture
def sample_route_path() -> Path:
    return Path(__file__).parent / "data" / "sample_route.gpx"


@pytest.fixture
def make_track():
    """Build a time-based Track: points 1 s apart, heading north ~11 m per step."""
    def _make(elevations, *, step_deg=0.0001, step_s=1.0, speeds=None):
        pts = []
        for i, ele in enumerate(elevations):
            pts.append(TimeBasedPoint(
                lat=35.0 + i * step_deg,
                lon=139.0,
                elevation=ele,
                time=T0 + dt.timedelta(seconds=i * step_s),
                speed=speeds[i] if speeds else None,
            ))
        return Track(kind=SequenceKind.TIME_BASED, points=tuple(pts))
    return _make


@pytest.fixture
def make_route():
    """Build a distance-based Track from (distance_m, elevation) pairs."""
    def _make(pairs):
        pts = tuple(
            DistanceBasedPoint(lat=35.0, lon=139.0 + i * 0.0001, elevation=ele, distance=d)
            for i, (d, ele) in enumerate(pairs)
        )
        return Track(kind=SequenceKind.DISTANCE_BASED, points=pts)
    return _make
