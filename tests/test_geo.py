import pytest

from gpxedit.analyze.geo import (
    HALF_CIRCUMFERENCE_M,
    cumulative_distance,
    distance,
    with_cumulative_distance,
)
from gpxedit.model import DistanceBasedPoint


def pt(lat, lon, d=0.0):
    return DistanceBasedPoint(lat=lat, lon=lon, elevation=None, distance=d)


@pytest.mark.parametrize("lat, lon", [(0.0, 0.0), (35.6586, 139.7454), (-89.9, 179.9)])
def test_distance_to_self_is_zero(lat, lon):
    assert distance(pt(lat, lon), pt(lat, lon)) == 0.0


def test_distance_is_symmetric():
    a, b = pt(35.0, 139.0), pt(35.7, 139.8)
    assert distance(a, b) == pytest.approx(distance(b, a), abs=1e-9)


def test_distance_known_value_along_meridian():
    # 0.0001 deg of latitude on the 6371.0088 km mean sphere
    assert distance(pt(35.0, 139.0), pt(35.0001, 139.0)) == pytest.approx(11.1195, abs=1e-3)


@pytest.mark.parametrize("a, b", [
    ((0.0, 0.0), (0.0, 180.0)),
    ((45.0, 10.0), (-45.0, -170.0)),
    ((89.999999, 0.0), (-89.999999, 180.0)),
])
def test_near_antipodal_points_do_not_raise(a, b):
    d = distance(pt(*a), pt(*b))
    assert d == pytest.approx(HALF_CIRCUMFERENCE_M, rel=1e-6)


def test_cumulative_distance_starts_at_zero_and_never_decreases():
    points = [pt(35.0, 139.0), pt(35.001, 139.0), pt(35.001, 139.0), pt(35.0, 139.002)]
    out = cumulative_distance(points)

    assert len(out) == len(points)
    assert out[0] == 0.0
    assert all(b >= a for a, b in zip(out, out[1:]))
    assert out[2] == out[1]  # duplicate point adds nothing
    assert out[1] == pytest.approx(distance(points[0], points[1]))


def test_cumulative_distance_of_empty_sequence():
    assert cumulative_distance([]) == []


def test_with_cumulative_distance_rebases_to_zero():
    points = [pt(35.0, 139.0, d=500.0), pt(35.0001, 139.0, d=520.0)]
    out = with_cumulative_distance(points)

    assert out[0].distance == 0.0
    assert out[1].distance == pytest.approx(11.1195, abs=1e-3)
    assert points[0].distance == 500.0  # input untouched
