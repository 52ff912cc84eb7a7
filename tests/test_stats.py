import pytest

from gpxedit.analyze.stats import compute_stats, elevation_changes, format_stats

STEP_M = 11.1195  # 0.0001 deg of latitude


def test_gain_loss_and_extrema_scenario(make_track):
    track = make_track([10, 12, 11, 13, 10])
    stats = compute_stats(track.points)

    assert stats.points == 5
    assert stats.elevation_gain_m == 4
    assert stats.elevation_loss_m == 4
    assert stats.min_elevation_m == 10
    assert stats.max_elevation_m == 13


def test_distance_is_meters_and_km_only_for_display(make_track):
    stats = compute_stats(make_track([10, 12, 11, 13, 10]).points)

    assert stats.total_distance_m == pytest.approx(4 * STEP_M, abs=1e-2)
    assert stats.total_distance_km == pytest.approx(stats.total_distance_m / 1000.0)


def test_timed_metrics(make_track):
    stats = compute_stats(make_track([10, 12, 11, 13, 10]).points)

    assert stats.duration_s == 4
    assert stats.avg_speed_mps == pytest.approx(STEP_M, abs=1e-2)
    assert stats.max_speed_mps == pytest.approx(STEP_M, abs=1e-2)


def test_route_has_no_timed_metrics(make_route):
    stats = compute_stats(make_route([(0, 10), (5, 20), (10, 5)]).points)

    assert stats.elevation_gain_m == 10
    assert stats.elevation_loss_m == 15
    assert stats.duration_s == 0.0
    assert stats.avg_speed_mps == 0.0


@pytest.mark.parametrize("elevations", [[], [42]])
def test_fewer_than_two_points_reports_zeros(make_track, elevations):
    stats = compute_stats(make_track(elevations).points)

    assert stats.points == len(elevations)
    assert stats.total_distance_m == 0.0
    assert stats.elevation_gain_m == 0.0
    assert stats.elevation_loss_m == 0.0
    assert stats.min_elevation_m == 0.0
    assert stats.max_elevation_m == 0.0


def test_missing_elevations_are_excluded_not_zero(make_track):
    stats = compute_stats(make_track([10, None, 15, 12]).points)

    assert stats.elevation_gain_m == 0
    assert stats.elevation_loss_m == 3
    assert stats.min_elevation_m == 10
    assert stats.max_elevation_m == 15


def test_no_elevations_at_all(make_track):
    stats = compute_stats(make_track([None, None]).points)
    assert stats.min_elevation_m == 0.0
    assert stats.max_elevation_m == 0.0
    assert stats.total_distance_m > 0


def test_elevation_changes_loss_is_positive(make_track):
    assert elevation_changes(make_track([100, 90, 95]).points) == (5, 10)


def test_format_stats_rounds_for_display(make_track):
    stats = compute_stats(make_track([10.4, 12.6, 11.0]).points)
    text = format_stats(stats)

    assert "distance (km)  : 0.02" in text
    assert "min ele (m)    : 10" in text
    assert "max ele (m)    : 13" in text

    row = format_stats(stats, tsv=True).split("\t")
    assert row[0] == "3"
    assert row[1] == "0.02"
