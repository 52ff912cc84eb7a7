import datetime as dt

import pytest

from gpxedit.analyze.geo import cumulative_distance
from gpxedit.formats.gpx import _format_gpx_time, export_gpx, write_gpx
from gpxedit.ingest.normalize import ingest_gpx, parse_gpx_text
from gpxedit.model import SequenceKind, TimeBasedPoint, Track

NOW = dt.datetime(2025, 1, 2, 3, 4, 5, tzinfo=dt.timezone.utc)
LATER = dt.datetime(2025, 6, 7, 8, 9, 10, tzinfo=dt.timezone.utc)


def reingest(text):
    return ingest_gpx(parse_gpx_text(text)).track


def coords(track):
    return [(p.lat, p.lon, p.elevation) for p in track.points]


def test_track_round_trip(make_track):
    track = make_track([10.25, 12.0, 11.125, 13.5, 9.875], step_deg=0.000123456789)
    back = reingest(export_gpx(track, now=NOW))

    assert back.kind is SequenceKind.TIME_BASED
    assert coords(back) == coords(track)
    assert [p.time for p in back.points] == [p.time for p in track.points]


def test_track_times_keep_second_precision():
    t = dt.datetime(2024, 5, 1, 6, 0, 0, 750000, tzinfo=dt.timezone.utc)
    track = Track(SequenceKind.TIME_BASED, (TimeBasedPoint(35.0, 139.0, 5.0, t),))
    back = reingest(export_gpx(track, now=NOW))

    assert abs((back.points[0].time - t).total_seconds()) < 1.0


def test_route_round_trip_has_no_timestamps(make_route):
    route = make_route([(0, 100.5), (10, 101.25), (20, 99.0)])
    text = export_gpx(route, now=NOW)

    assert "<rte>" in text
    assert "<trk>" not in text
    # the only <time> is the export timestamp
    assert text.count("<time>") == 1

    back = reingest(text)
    assert back.kind is SequenceKind.DISTANCE_BASED
    assert coords(back) == coords(route)
    assert [p.distance for p in back.points] == cumulative_distance(route.points)


def test_header_names_tool_and_export_time(make_track):
    text = export_gpx(make_track([1, 2]), creator="gpxedit-test", now=NOW)

    assert text.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert 'creator="gpxedit-test"' in text
    assert 'xmlns="http://www.topografix.com/GPX/1/1"' in text
    assert "<desc>Exported by gpxedit-test</desc>" in text
    assert "<time>2025-01-02T03:04:05Z</time>" in text


def test_output_is_deterministic_apart_from_export_time(make_track):
    track = make_track([1, 2, 3])
    a = export_gpx(track, now=NOW)
    b = export_gpx(track, now=NOW)
    c = export_gpx(track, now=LATER)

    assert a == b
    diff = [(x, y) for x, y in zip(a.splitlines(), c.splitlines()) if x != y]
    assert len(diff) == 1
    assert "2025-01-02T03:04:05Z" in diff[0][0]


def test_missing_elevation_is_omitted(make_route):
    text = export_gpx(make_route([(0, None), (5, 7.0)]), now=NOW)
    assert text.count("<ele>") == 1
    assert reingest(text).points[0].elevation is None


@pytest.mark.parametrize(
    "value, expected",
    [
        (dt.datetime(2024, 1, 1, 12, 0, 0, 999999, tzinfo=dt.timezone.utc), "2024-01-01T12:00:00Z"),
        (dt.datetime(2024, 1, 1, 21, 0, 0, tzinfo=dt.timezone(dt.timedelta(hours=9))), "2024-01-01T12:00:00Z"),
        (dt.datetime(2024, 1, 1, 12, 0, 0), "2024-01-01T12:00:00Z"),
    ],
)
def test_format_gpx_time(value, expected):
    assert _format_gpx_time(value) == expected


def test_write_gpx_creates_parent_dirs(tmp_path, make_track):
    out = tmp_path / "nested" / "out.gpx"
    write_gpx(export_gpx(make_track([1, 2]), now=NOW), out)
    assert coords(reingest(out.read_text(encoding="utf-8"))) == coords(make_track([1, 2]))
