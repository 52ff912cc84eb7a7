# gpxedit/ingest/normalize.py
"""
GPX document -> canonical point sequence.

gpxpy does the XML parsing; this module only decides which group of points
to use and maps it onto gpxedit.model:

  - first track (all its segments, in order)  -> time-based sequence
  - otherwise first route                     -> distance-based sequence
  - neither                                   -> empty sequence + no_data

A track whose points carry no timestamps at all is treated as a route.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import gpxpy
import gpxpy.gpx

from gpxedit.analyze.geo import with_cumulative_distance
from gpxedit.analyze.smoothing import smooth_track
from gpxedit.errors import InvalidGpxError
from gpxedit.model import DistanceBasedPoint, SequenceKind, TimeBasedPoint, Track
from gpxedit.util.logging import log


@dataclass(frozen=True)
class IngestResult:
    track: Track
    no_data: bool = False


def _as_utc(t: dt.datetime) -> dt.datetime:
    if t.tzinfo is None:
        return t.replace(tzinfo=dt.timezone.utc)
    return t.astimezone(dt.timezone.utc)


def _as_float(v) -> Optional[float]:
    return float(v) if v is not None else None


def _device_speed(point: gpxpy.gpx.GPXTrackPoint) -> Optional[float]:
    """
    Speed recorded by the device, if any.

    GPX 1.0 has a <speed> element (gpxpy exposes it as .speed); Garmin and
    others put it in an extension such as <gpxtpx:speed>.
    """
    if point.speed is not None:
        return float(point.speed)
    for ext in point.extensions or []:
        for el in ext.iter():
            tag = el.tag.rsplit("}", 1)[-1].lower()
            if tag == "speed" and el.text and el.text.strip():
                try:
                    return float(el.text)
                except ValueError:
                    continue
    return None


def _track_points(trk: gpxpy.gpx.GPXTrack) -> list:
    return [p for seg in trk.segments for p in seg.points]


def _time_based(raw_points) -> Track:
    points = []
    skipped = 0
    for p in raw_points:
        if p.time is None:
            skipped += 1   # skip points without timestamps
            continue
        points.append(TimeBasedPoint(
            lat=float(p.latitude),
            lon=float(p.longitude),
            elevation=_as_float(p.elevation),
            time=_as_utc(p.time),
            speed=_device_speed(p),
        ))
    if skipped:
        log(f"Skipped {skipped} trackpoint(s) without a timestamp")
    backwards = sum(1 for a, b in zip(points, points[1:]) if b.time < a.time)
    if backwards:
        # kept in document order; speed derivation ignores non-positive steps
        log(f"WARNING: {backwards} trackpoint(s) go back in time", err=True)
    return Track(kind=SequenceKind.TIME_BASED, points=tuple(points))


def _distance_based(raw_points) -> Track:
    base = [
        DistanceBasedPoint(
            lat=float(p.latitude),
            lon=float(p.longitude),
            elevation=_as_float(p.elevation),
        )
        for p in raw_points
    ]
    return Track(kind=SequenceKind.DISTANCE_BASED, points=tuple(with_cumulative_distance(base)))


def ingest_gpx(gpx: gpxpy.gpx.GPX) -> IngestResult:
    """Map a parsed GPX document onto a Track. Never raises for missing data."""
    if gpx.tracks:
        raw = _track_points(gpx.tracks[0])
        if any(p.time is not None for p in raw):
            return IngestResult(track=_time_based(raw))
        if raw:
            log("First track has no timestamps; treating it as a route")
            return IngestResult(track=_distance_based(raw))

    if gpx.routes:
        return IngestResult(track=_distance_based(gpx.routes[0].points))

    log("No track or route data in GPX document")
    return IngestResult(track=Track.empty(), no_data=True)


def parse_gpx_text(text: str) -> gpxpy.gpx.GPX:
    """
    Parse GPX text with gpxpy.

    Raises:
      InvalidGpxError
    """
    try:
        return gpxpy.parse(text)
    except gpxpy.gpx.GPXException as e:
        raise InvalidGpxError(f"Could not parse GPX: {e}") from e


def load_gpx(path: Path) -> gpxpy.gpx.GPX:
    """
    Read and parse a GPX file.

    Raises:
      InvalidGpxError, OSError
    """
    with open(path, "r", encoding="utf-8") as f:
        return parse_gpx_text(f.read())


def ingest_and_smooth(
        gpx: gpxpy.gpx.GPX, *,
        elevation_window_m: Optional[float] = None,
        speed_window_s: Optional[float] = None,
) -> IngestResult:
    """ingest_gpx() followed by the smoothing pass for the sequence kind."""
    result = ingest_gpx(gpx)
    if result.no_data:
        return result
    track = smooth_track(
        result.track,
        elevation_window_m=elevation_window_m,
        speed_window_s=speed_window_s,
    )
    return IngestResult(track=track)
