# gpxedit/formats/gpx.py
"""
GPX export for gpxedit

This module is intentionally format-focused:
- GPX namespace handling
- building and writing the ElementTree for an edited sequence
- time formatting

Parsing is NOT done here; gpxpy handles that (see gpxedit.ingest.normalize).

Two document shapes, chosen by sequence kind:
  - routes  -> <rte><rtept lat lon><ele/></rtept>...</rte>        (no <time>)
  - tracks  -> <trk><trkseg><trkpt lat lon><ele/><time/></trkpt>...

Output is deterministic for a given sequence except for <metadata><time>.
"""

from __future__ import annotations

import datetime as _dt
from pathlib import Path
from typing import Optional
from xml.etree import ElementTree as ET

from gpxedit.model import SequenceKind, Track

# GPX 1.1 default namespace
GPX_NS = {"gpx": "http://www.topografix.com/GPX/1/1"}
ET.register_namespace("", GPX_NS["gpx"])

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

def qn(tag: str) -> str:
    """
    Build an ElementTree-qualified name for a GPX tag.

    ElementTree represents namespaced tags internally as
      "{namespace-uri}tag"
    """
    return f"{{{GPX_NS['gpx']}}}{tag}"


def _format_gpx_time(dt: _dt.datetime) -> str:
    """
    Format a tz-aware datetime as GPX time (UTC with Z).
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_dt.timezone.utc)
    dt_utc = dt.astimezone(_dt.timezone.utc)
    # Use seconds resolution for readability and stability.
    return dt_utc.replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _format_number(v: float) -> str:
    # repr() is the shortest string that parses back to the same float.
    return repr(float(v))


def _indent(elem: ET.Element, level: int = 0, indent: str = "  ") -> None:
    """
    In-place pretty-printer for ElementTree output. Eliminates double blank-line
    issues by explicitly controlling .text/.tail.
    """
    i = "\n" + level * indent
    j = "\n" + (level -1) * indent if level > 0 else "\n"

    children = list(elem)
    if children:
        if elem.text is None or not elem.text.strip():
            elem.text = i + indent
        for child in children:
            _indent(child, level + 1, indent=indent)
        if children[-1].tail is None or not children[-1].tail.strip():
            children[-1].tail = i
    if elem.tail is None or not elem.tail.strip():
        elem.tail = j


def _add_point(parent: ET.Element, tag: str, p, *, with_time: bool) -> None:
    el = ET.SubElement(parent, qn(tag), {
        "lat": _format_number(p.lat),
        "lon": _format_number(p.lon),
    })
    if p.elevation is not None:
        ET.SubElement(el, qn("ele")).text = _format_number(p.elevation)
    if with_time:
        ET.SubElement(el, qn("time")).text = _format_gpx_time(p.time)


def build_gpx(track: Track, *, creator: str, now: _dt.datetime) -> ET.Element:
    """Build the <gpx> root element for `track`."""
    root = ET.Element(qn("gpx"), {"version": "1.1", "creator": creator})

    md = ET.SubElement(root, qn("metadata"))
    ET.SubElement(md, qn("desc")).text = f"Exported by {creator}"
    ET.SubElement(md, qn("time")).text = _format_gpx_time(now)

    if track.kind is SequenceKind.DISTANCE_BASED:
        rte = ET.SubElement(root, qn("rte"))
        for p in track.points:
            _add_point(rte, "rtept", p, with_time=False)
    else:
        trk = ET.SubElement(root, qn("trk"))
        seg = ET.SubElement(trk, qn("trkseg"))
        for p in track.points:
            _add_point(seg, "trkpt", p, with_time=True)

    return root


def export_gpx(
        track: Track, *,
        creator: str = "gpxedit",
        now: Optional[_dt.datetime] = None,
        pretty: bool = True,
) -> str:
    """
    Serialize `track` to GPX 1.1 text.

    `now` is the export timestamp written to <metadata><time>; defaults to the
    current UTC time.
    """
    if now is None:
        now = _dt.datetime.now(_dt.timezone.utc)
    root = build_gpx(track, creator=creator, now=now)
    if pretty:
        _indent(root)
    return XML_DECLARATION + ET.tostring(root, encoding="unicode")


def write_gpx(text: str, out_path: Path) -> None:
    """Write GPX text to disk as UTF-8, creating parent directories."""
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(text, encoding="utf-8")
