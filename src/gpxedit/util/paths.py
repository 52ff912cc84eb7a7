# gpxedit/util/paths.py
from __future__ import annotations

import re
from pathlib import Path

_slug_bad = re.compile(r"[^a-z0-9]+")

def ensure_dir(path: Path) -> None:
    """Ensure a directory exists."""
    path.mkdir(parents=True, exist_ok=True)

def slugify(text: str, *, default: str = "untitled") -> str:
    """Create a path-safe slug (lowercase, a-z0-9 and single underscores)."""
    s = (text or "").strip().lower()
    s = _slug_bad.sub("_", s).strip("_")
    return s or default

def default_export_filename(source_name: str | None, *, suffix: str = "_edited") -> str:
    """
    Seed the export filename from the source filename.

      "Morning Run.gpx" -> "Morning Run_edited.gpx"

    The user may replace it freely; this is only the pre-filled value.
    """
    stem = Path(source_name).stem.strip() if source_name else ""
    return f"{stem or 'track'}{suffix}.gpx"

def export_filename_from_text(text: str | None, *, default: str) -> str:
    """
    Turn a free-text export name into a file name inside the export root.

      "Lunch loop (short)" -> "lunch_loop_short.gpx"
      "../up/middle.GPX"   -> "up_middle.gpx"

    Blank text keeps `default` (normally the seeded name).
    """
    raw = (text or "").strip()
    if raw.lower().endswith(".gpx"):
        raw = raw[:-4]
    if not raw.strip():
        return default
    return f"{slugify(raw, default='track')}.gpx"
