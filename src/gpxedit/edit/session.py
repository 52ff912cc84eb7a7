# gpxedit/edit/session.py
"""
Editing session: the one place that holds state between UI events.

The host owns an EditSession and calls into it:

  load()     after an ingest completes (latest completed load wins)
  dispatch() for every timeline pointer event
  crop() / delete()
  reset()

Every change to the point sequence swaps in a new Track and, in the same
call, drops the selection, the active index and any drag in progress, so an
index from the old sequence can never be read against the new one.
"""

from __future__ import annotations

import datetime as dt
from typing import Optional

from gpxedit.analyze.geo import with_cumulative_distance
from gpxedit.analyze.stats import TrackStats, compute_stats
from gpxedit.edit import operations
from gpxedit.edit.selection import INITIAL, Event, SelectionState, transition
from gpxedit.errors import ExportUnavailableError
from gpxedit.formats.gpx import export_gpx
from gpxedit.ingest.normalize import IngestResult
from gpxedit.model import SequenceKind, Track
from gpxedit.util.logging import log
from gpxedit.util.paths import default_export_filename


class EditSession:

    def __init__(self, *, creator: str = "gpxedit", filename_suffix: str = "_edited") -> None:
        self.creator = creator
        self.filename_suffix = filename_suffix
        self.track: Track = Track.empty()
        self.state: SelectionState = INITIAL
        self.edited = False
        self.no_data = False
        self.source_name: Optional[str] = None

    @classmethod
    def from_config(cls, cfg) -> "EditSession":
        return cls(creator=cfg.export.creator, filename_suffix=cfg.export.filename_suffix)

    # ------------------------------------------------------------------
    # Sequence lifecycle
    # ------------------------------------------------------------------
    def load(self, result: IngestResult, source_name: Optional[str] = None) -> None:
        self.track = result.track
        self.no_data = result.no_data
        self.source_name = source_name
        self.state = INITIAL
        self.edited = False

    def reset(self) -> None:
        self.load(IngestResult(track=Track.empty()))

    def _replace_points(self, points) -> None:
        if self.track.kind is SequenceKind.DISTANCE_BASED:
            points = with_cumulative_distance(points)
        self.track = self.track.with_points(points)
        self.state = INITIAL
        self.edited = True

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------
    @property
    def selection(self) -> Optional[tuple[int, int]]:
        return self.state.selection

    @property
    def active_index(self) -> Optional[int]:
        return self.state.active_index

    @property
    def active_point(self):
        i = self.state.active_index
        return self.track.points[i] if i is not None else None

    @property
    def is_dragging(self) -> bool:
        return self.state.is_dragging

    def dispatch(self, event: Event) -> SelectionState:
        self.state = transition(self.state, event, len(self.track))
        return self.state

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------
    def crop(self) -> bool:
        """Keep only the selected range. Returns False (no-op) without a selection."""
        sel = self.state.selection
        if sel is None:
            return False
        before = len(self.track)
        self._replace_points(operations.crop(self.track.points, sel))
        log(f"Cropped to {sel[0]}..{sel[1]}: {before} -> {len(self.track)} point(s)")
        return True

    def delete(self) -> bool:
        """Remove the selected range. Returns False (no-op) without a selection."""
        sel = self.state.selection
        if sel is None:
            return False
        before = len(self.track)
        self._replace_points(operations.delete(self.track.points, sel))
        log(f"Deleted {sel[0]}..{sel[1]}: {before} -> {len(self.track)} point(s)")
        return True

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------
    @property
    def stats(self) -> TrackStats:
        return compute_stats(self.track.points)

    @property
    def can_export(self) -> bool:
        return len(self.track) > 0 and self.edited and not self.state.is_dragging

    def export_filename(self) -> str:
        return default_export_filename(self.source_name, suffix=self.filename_suffix)

    def export_text(self, now: Optional[dt.datetime] = None) -> str:
        """
        Serialize the current sequence.

        Raises:
          ExportUnavailableError when can_export is False
        """
        if not self.can_export:
            raise ExportUnavailableError(
                "Nothing to export: sequence is empty, unedited, or a drag is in progress"
            )
        return export_gpx(self.track, creator=self.creator, now=now)
