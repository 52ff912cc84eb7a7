#!/usr/bin/env python3
"""
gpxedit: load a GPX file, report statistics, crop or delete a point range,
and export the edited sequence.

Examples:
  gpxedit ride.gpx                         # statistics only
  gpxedit ride.gpx --crop 120 480          # keep points 120..480
  gpxedit ride.gpx --delete 0 35 -o a.gpx  # drop the first 36 points
  gpxedit ride.gpx --map ride.png          # lon/lat chart, no statistics
  gpxedit                                  # pick a file under the work root via fzf

Statistics are printed with --stats or --tsv, and whenever no edit or chart
was requested.

Exit codes: 0 ok, 1 nothing to export / no data, 2 invalid input.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt

from gpxedit.analyze.stats import TSV_HEADER, format_stats
from gpxedit.config import load_config
from gpxedit.edit.selection import Handle, SelectPoint, drag_to
from gpxedit.edit.session import EditSession
from gpxedit.errors import ConfigError, ExportUnavailableError, FzfNotFoundError, InvalidGpxError
from gpxedit.formats.gpx import write_gpx
from gpxedit.ingest.normalize import ingest_and_smooth, load_gpx
from gpxedit.util.fzf import fzf_select_gpx
from gpxedit.util.logging import log
from gpxedit.util.paths import ensure_dir, export_filename_from_text
from gpxedit.visualize.plot import plot_elevation, plot_track


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="gpxedit: inspect, crop and trim a GPX track.")
    ap.add_argument("gpx", nargs="?", default=None,
                    help="GPX file to edit. If omitted, use fzf selection under the work root.")
    ap.add_argument("--work-root", default=None,
                    help="Where to look for GPX files (default: from gpxedit config or ~/GPS/_work)")
    ap.add_argument("--export-root", default=None,
                    help="Where to write edited files (default: from gpxedit config or ~/GPS/_edited)")
    ap.add_argument("-o", "--output", default=None,
                    help="Export name; cleaned into a file name (default: source name + configured suffix).")

    edit = ap.add_mutually_exclusive_group()
    edit.add_argument("--crop", nargs=2, type=int, metavar=("START", "END"),
                      help="Keep only points START..END (inclusive).")
    edit.add_argument("--delete", nargs=2, type=int, metavar=("START", "END"),
                      help="Remove points START..END (inclusive).")

    ap.add_argument("--active", type=int, default=None,
                    help="Mark this point index as the active point (shown on --plot / --map).")
    ap.add_argument("--plot", default=None,
                    help="Save an elevation chart of the current sequence to this PNG path.")
    ap.add_argument("--map", default=None,
                    help="Save a lon/lat chart of the current sequence to this PNG path.")
    ap.add_argument("--stats", action="store_true",
                    help="Print statistics even when editing or charting.")
    ap.add_argument("--tsv", action="store_true",
                    help="Print tab-separated statistics (good for piping).")
    return ap


def print_report(label: str, session: EditSession, *, tsv: bool) -> None:
    stats = session.stats
    if tsv:
        print(f"{label}\t{format_stats(stats, tsv=True)}")
    else:
        print(f"\n{label} ({session.track.kind.value}-based)")
        print(format_stats(stats))


def _select_input(work_root: Path) -> Optional[Path]:
    gpx_files = sorted(work_root.rglob("*.gpx"))
    if not gpx_files:
        log(f"No GPX files found under {work_root}")
        return None
    return fzf_select_gpx(gpx_files, header="Select GPX file to edit:", root=work_root)


def _index_in_range(label: str, index: int, n: int) -> bool:
    if 0 <= index <= n - 1:
        return True
    log(f"ERROR: {label} {index} is outside 0..{n - 1}", err=True)
    return False


def _apply_edit(session: EditSession, op: str, start: int, end: int) -> bool:
    n = len(session.track)
    if not (0 <= start <= end <= n - 1):
        log(f"ERROR: range {start}..{end} is outside 0..{n - 1}", err=True)
        return False

    # Drive the selection exactly as the timeline would: end handle first,
    # then the start handle.
    for handle, index in ((Handle.RANGE_END, end), (Handle.RANGE_START, start)):
        for event in drag_to(handle, index, n):
            session.dispatch(event)

    return session.crop() if op == "crop" else session.delete()


def _save_figure(fig, out: str) -> None:
    fig.savefig(out)
    plt.close(fig)
    log(f"Wrote: {out}")


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = load_config()
    except ConfigError as e:
        log(f"ERROR: {e}", err=True)
        return 2

    work_root = Path(args.work_root).expanduser() if args.work_root else cfg.paths.work_root
    export_root = Path(args.export_root).expanduser() if args.export_root else cfg.paths.export_root

    if args.gpx:
        path = Path(args.gpx).expanduser()
    else:
        try:
            path = _select_input(work_root)
        except FzfNotFoundError as e:
            log(f"{e}; pass a GPX file explicitly.", err=True)
            return 2
        if path is None:
            return 2

    if not path.is_file():
        log(f"ERROR: not a file: {path}", err=True)
        return 2

    try:
        gpx = load_gpx(path)
    except (InvalidGpxError, OSError) as e:
        log(f"ERROR: {e}", err=True)
        return 2

    session = EditSession.from_config(cfg)
    session.load(
        ingest_and_smooth(
            gpx,
            elevation_window_m=cfg.smoothing.elevation_window_m,
            speed_window_s=cfg.smoothing.speed_window_s,
        ),
        source_name=path.name,
    )
    if session.no_data:
        log(f"No track or route in {path}; nothing to do.")
        return 1

    op = "crop" if args.crop else "delete" if args.delete else None
    show_stats = args.stats or args.tsv or not (op or args.plot or args.map)

    if show_stats:
        if args.tsv:
            print(TSV_HEADER)
        print_report(str(path), session, tsv=args.tsv)

    if op is not None:
        start, end = args.crop or args.delete
        if not _apply_edit(session, op, start, end):
            return 2
        if show_stats:
            print_report(f"{path} [{op} {start}..{end}]", session, tsv=args.tsv)

    # --active refers to the sequence as it stands after the edit
    if args.active is not None:
        if not _index_in_range("active point", args.active, len(session.track)):
            return 2
        session.dispatch(SelectPoint(args.active))

    if args.plot:
        _save_figure(plot_elevation(
            session.track.points,
            active_index=session.active_index,
            selection=session.selection,
            title=path.name,
        ), args.plot)

    if args.map:
        _save_figure(plot_track(
            session.track.points,
            active_index=session.active_index,
            title=path.name,
        ), args.map)

    if op is None:
        return 0

    try:
        text = session.export_text()
    except ExportUnavailableError as e:
        log(str(e))
        return 1

    ensure_dir(export_root)
    out_path = export_root / export_filename_from_text(args.output, default=session.export_filename())
    write_gpx(text, out_path)
    log(f"Wrote: {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
