# gpxedit/util/fzf.py
"""
Pick one GPX file with `fzf`.

Candidates are listed relative to the directory they were found under; the
preview pane shows the head of the highlighted file so the <metadata> and
first points are visible before choosing.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from shutil import which
from typing import Optional

from gpxedit.errors import FzfNotFoundError, GPXEditError

PREVIEW_LINES = 30

# 1 = no match, 130 = aborted with Esc / Ctrl-C
_NO_SELECTION = (1, 130)


def _label(path: Path, root: Optional[Path]) -> str:
    if root is not None:
        try:
            return str(path.relative_to(root))
        except ValueError:
            pass
    return path.name


def build_fzf_command(header: str, *, preview_lines: int = PREVIEW_LINES) -> list[str]:
    cmd = [
        "fzf",
        "--delimiter=\t",
        "--with-nth=1",
        "--height=60%",
        "--layout=reverse",
        "--border",
        "--header", header,
    ]
    if preview_lines > 0:
        # field 2 is the absolute path
        cmd.extend(["--preview", f"head -n {preview_lines} {{2}}"])
        cmd.extend(["--preview-window", "right:60%:wrap"])
    return cmd


def fzf_select_gpx(
        paths: list[Path], *,
        header: str,
        root: Optional[Path] = None,
        preview_lines: int = PREVIEW_LINES,
) -> Optional[Path]:
    """Return the chosen file, or None when the user aborts or nothing matches."""
    if not which("fzf"):
        raise FzfNotFoundError("fzf not found on PATH")

    input_text = "".join(f"{_label(p, root)}\t{p}\n" for p in paths)
    proc = subprocess.run(
        build_fzf_command(header, preview_lines=preview_lines),
        input=input_text.encode(),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )

    if proc.returncode in _NO_SELECTION:
        return None
    if proc.returncode != 0:
        raise GPXEditError(f"fzf failed ({proc.returncode}): {proc.stderr.decode(errors='replace').strip()}")

    line = proc.stdout.decode().strip()
    if not line:
        return None
    _, _, path_str = line.partition("\t")
    return Path(path_str or line).expanduser().resolve()
