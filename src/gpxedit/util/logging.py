# gpxedit/util/logging.py
from __future__ import annotations

import datetime
import sys

def log(msg: str, *, err: bool = False) -> None:
    """Print a timestamped log line (local time with timezone); err=True goes to stderr."""
    ts = datetime.datetime.now().astimezone().isoformat(timespec="seconds")
    print(f"{ts}  {msg}", file=sys.stderr if err else sys.stdout)
