"""
gpxedit configuration loader

This module centralizes *all* configuration handling for gpxedit.

Design goals:
- CLI flags override everything.
- Provide sensible defaults if no config exists.
- Allow per-machine config without committing personal paths:
    ~/.config/gpxedit/config.toml
- Allow repo-local config:
    <repo_root>/config/config.toml
- Allow environment variable overrides for automation.

Precedence (highest to lowest) for any given value:
1) CLI argument (handled by the CLI)
2) Environment variables (GPXEDIT_*)
3) User config: ~/.config/gpxedit/config.toml
4) Repo config: <repo_root>/config/config.toml
5) Hard defaults

Recognized keys:

    [paths]
    work_root = "~/GPS/_work"        # where the CLI looks for GPX files
    export_root = "~/GPS/_edited"    # where edited GPX files are written

    [smoothing]
    elevation_window_m = 25.0        # route elevation median window
    speed_window_s = 15.0            # track speed median window

    [export]
    creator = "gpxedit"              # <gpx creator=...> and metadata desc
    filename_suffix = "_edited"      # appended to the source filename stem

This module uses Python's built-in tomllib on Python 3.11+, or `tomli` if installed.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from gpxedit.analyze.smoothing import ELEVATION_WINDOW_M, SPEED_WINDOW_S
from gpxedit.errors import ConfigError

# ---------------------------------------------------------------------------
# TOML loading helpers
# ---------------------------------------------------------------------------
def _load_toml(path: Path) -> dict[str, Any]:
    """
    Parse a TOML file at `path`.

    Behavior:
    - If the file does not exist, return an empty dict (non-fatal).
    - If the file exists but is invalid TOML, raise ConfigError
      with a clear, user-facing message.

    Rationale:
    - Missing config files are normal and expected.
    - Malformed config files indicate user intent and should fail loudly.
    """
    if not path.is_file():
        return {}

    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib

    try:
        return tomllib.loads(path.read_text(encoding="utf-8")) or {}
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as e:
        # Wrap parsing errors with file context for usability
        raise ConfigError(f"Failed to parse TOML config: {path} ({e})") from e


# ---------------------------------------------------------------------------
# Generic coercion helpers
# ---------------------------------------------------------------------------
def _deep_get(d: dict[str, Any], dotted_key: str) -> Any:
    """
    Fetch nested dictionary values using dot-separated keys.

    Example:
        _deep_get(cfg, "smoothing.speed_window_s")

    Returns None if any part of the path is missing.
    """
    cur: Any = d
    for part in dotted_key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur[part]
    return cur


def _as_path(v: Any) -> Optional[Path]:
    """
    Coerce a config value into a pathlib.Path if possible.

    Returns None if value cannot be interpreted as a path.
    """
    if v is None:
        return None
    if isinstance(v, Path):
        return v.expanduser()
    if isinstance(v, str) and v.strip():
        return Path(v).expanduser()
    return None


def _as_positive_float(v: Any) -> Optional[float]:
    """
    Coerce a config value into a float > 0.

    Strings are accepted so environment variables behave like TOML numbers.
    Returns None for anything else (the caller keeps its current value).
    """
    if v is None or isinstance(v, bool):
        return None
    try:
        f = float(v)
    except (TypeError, ValueError):
        return None
    return f if f > 0 else None


def _as_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v)
    return s if s.strip() else None


# ---------------------------------------------------------------------------
# Repo discovery + defaults
# ---------------------------------------------------------------------------
def find_repo_root(start: Path) -> Optional[Path]:
    """
    Walk upward from `start` looking for the gpxedit repo root.

    Heuristic:
    - The presence of a `config/` directory marks the repo root
    """
    start = start.resolve()
    for p in [start] + list(start.parents):
        if (p / "config").is_dir():
            return p
    return None


def default_runtime_root() -> Path:
    return Path.home() / "GPS"


# ---------------------------------------------------------------------------
# Typed config dataclasses
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class SmoothingConfig:
    elevation_window_m: float = ELEVATION_WINDOW_M
    speed_window_s: float = SPEED_WINDOW_S


@dataclass(frozen=True)
class ExportConfig:
    creator: str = "gpxedit"
    filename_suffix: str = "_edited"


@dataclass(frozen=True)
class GPXEditPaths:
    """
    Canonical resolved filesystem paths used by gpxedit.
    """

    work_root: Path
    export_root: Path


@dataclass(frozen=True)
class GPXEditConfig:
    """
    Fully merged gpxedit configuration.

    Attributes:
    - paths: resolved filesystem layout
    - smoothing: median window sizes
    - export: export header / filename settings
    - source: provenance map showing where each value came from
    """

    paths: GPXEditPaths
    smoothing: SmoothingConfig
    export: ExportConfig
    source: dict[str, str]


# key -> coercion; order is the order values are reported in `source`
_KEYS = {
    "paths.work_root": _as_path,
    "paths.export_root": _as_path,
    "smoothing.elevation_window_m": _as_positive_float,
    "smoothing.speed_window_s": _as_positive_float,
    "export.creator": _as_str,
    "export.filename_suffix": _as_str,
}

_ENV_MAP = {
    "GPXEDIT_WORK_ROOT": "paths.work_root",
    "GPXEDIT_EXPORT_ROOT": "paths.export_root",
    "GPXEDIT_ELEVATION_WINDOW_M": "smoothing.elevation_window_m",
    "GPXEDIT_SPEED_WINDOW_S": "smoothing.speed_window_s",
    "GPXEDIT_CREATOR": "export.creator",
    "GPXEDIT_FILENAME_SUFFIX": "export.filename_suffix",
}


# ---------------------------------------------------------------------------
# Main config loader
# ---------------------------------------------------------------------------
def load_config(
    repo_root: Optional[Path] = None,
    repo_config_path: Optional[Path] = None,
    user_config_path: Optional[Path] = None,
) -> GPXEditConfig:
    """
    Load, merge, and normalize all gpxedit configuration.

    This function is the single authoritative entry point
    for configuration access.
    """

    # Locate repo and config files
    if repo_root is None:
        repo_root = find_repo_root(Path(__file__).resolve())
    if repo_config_path is None and repo_root is not None:
        repo_config_path = repo_root / "config" / "config.toml"
    if user_config_path is None:
        user_config_path = Path.home() / ".config" / "gpxedit" / "config.toml"

    # Load raw TOML dicts
    repo_cfg = _load_toml(repo_config_path) if repo_config_path else {}
    user_cfg = _load_toml(user_config_path) if user_config_path else {}

    runtime_root = default_runtime_root()
    values: dict[str, Any] = {
        "paths.work_root": runtime_root / "_work",
        "paths.export_root": runtime_root / "_edited",
        "smoothing.elevation_window_m": ELEVATION_WINDOW_M,
        "smoothing.speed_window_s": SPEED_WINDOW_S,
        "export.creator": "gpxedit",
        "export.filename_suffix": "_edited",
    }
    # Track provenance for debugging
    src = {k: "default" for k in _KEYS}

    # Repo, then user (user overrides repo)
    for cfg, label, path in ((repo_cfg, "repo", repo_config_path), (user_cfg, "user", user_config_path)):
        for key, coerce in _KEYS.items():
            v = coerce(_deep_get(cfg, key))
            if v is None:
                continue
            values[key] = v
            src[key] = f"{label}:{path}"

    # Environment variable overrides (highest non-CLI precedence)
    for env, key in _ENV_MAP.items():
        v = _KEYS[key](os.environ.get(env))
        if v is None:
            continue
        values[key] = v
        src[key] = f"env:{env}"

    paths = GPXEditPaths(
        work_root=values["paths.work_root"].expanduser(),
        export_root=values["paths.export_root"].expanduser(),
    )
    smoothing = SmoothingConfig(
        elevation_window_m=values["smoothing.elevation_window_m"],
        speed_window_s=values["smoothing.speed_window_s"],
    )
    export = ExportConfig(
        creator=values["export.creator"],
        filename_suffix=values["export.filename_suffix"],
    )

    return GPXEditConfig(paths=paths, smoothing=smoothing, export=export, source=src)
