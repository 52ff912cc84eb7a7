# gpxedit/errors

"""
gpxedit.errors

Central exception hierarchy for gpxedit.

Rationale:
  - Modules should raise specific, meaningful errors.
  - Callers can catch GPXEditError (broad) or specific subclasses (narrow).
  - "No data", degenerate statistics and empty selections are NOT errors;
    they are reported through return values and leave state untouched.
"""


class GPXEditError(RuntimeError):
    """Base class for all gpxedit runtime errors."""


# ---- Configuration errors ----------------------

class ConfigError(GPXEditError):
    """A config file exists but could not be parsed."""


# ---- Ingest errors -----------------------------

class IngestError(GPXEditError):
    """Errors while turning a GPX document into a point sequence."""

class InvalidGpxError(IngestError):
    """GPX text could not be parsed or did not contain expected data structures."""


# ---- Export errors -----------------------------

class ExportError(GPXEditError):
    """Errors in the export pipeline."""

class ExportUnavailableError(ExportError):
    """Export was requested while its preconditions are unmet (empty, unedited or dragging)."""


# ---- Selection UI ------------------------------

class FzfNotFoundError(GPXEditError):
    """fzf is required but not available on PATH."""
