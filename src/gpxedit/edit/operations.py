# gpxedit/edit/operations.py
"""
Crop / delete on a point sequence.

Both build a brand-new tuple; the input is never modified. Without a
selection they return the input unchanged.
"""

from __future__ import annotations

from typing import Optional, Sequence

Selection = Optional[tuple[int, int]]


def crop(points: Sequence, selection: Selection) -> tuple:
    """Keep only the closed range [start, end]."""
    if selection is None:
        return tuple(points)
    start, end = selection
    return tuple(points[start:end + 1])


def delete(points: Sequence, selection: Selection) -> tuple:
    """Drop the closed range [start, end]; keep everything before and after it."""
    if selection is None:
        return tuple(points)
    start, end = selection
    return tuple(points[:start]) + tuple(points[end + 1:])
