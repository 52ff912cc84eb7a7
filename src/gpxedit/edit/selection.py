# gpxedit/edit/selection.py
"""
Timeline selection state machine.

The host UI translates its pointer events into the event objects below and
feeds them through `transition()`, which is a pure function:

    (state, event, n_points) -> new state

Drag states:

    Idle --Press(h)--> Dragging(h) --Move--> Dragging(h) --Release--> Idle

Release is accepted in any state so a drag always ends, even when the pointer
was let go outside the timeline.

Invariant for every state this module returns, given n_points = N:
    0 <= selection[0] <= selection[1] <= N-1   (when a selection exists)
    0 <= active_index <= N-1                   (when an active index exists)
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, replace
from typing import Optional, Union


class Handle(enum.Enum):
    ACTIVE_POINT = "active"
    RANGE_START = "start"
    RANGE_END = "end"


# ---------------------------
# Drag states
# ---------------------------
@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Dragging:
    handle: Handle


DragState = Union[Idle, Dragging]


# ---------------------------
# Events
# ---------------------------
@dataclass(frozen=True)
class Press:
    handle: Handle


@dataclass(frozen=True)
class Move:
    """Pointer at horizontal position `x`; the timeline spans [left, left + width]."""
    x: float
    left: float
    width: float


@dataclass(frozen=True)
class Release:
    pass


@dataclass(frozen=True)
class SelectPoint:
    """Chart/map click: set (or clear, with None) the active index directly."""
    index: Optional[int]


Event = Union[Press, Move, Release, SelectPoint]


@dataclass(frozen=True)
class SelectionState:
    drag: DragState = Idle()
    active_index: Optional[int] = None
    selection: Optional[tuple[int, int]] = None

    @property
    def is_dragging(self) -> bool:
        return isinstance(self.drag, Dragging)


INITIAL = SelectionState()


def index_from_x(x: float, left: float, width: float, n_points: int) -> int:
    """
    Map a pointer position on the timeline to a point index.

    Linear over [left, left + width] -> [0, N-1], rounded half up, clamped.
    """
    if n_points <= 1 or width <= 0:
        return 0
    fraction = min(1.0, max(0.0, (x - left) / width))
    return min(n_points - 1, int(math.floor(fraction * (n_points - 1) + 0.5)))


def _on_move(state: SelectionState, event: Move, n_points: int) -> SelectionState:
    handle = state.drag.handle
    candidate = index_from_x(event.x, event.left, event.width, n_points)

    if handle is Handle.ACTIVE_POINT:
        return replace(state, active_index=candidate)

    if handle is Handle.RANGE_START:
        end = state.selection[1] if state.selection else candidate
        return replace(state, selection=(min(candidate, end), end))

    start = state.selection[0] if state.selection else candidate
    return replace(state, selection=(start, max(candidate, start)))


def transition(state: SelectionState, event: Event, n_points: int) -> SelectionState:
    """Apply one UI event. Events that do not apply leave the state unchanged."""
    if isinstance(event, Release):
        return replace(state, drag=Idle())

    if n_points <= 0:
        return state

    if isinstance(event, Press):
        if state.is_dragging:
            return state
        # the active-point marker is only on screen once an active index exists
        if event.handle is Handle.ACTIVE_POINT and state.active_index is None:
            return state
        return replace(state, drag=Dragging(event.handle))

    if isinstance(event, Move):
        if not state.is_dragging:
            return state
        return _on_move(state, event, n_points)

    if isinstance(event, SelectPoint):
        if event.index is None:
            return replace(state, active_index=None)
        return replace(state, active_index=min(n_points - 1, max(0, int(event.index))))

    raise TypeError(f"Unknown selection event: {event!r}")


def run_events(state: SelectionState, events, n_points: int) -> SelectionState:
    """Fold a sequence of events through transition()."""
    for event in events:
        state = transition(state, event, n_points)
    return state


def drag_to(handle: Handle, index: int, n_points: int) -> list[Event]:
    """
    Synthetic press/move/release that drops `handle` on `index`.

    Uses a timeline whose width equals N-1 so x maps 1:1 onto indices; handy
    for scripted edits and tests.
    """
    return [
        Press(handle),
        Move(x=float(index), left=0.0, width=float(max(n_points - 1, 0))),
        Release(),
    ]
