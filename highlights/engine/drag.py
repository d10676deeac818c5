"""Boundary drag: grow or shrink a highlight from its first or last token.

States: idle -> armed (pressed on a boundary token) -> dragging ->
(committed | reverted) -> idle.

All arithmetic stays in seconds.  A one-token highlight has both handles on
the same token, so the handle is picked from the sign of the pointer's
movement relative to the original start, never from the token position.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from enum import Enum

from highlights.engine.intervals import IntervalSet
from highlights.engine.models import DragTarget, Token
from highlights.engine.selection import GestureOutcome
from highlights.utils.logging import debug

DEFAULT_EPSILON = 1e-2


class DragState(str, Enum):
    IDLE = "idle"
    ARMED = "armed"
    DRAGGING = "dragging"


class DragMode(str, Enum):
    NONE = "none"
    EXPAND = "expand"
    CONTRACT = "contract"


class Handle(str, Enum):
    START = "start"
    END = "end"


class BoundaryDragController:
    def __init__(self, epsilon: float = DEFAULT_EPSILON,
                 on_change: Callable[[IntervalSet], None] | None = None) -> None:
        self.epsilon = epsilon
        self.on_change = on_change
        self._reset()

    def _reset(self) -> None:
        self.state = DragState.IDLE
        self.target: DragTarget | None = None
        self.handle: Handle | None = None
        self.new_start: float | None = None
        self.new_end: float | None = None
        self.mode = DragMode.NONE
        self._clamped = False

    @property
    def is_active(self) -> bool:
        return self.state is not DragState.IDLE

    def _close(self, a: float, b: float) -> bool:
        return abs(a - b) < self.epsilon

    # ── Gesture primitives ───────────────────────────────────────────────

    def begin(self, token: Token, intervals: IntervalSet) -> bool:
        """Arm a drag if ``token`` is the first or last token of a highlight."""
        if self.is_active:
            return False
        h = intervals.find_covering(token)
        if h is None:
            return False
        is_first = self._close(token.start, h.start)
        is_last = self._close(token.end, h.end)
        if not (is_first or is_last):
            return False

        self.state = DragState.ARMED
        self.target = DragTarget(
            interval_id=h.id,
            is_start_handle=is_first,
            is_end_handle=is_last,
            original_start=h.start,
            original_end=h.end,
        )
        self.new_start, self.new_end = h.start, h.end
        return True

    def move(self, token: Token) -> DragMode:
        if not self.is_active or self.target is None:
            return DragMode.NONE
        self.state = DragState.DRAGGING
        t = self.target
        self._clamped = False

        if t.is_single_token:
            delta = token.start - t.original_start
            if delta == 0.0 or math.isnan(delta):
                self.handle = None
            else:
                self.handle = Handle.START if delta < 0 else Handle.END
        else:
            self.handle = Handle.START if t.is_start_handle else Handle.END

        if self.handle is Handle.START:
            new_start, new_end = token.start, t.original_end
            if new_start >= new_end:
                new_start = new_end - self.epsilon
                self._clamped = True
        elif self.handle is Handle.END:
            new_start, new_end = t.original_start, token.end
            if new_end <= new_start:
                new_end = new_start + self.epsilon
                self._clamped = True
        else:
            new_start, new_end = t.original_start, t.original_end

        self.new_start, self.new_end = new_start, new_end
        self.mode = DragMode.NONE if self._clamped else self._classify(new_start, new_end)
        return self.mode

    def _classify(self, new_start: float, new_end: float) -> DragMode:
        t = self.target
        same_start = self._close(new_start, t.original_start)
        same_end = self._close(new_end, t.original_end)
        if same_start and same_end:
            return DragMode.NONE
        if (same_start or new_start < t.original_start) and (same_end or new_end > t.original_end):
            return DragMode.EXPAND
        if (same_start or new_start > t.original_start) and (same_end or new_end < t.original_end):
            return DragMode.CONTRACT
        return DragMode.NONE

    def end(self, intervals: IntervalSet) -> GestureOutcome:
        """Commit the candidate bounds or revert; drag state is always cleared."""
        if self.target is None or self.state is not DragState.DRAGGING:
            self._reset()
            return GestureOutcome(intervals)

        t = self.target
        new_start, new_end, mode = self.new_start, self.new_end, self.mode
        self._reset()

        if mode is DragMode.NONE:
            return GestureOutcome(intervals)
        if not (math.isfinite(new_start) and math.isfinite(new_end)) or new_start >= new_end:
            debug(f"Drag on {t.interval_id} reverted: invalid bounds [{new_start}, {new_end}]")
            return GestureOutcome(intervals)
        if t.interval_id not in intervals:
            return GestureOutcome(intervals)
        if intervals.check_overlap(new_start, new_end, exclude_id=t.interval_id):
            debug(f"Drag on {t.interval_id} reverted: [{new_start:.3f}, {new_end:.3f}] overlaps")
            return GestureOutcome(intervals)

        new_set = intervals.update(t.interval_id, new_start, new_end)
        debug(f"Drag on {t.interval_id} committed ({mode.value}): [{new_start:.3f}, {new_end:.3f}]")
        if self.on_change:
            self.on_change(new_set)
        return GestureOutcome(new_set, committed=True, interval=new_set.get(t.interval_id))

    def cancel(self) -> None:
        self._reset()

    # ── Preview predicates ───────────────────────────────────────────────

    def current_bounds(self) -> tuple[float, float] | None:
        """Bounds to display for the dragged highlight, or None when idle."""
        if self.target is None:
            return None
        return self.new_start, self.new_end

    def _in_original(self, token: Token) -> bool:
        t = self.target
        return token.start >= t.original_start and token.end <= t.original_end

    def _in_candidate(self, token: Token) -> bool:
        return token.start >= self.new_start and token.end <= self.new_end

    def is_in_expansion_preview(self, token: Token) -> bool:
        if self.state is not DragState.DRAGGING:
            return False
        return self._in_candidate(token) and not self._in_original(token)

    def is_in_contraction_preview(self, token: Token) -> bool:
        if self.state is not DragState.DRAGGING:
            return False
        return self._in_original(token) and not self._in_candidate(token)

    def preview_intervals(self, intervals: IntervalSet) -> IntervalSet:
        if self.state is not DragState.DRAGGING or self.target is None or self._clamped:
            return intervals
        return intervals.update(self.target.interval_id, self.new_start, self.new_end)
