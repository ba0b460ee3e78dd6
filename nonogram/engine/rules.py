"""Line propagation rules.

Every rule reads and writes cells through a :class:`LineView`, so the same
code serves rows and columns. All writes go through the grid's monotonic
``set``; a rule never reverts a resolved cell, it raises
:class:`InvalidTransition` instead when the line turns out inconsistent.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional, Sequence, Set, Tuple

from ..core.constants import CellState, Direction
from ..core.exceptions import InvalidTransition
from ..core.models import ClueSet, LineRef, minimum_length
from ..utils.logger import get_logger
from .grid import Grid, LineView


LOGGER = get_logger(__name__)

FILLED = CellState.FILLED
CROSSED = CellState.CROSSED
UNKNOWN = CellState.UNKNOWN


def _write_span(view: LineView, begin: int, end: int, state: CellState) -> int:
    writes = 0
    for position in range(begin, end):
        if view.set(position, state):
            writes += 1
    return writes


# ----------------------------------------------------------------------
# Edge sweep
# ----------------------------------------------------------------------
def edge_sweep(grid: Grid, clues: ClueSet, direction: Direction) -> int:
    """Write the cells forced by run overlap on every line of ``direction``.

    Run once per direction before the fixpoint loop starts.
    """
    writes = 0
    for ref in clues.lines(direction):
        writes += sweep_line(grid.line(ref), clues.runs(ref))
    LOGGER.debug("Edge sweep over %s lines wrote %d cells", direction.value, writes)
    return writes


def sweep_line(view: LineView, runs: Sequence[int]) -> int:
    length = len(view)
    if not runs:
        return _write_span(view, 0, length, CROSSED)

    slack = length - minimum_length(runs)
    writes = 0
    start = 0  # left-aligned start of the current run
    for run in runs:
        if run > slack:
            writes += _write_span(view, start + slack, start + run, FILLED)
        if slack == 0 and start + run < length:
            writes += _write_span(view, start + run, start + run + 1, CROSSED)
        start += run + 1
    return writes


# ----------------------------------------------------------------------
# Completion check
# ----------------------------------------------------------------------
def completion_check(
    grid: Grid,
    clues: ClueSet,
    unresolved: Set[LineRef],
    direction: Direction,
) -> List[LineRef]:
    """Resolve lines whose filled count settles them and drop them from ``unresolved``.

    Lines are collected during the scan and removed afterwards. Returns the
    lines removed by this call.
    """
    completed: List[LineRef] = []
    for ref in sorted(line for line in unresolved if line.direction is direction):
        if complete_line(grid.line(ref), clues.runs(ref)):
            completed.append(ref)
    unresolved.difference_update(completed)
    if completed:
        LOGGER.debug(
            "Completion check resolved %s",
            ", ".join(str(ref) for ref in completed),
        )
    return completed


def complete_line(view: LineView, runs: Sequence[int]) -> bool:
    """Return True when the line is (or has just been made) fully resolved."""
    states = view.states()
    unknown = [position for position, state in enumerate(states) if state is UNKNOWN]
    if not unknown:
        return True

    filled = view.count(FILLED)
    expected = sum(runs)
    if filled > expected or filled + len(unknown) < expected:
        raise InvalidTransition(
            f"{view.ref}: {filled} filled and {len(unknown)} unknown cells cannot hold {expected}"
        )
    if filled == expected:
        for position in unknown:
            view.set(position, CROSSED)
        return True
    if filled + len(unknown) == expected:
        for position in unknown:
            view.set(position, FILLED)
        return True
    return False


# ----------------------------------------------------------------------
# Boundary tread
# ----------------------------------------------------------------------
def boundary_tread(grid: Grid, clues: ClueSet, ref: LineRef) -> int:
    """Apply the boundary sub-rules to one line; returns the number of writes."""
    writes = BoundaryTread(grid.line(ref), clues.runs(ref)).run()
    if writes:
        LOGGER.debug("Boundary tread on %s wrote %d cells", ref, writes)
    return writes


class BoundaryTread:
    """Consumes a line's runs from both ends while deducing cells.

    ``lo`` and ``hi`` delimit the active window. Cells outside it are
    resolved and accounted for by runs already consumed, and the cell just
    outside each end of the window is CROSSED (or the line border). Sub-rules
    address cells by their offset ``k`` from the leading (``forward``) or the
    trailing edge of the window.
    """

    def __init__(self, view: LineView, runs: Sequence[int]) -> None:
        self.view = view
        self.runs: Deque[int] = deque(runs)
        self.lo = 0
        self.hi = len(view)
        self.writes = 0

    def run(self) -> int:
        while self._step():
            pass
        return self.writes

    def _step(self) -> bool:
        self._trim_crossed()
        if not self.runs:
            self._put_span(0, self._size, True, CROSSED)
            self.lo = self.hi
            return False
        if self.lo >= self.hi:
            raise InvalidTransition(
                f"{self.view.ref}: runs {list(self.runs)} have no cells left"
            )
        # Earlier sub-rules win; a later one only sees what they left.
        return (
            self._tread_filled_edge(forward=True)
            or self._tread_filled_edge(forward=False)
            or self._tread_pocket(forward=True)
            or self._tread_pocket(forward=False)
            or self._tread_single_run()
            or self._tread_reach(forward=True)
            or self._tread_reach(forward=False)
        )

    # ------------------------------------------------------------------
    # Window helpers
    # ------------------------------------------------------------------
    @property
    def _size(self) -> int:
        return self.hi - self.lo

    def _position(self, k: int, forward: bool) -> int:
        return self.lo + k if forward else self.hi - 1 - k

    def _at(self, k: int, forward: bool) -> CellState:
        return self.view[self._position(k, forward)]

    def _put(self, k: int, forward: bool, state: CellState) -> bool:
        changed = self.view.set(self._position(k, forward), state)
        if changed:
            self.writes += 1
        return changed

    def _put_span(self, begin: int, end: int, forward: bool, state: CellState) -> bool:
        changed = False
        for k in range(begin, end):
            changed = self._put(k, forward, state) or changed
        return changed

    def _find(self, state: CellState, forward: bool, start: int = 0) -> Optional[int]:
        for k in range(start, self._size):
            if self._at(k, forward) is state:
                return k
        return None

    def _edge_run(self, forward: bool) -> int:
        return self.runs[0] if forward else self.runs[-1]

    def _second_run(self, forward: bool) -> Optional[int]:
        if len(self.runs) < 2:
            return None
        return self.runs[1] if forward else self.runs[-2]

    def _consume(self, forward: bool, used: int) -> None:
        if forward:
            self.runs.popleft()
            self.lo += used
        else:
            self.runs.pop()
            self.hi -= used

    def _trim_crossed(self) -> None:
        while self.lo < self.hi and self.view[self.lo] is CROSSED:
            self.lo += 1
        while self.hi > self.lo and self.view[self.hi - 1] is CROSSED:
            self.hi -= 1

    def _segments(self) -> List[Tuple[int, int]]:
        """Maximal spans of non-crossed cells, in forward offsets."""
        segments: List[Tuple[int, int]] = []
        begin: Optional[int] = None
        for k in range(self._size):
            if self._at(k, True) is CROSSED:
                if begin is not None:
                    segments.append((begin, k))
                    begin = None
            elif begin is None:
                begin = k
        if begin is not None:
            segments.append((begin, self._size))
        return segments

    def _place_edge_run(
        self,
        forward: bool,
        begin: int,
        end: int,
        first: Optional[int],
        last: Optional[int],
        exclusive_end: Optional[int] = None,
    ) -> bool:
        """Narrow the edge run to ``[begin, end)`` covering offsets ``first..last``.

        Nothing precedes the edge run, so every cell before its earliest start
        is crossed. With ``exclusive_end`` no other run reaches below that
        offset either, so cells between its latest end and ``exclusive_end``
        are crossed too. The run is consumed once its start is pinned.
        """
        run = self._edge_run(forward)
        earliest = begin if last is None else max(begin, last - run + 1)
        latest = end - run if first is None else min(end - run, first)
        if earliest > latest:
            raise InvalidTransition(
                f"{self.view.ref}: run of {run} cannot be placed in offsets [{begin}, {end})"
            )

        changed = self._put_span(latest, earliest + run, forward, FILLED)
        changed = self._put_span(0, earliest, forward, CROSSED) or changed
        if exclusive_end is not None:
            changed = self._put_span(latest + run, exclusive_end, forward, CROSSED) or changed

        if earliest == latest:
            used = earliest + run
            if used < self._size:
                self._put(used, forward, CROSSED)
            self._consume(forward, used)
            return True
        return changed

    # ------------------------------------------------------------------
    # Sub-rules
    # ------------------------------------------------------------------
    def _tread_filled_edge(self, forward: bool) -> bool:
        """A FILLED edge cell starts the edge run right there."""
        if self._at(0, forward) is not FILLED:
            return False
        run = self._edge_run(forward)
        if run > self._size:
            raise InvalidTransition(
                f"{self.view.ref}: run of {run} overflows the {self._size} remaining cells"
            )
        self._put_span(0, run, forward, FILLED)
        if run < self._size:
            self._put(run, forward, CROSSED)
        self._consume(forward, run)
        return True

    def _tread_pocket(self, forward: bool) -> bool:
        """Resolve the cells in front of the first CROSSED cell from the edge."""
        barrier = self._find(CROSSED, forward)
        if barrier is None:
            return False
        run = self._edge_run(forward)
        filled = [k for k in range(barrier) if self._at(k, forward) is FILLED]
        if not filled:
            if barrier < run:
                return self._put_span(0, barrier, forward, CROSSED)
            return False
        second = self._second_run(forward)
        if second is not None and barrier >= run + 1 + second:
            return False
        return self._place_edge_run(
            forward, 0, barrier, filled[0], filled[-1], exclusive_end=barrier
        )

    def _tread_single_run(self) -> bool:
        """Place the last remaining run inside the only segment able to hold it."""
        if len(self.runs) != 1:
            return False
        run = self.runs[0]
        filled = [k for k in range(self._size) if self._at(k, True) is FILLED]
        segments = self._segments()
        candidates = [
            (begin, end)
            for begin, end in segments
            if end - begin >= run and (not filled or (begin <= filled[0] and filled[-1] < end))
        ]
        if not candidates:
            raise InvalidTransition(f"{self.view.ref}: no segment can hold the run of {run}")

        if len(candidates) > 1:
            changed = False
            for begin, end in segments:
                if end - begin < run:
                    changed = self._put_span(begin, end, True, CROSSED) or changed
            return changed

        begin, end = candidates[0]
        return self._place_edge_run(
            True,
            begin,
            end,
            filled[0] if filled else None,
            filled[-1] if filled else None,
            exclusive_end=self._size,
        )

    def _tread_reach(self, forward: bool) -> bool:
        """Attribute the first FILLED cell to the edge run when nothing fits before it."""
        run = self._edge_run(forward)
        first = self._find(FILLED, forward)
        # The edge run plus its gap need run + 1 cells in front of ``first``.
        if first is None or first > run:
            return False
        last = first
        while last + 1 < self._size and self._at(last + 1, forward) is FILLED:
            last += 1
        begin = 0
        for k in range(first):
            if self._at(k, forward) is CROSSED:
                begin = k + 1
        end = self._find(CROSSED, forward, start=last + 1)
        if end is None:
            end = self._size
        return self._place_edge_run(forward, begin, end, first, last)
