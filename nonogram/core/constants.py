"""Shared constants and enumerations for the nonogram solver."""

from __future__ import annotations

from enum import Enum


class CellState(str, Enum):
    """Tri-state value of a single grid cell."""

    UNKNOWN = "UNKNOWN"
    FILLED = "FILLED"
    CROSSED = "CROSSED"

    @property
    def is_resolved(self) -> bool:
        return self is not CellState.UNKNOWN


class Direction(str, Enum):
    """Line directions supported by the grid."""

    ROW = "ROW"
    COLUMN = "COLUMN"


class SolveStatus(str, Enum):
    """Lifecycle states of a solving session."""

    RUNNING = "RUNNING"
    SOLVED = "SOLVED"
    STUCK = "STUCK"


# Columns are treaded before rows on every fixpoint iteration.
TREAD_ORDER = (Direction.COLUMN, Direction.ROW)
