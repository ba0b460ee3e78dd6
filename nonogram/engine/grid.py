"""Grid representation and the direction-agnostic line view."""

from __future__ import annotations

from typing import Iterator, List

from ..core.constants import CellState, Direction
from ..core.exceptions import InvalidTransition
from ..core.models import LineRef


class Grid:
    """Tri-state cell matrix stored as a row-major flat buffer.

    Rows and columns address the same backing list, so a write made through
    a row view is visible through the crossing column view immediately.
    Cells only ever move from UNKNOWN to FILLED or CROSSED.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._cells: List[CellState] = [CellState.UNKNOWN] * (width * height)
        self._resolved = 0
        self._mutations = 0

    # ------------------------------------------------------------------
    # Addressing
    # ------------------------------------------------------------------
    def line_length(self, direction: Direction) -> int:
        return self.width if direction is Direction.ROW else self.height

    def line_count(self, direction: Direction) -> int:
        return self.height if direction is Direction.ROW else self.width

    def _offset(self, direction: Direction, index: int, position: int) -> int:
        if not 0 <= index < self.line_count(direction):
            raise IndexError(f"{direction.value} index {index} out of range")
        if not 0 <= position < self.line_length(direction):
            raise IndexError(f"Position {position} out of range for {direction.value} {index}")
        if direction is Direction.ROW:
            return index * self.width + position
        return position * self.width + index

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------
    def get(self, direction: Direction, index: int, position: int) -> CellState:
        return self._cells[self._offset(direction, index, position)]

    def set(self, direction: Direction, index: int, position: int, value: CellState) -> bool:
        """Resolve a cell; returns True when the grid actually changed."""
        offset = self._offset(direction, index, position)
        current = self._cells[offset]
        if current == value:
            return False
        if value is CellState.UNKNOWN or current is not CellState.UNKNOWN:
            raise InvalidTransition(
                f"Cannot change {direction.value} {index} position {position} "
                f"from {current.value} to {value.value}"
            )
        self._cells[offset] = value
        self._resolved += 1
        self._mutations += 1
        return True

    def cell(self, row: int, col: int) -> CellState:
        return self.get(Direction.ROW, row, col)

    def line(self, ref: LineRef) -> "LineView":
        return LineView(self, ref.direction, ref.index)

    # ------------------------------------------------------------------
    # Progress bookkeeping
    # ------------------------------------------------------------------
    @property
    def mutations(self) -> int:
        """Number of successful UNKNOWN -> resolved writes since creation."""
        return self._mutations

    @property
    def resolved_count(self) -> int:
        return self._resolved

    def is_complete(self) -> bool:
        return self._resolved == self.width * self.height

    def rows(self) -> List[List[CellState]]:
        return [
            self._cells[r * self.width:(r + 1) * self.width]
            for r in range(self.height)
        ]

    def to_jsonable(self) -> List[List[str]]:
        return [[state.value for state in row] for row in self.rows()]

    def to_bits(self) -> List[List[int]]:
        """Render FILLED as 1 and anything else as 0."""
        return [
            [1 if state is CellState.FILLED else 0 for state in row]
            for row in self.rows()
        ]


class LineView:
    """Maps positions along one row or column onto the shared grid buffer."""

    def __init__(self, grid: Grid, direction: Direction, index: int) -> None:
        self.grid = grid
        self.direction = direction
        self.index = index
        self.length = grid.line_length(direction)

    @property
    def ref(self) -> LineRef:
        return LineRef(self.direction, self.index)

    def __len__(self) -> int:
        return self.length

    def __getitem__(self, position: int) -> CellState:
        return self.grid.get(self.direction, self.index, position)

    def __iter__(self) -> Iterator[CellState]:
        for position in range(self.length):
            yield self[position]

    def set(self, position: int, value: CellState) -> bool:
        return self.grid.set(self.direction, self.index, position, value)

    def states(self) -> List[CellState]:
        return list(self)

    def count(self, value: CellState) -> int:
        return sum(1 for state in self if state is value)

    def is_resolved(self) -> bool:
        return all(state.is_resolved for state in self)

    def __repr__(self) -> str:
        symbols = "".join(_SYMBOLS[state] for state in self)
        return f"LineView({self.ref}, {symbols!r})"


_SYMBOLS = {
    CellState.UNKNOWN: "?",
    CellState.FILLED: "#",
    CellState.CROSSED: "x",
}
