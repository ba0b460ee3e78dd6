"""Data models supporting the nonogram solver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Sequence, Tuple

from .constants import Direction
from .exceptions import InvalidClueSet


Runs = Tuple[int, ...]


class LineRef(NamedTuple):
    """Identifies a logical row or column of the grid."""

    direction: Direction
    index: int

    def __str__(self) -> str:
        return f"{self.direction.value} {self.index}"


def minimum_length(runs: Sequence[int]) -> int:
    """Cells needed by ``runs`` with one mandatory gap between consecutive runs."""
    if not runs:
        return 0
    return sum(runs) + len(runs) - 1


@dataclass(frozen=True)
class ClueSet:
    """Ordered run lengths for every row and column of a puzzle.

    The clue set is validated on construction; an instance that exists is
    guaranteed to fit its own grid dimensions.
    """

    rows: Tuple[Runs, ...]
    columns: Tuple[Runs, ...]

    def __post_init__(self) -> None:
        if not self.rows or not self.columns:
            raise InvalidClueSet("A puzzle needs at least one row and one column")
        self._check_direction(Direction.ROW, self.rows, len(self.columns))
        self._check_direction(Direction.COLUMN, self.columns, len(self.rows))
        row_total = sum(sum(runs) for runs in self.rows)
        col_total = sum(sum(runs) for runs in self.columns)
        if row_total != col_total:
            raise InvalidClueSet(
                f"Row clues fill {row_total} cells but column clues fill {col_total}"
            )

    @classmethod
    def from_lists(
        cls,
        rows: Sequence[Sequence[int]],
        columns: Sequence[Sequence[int]],
    ) -> "ClueSet":
        return cls(
            rows=tuple(tuple(runs) for runs in rows),
            columns=tuple(tuple(runs) for runs in columns),
        )

    @staticmethod
    def _check_direction(direction: Direction, lines: Sequence[Runs], length: int) -> None:
        for index, runs in enumerate(lines):
            for run in runs:
                if not isinstance(run, int) or isinstance(run, bool) or run <= 0:
                    raise InvalidClueSet(
                        f"{direction.value} {index}: run lengths must be positive integers, got {run!r}"
                    )
            needed = minimum_length(runs)
            if needed > length:
                raise InvalidClueSet(
                    f"{direction.value} {index}: runs {list(runs)} need {needed} cells "
                    f"but the line has {length}"
                )

    @property
    def width(self) -> int:
        return len(self.columns)

    @property
    def height(self) -> int:
        return len(self.rows)

    def runs(self, line: LineRef) -> Runs:
        if line.direction is Direction.ROW:
            return self.rows[line.index]
        return self.columns[line.index]

    def line_count(self, direction: Direction) -> int:
        return self.height if direction is Direction.ROW else self.width

    def line_length(self, direction: Direction) -> int:
        return self.width if direction is Direction.ROW else self.height

    def lines(self, direction: Direction) -> Iterator[LineRef]:
        for index in range(self.line_count(direction)):
            yield LineRef(direction, index)

    def to_jsonable(self) -> dict:
        return {
            "rows": [list(runs) for runs in self.rows],
            "columns": [list(runs) for runs in self.columns],
        }


@dataclass
class IterationRecord:
    """Summary of one fixpoint iteration."""

    iteration: int
    mutations: int
    resolved_lines: List[LineRef]
    unresolved_count: int
