"""Deterministic clue-conformance validation for solved grids."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from ..core.constants import TREAD_ORDER, CellState
from ..core.exceptions import NonogramError
from ..core.models import ClueSet, LineRef
from ..utils.logger import get_logger
from .grid import Grid


LOGGER = get_logger(__name__)


class ValidationError(NonogramError):
    """Raised internally when a line breaks its clue."""


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


def line_runs(states: Iterable[CellState]) -> Tuple[int, ...]:
    """Lengths of the maximal FILLED runs of a line, in order."""
    runs: List[int] = []
    current = 0
    for state in states:
        if state is CellState.FILLED:
            current += 1
        elif current:
            runs.append(current)
            current = 0
    if current:
        runs.append(current)
    return tuple(runs)


class GridValidator:
    """Checks that every line of a grid is resolved and matches its clue."""

    def __init__(self, clues: ClueSet) -> None:
        self.clues = clues

    def validate(self, grid: Grid) -> ValidationResult:
        messages: List[str] = []
        try:
            self._check_dimensions(grid)
        except ValidationError as exc:
            LOGGER.error("Validation failed: %s", exc)
            return ValidationResult(ok=False, messages=[str(exc)])

        for direction in TREAD_ORDER:
            for ref in self.clues.lines(direction):
                try:
                    self._check_line(grid, ref)
                except ValidationError as exc:
                    messages.append(str(exc))
        if messages:
            LOGGER.error("Validation failed on %d lines", len(messages))
        return ValidationResult(ok=not messages, messages=messages)

    def _check_dimensions(self, grid: Grid) -> None:
        if (grid.width, grid.height) != (self.clues.width, self.clues.height):
            raise ValidationError(
                f"Grid is {grid.width}x{grid.height} but clues describe "
                f"{self.clues.width}x{self.clues.height}"
            )

    def _check_line(self, grid: Grid, ref: LineRef) -> None:
        states = grid.line(ref).states()
        if any(state is CellState.UNKNOWN for state in states):
            raise ValidationError(f"{ref} still has unknown cells")
        actual = line_runs(states)
        expected = self.clues.runs(ref)
        if actual != expected:
            raise ValidationError(f"{ref} has runs {list(actual)}, expected {list(expected)}")
