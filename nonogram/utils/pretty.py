"""Pretty-print helpers for nonogram grids."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, List, Optional

from ..core.constants import CellState

if TYPE_CHECKING:
    from ..core.models import ClueSet
    from ..engine.grid import Grid
    from ..engine.solver import SolveResult


SYMBOLS = {
    CellState.FILLED: "#",
    CellState.CROSSED: ".",
    CellState.UNKNOWN: "?",
}


def cell_symbol(state: CellState) -> str:
    return SYMBOLS.get(state, "?")


def format_grid(grid: Grid, clues: Optional[ClueSet] = None) -> str:
    """Render the grid with optional row clues on the left and column clues on top."""
    row_labels = [""] * grid.height
    if clues is not None:
        row_labels = [" ".join(str(run) for run in runs) or "0" for runs in clues.rows]
    margin = max((len(label) for label in row_labels), default=0)

    lines: List[str] = []
    if clues is not None:
        depth = max((len(runs) for runs in clues.columns), default=0) or 1
        for level in range(depth):
            cells = []
            for runs in clues.columns:
                padded = [""] * (depth - len(runs)) + [str(run) for run in runs]
                if not runs and level == depth - 1:
                    padded[-1] = "0"
                cells.append(f"{padded[level]:>2}")
            lines.append(" " * margin + " | " + " ".join(cells))
        lines.append(" " * margin + "-+-" + "-" * (3 * grid.width - 1))

    for r, row in enumerate(grid.rows()):
        rendered = " ".join(f"{cell_symbol(state):>2}" for state in row)
        lines.append(f"{row_labels[r]:>{margin}} | {rendered}")
    return "\n".join(lines)


def pretty_print_grid(grid: Grid, *, clues: Optional[ClueSet] = None, label: str | None = None, stream=None) -> None:
    """Print the grid in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_grid(grid, clues), file=stream)


def print_solve_stats(result: SolveResult, *, stream=None) -> None:
    """Print grid + summary stats for a finished solving session."""

    stream = stream or sys.stdout
    pretty_print_grid(result.grid, clues=result.clues, stream=stream)

    grid = result.grid
    total = grid.width * grid.height
    filled = sum(1 for row in grid.rows() for state in row if state is CellState.FILLED)
    unknown = total - grid.resolved_count

    print(file=stream)
    print("--- Solve ---", file=stream)
    print(f"  Status:        {result.status.value}", file=stream)
    print(f"  Size:          {grid.width} x {grid.height} ({total} cells)", file=stream)
    print(f"  Filled:        {filled} ({filled / total * 100:.0f}%)", file=stream)
    print(f"  Iterations:    {result.iterations}", file=stream)
    print(f"  Time:          {result.elapsed_seconds:.3f}s", file=stream)
    if unknown:
        print(f"  Unknown cells: {unknown}", file=stream)
    if result.unresolved:
        names = ", ".join(str(ref) for ref in result.unresolved)
        print(f"  Unresolved:    {names}", file=stream)
