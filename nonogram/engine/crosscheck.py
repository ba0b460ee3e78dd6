"""Independent CP-SAT model of a nonogram using OR-Tools.

Used to verify the propagation engine's output and to check whether a
puzzle has a unique solution. The propagation engine never calls into this
module; it stays heuristic-only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from ortools.sat.python import cp_model

from ..core.constants import CellState
from ..core.models import ClueSet
from ..utils.logger import get_logger
from .grid import Grid

LOGGER = get_logger(__name__)

Bits = List[List[int]]


@dataclass
class CrosscheckResult:
    solutions: List[Bits] = field(default_factory=list)
    status: str = "UNKNOWN"
    wall_time: float = 0.0

    @property
    def feasible(self) -> bool:
        return bool(self.solutions)

    @property
    def unique(self) -> bool:
        return len(self.solutions) == 1


def line_automaton(runs: Sequence[int]) -> Tuple[List[Tuple[int, int, int]], List[int]]:
    """Build the (transitions, final states) automaton accepting ``runs``.

    Label 0 is an empty cell and label 1 a filled one. State 0 and every gap
    state loop on 0; each filled cell of a run advances one state.
    """
    transitions: List[Tuple[int, int, int]] = [(0, 0, 0)]
    finals = [0]
    state, next_state = 0, 1
    for run in runs:
        for _ in range(run):
            transitions.append((state, 1, next_state))
            state, next_state = next_state, next_state + 1
        gap, next_state = next_state, next_state + 1
        transitions.append((state, 0, gap))
        transitions.append((gap, 0, gap))
        finals = [state, gap]
        state = gap
    return transitions, finals


def build_model(clues: ClueSet) -> Tuple[cp_model.CpModel, Dict[Tuple[int, int], cp_model.IntVar]]:
    model = cp_model.CpModel()
    cells: Dict[Tuple[int, int], cp_model.IntVar] = {}
    for r in range(clues.height):
        for c in range(clues.width):
            cells[(r, c)] = model.new_bool_var(f"x_{r}_{c}")

    for r, runs in enumerate(clues.rows):
        transitions, finals = line_automaton(runs)
        model.add_automaton([cells[(r, c)] for c in range(clues.width)], 0, finals, transitions)
    for c, runs in enumerate(clues.columns):
        transitions, finals = line_automaton(runs)
        model.add_automaton([cells[(r, c)] for r in range(clues.height)], 0, finals, transitions)
    return model, cells


def crosscheck(clues: ClueSet, max_solutions: int = 2, timeout: float = 10.0) -> CrosscheckResult:
    """Find up to ``max_solutions`` distinct solutions of ``clues``."""
    model, cells = build_model(clues)
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    solver.parameters.num_workers = 4

    result = CrosscheckResult()
    while len(result.solutions) < max_solutions:
        status = solver.solve(model)
        result.status = solver.status_name(status)
        result.wall_time += solver.wall_time
        if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            break
        bits = [
            [int(solver.value(cells[(r, c)])) for c in range(clues.width)]
            for r in range(clues.height)
        ]
        result.solutions.append(bits)
        # Forbid this exact grid so the next solve must differ in some cell.
        model.add_bool_or(
            [~var if bits[r][c] else var for (r, c), var in cells.items()]
        )

    LOGGER.info(
        "CP-SAT cross-check: %d solution(s), last status %s (%.2fs)",
        len(result.solutions),
        result.status,
        result.wall_time,
    )
    return result


def conflicts(grid: Grid, solution: Bits) -> List[Tuple[int, int]]:
    """Cells the grid resolved differently from ``solution``; UNKNOWN cells never conflict."""
    mismatched: List[Tuple[int, int]] = []
    for r in range(grid.height):
        for c in range(grid.width):
            state = grid.cell(r, c)
            if state is CellState.UNKNOWN:
                continue
            if (state is CellState.FILLED) != bool(solution[r][c]):
                mismatched.append((r, c))
    return mismatched
