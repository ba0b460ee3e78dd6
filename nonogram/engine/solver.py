"""Fixpoint orchestration of the propagation rules.

The solver runs the edge sweep once per direction, then repeats boundary
treads and completion checks until every line is resolved (SOLVED) or a
full iteration changes nothing (STUCK). There is no search fallback: a
puzzle needing deeper deduction than the rules provide ends STUCK.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import List, Optional, Set

from ..core.constants import TREAD_ORDER, SolveStatus
from ..core.exceptions import UnsolvableError
from ..core.models import ClueSet, IterationRecord, LineRef
from ..utils.logger import get_logger
from .grid import Grid
from .rules import boundary_tread, completion_check, edge_sweep


LOGGER = get_logger(__name__)


@dataclass
class SolverConfig:
    """Tuning knobs for a solving session."""

    max_iterations: Optional[int] = None
    completion_passes: int = 2
    record_history: bool = True

    def iteration_cap(self, clues: ClueSet) -> int:
        if self.max_iterations is not None:
            return self.max_iterations
        return (clues.width + clues.height) ** 2


@dataclass
class SolveResult:
    status: SolveStatus
    grid: Grid
    clues: ClueSet
    iterations: int
    unresolved: List[LineRef]
    history: List[IterationRecord] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def solved(self) -> bool:
        return self.status is SolveStatus.SOLVED

    def raise_for_status(self) -> None:
        """Raise :class:`UnsolvableError` if the rules stalled."""
        if self.status is SolveStatus.STUCK:
            raise UnsolvableError(
                f"Propagation stalled after {self.iterations} iterations with "
                f"{len(self.unresolved)} unresolved lines",
                self,
            )

    def to_jsonable(self) -> dict:
        return {
            "status": self.status.value,
            "width": self.grid.width,
            "height": self.grid.height,
            "iterations": self.iterations,
            "elapsed_seconds": round(self.elapsed_seconds, 6),
            "clues": self.clues.to_jsonable(),
            "grid": self.grid.to_jsonable(),
            "unresolved": [
                {"direction": ref.direction.value, "index": ref.index}
                for ref in self.unresolved
            ],
        }


class NonogramSolver:
    """Owns the grid of one puzzle and drives the rules to a fixpoint."""

    def __init__(self, clues: ClueSet, config: Optional[SolverConfig] = None) -> None:
        self.clues = clues
        self.config = config or SolverConfig()
        self.grid = Grid(clues.width, clues.height)
        self.unresolved: Set[LineRef] = {
            ref for direction in TREAD_ORDER for ref in clues.lines(direction)
        }
        self.status = SolveStatus.RUNNING
        self.iterations = 0
        self.history: List[IterationRecord] = []
        self._initialized = False

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def solve(self) -> SolveResult:
        started = time.perf_counter()
        LOGGER.info(
            "Solving %sx%s puzzle (%d lines)",
            self.clues.width,
            self.clues.height,
            len(self.unresolved),
        )
        self.initialize()
        cap = self.config.iteration_cap(self.clues)
        while self.status is SolveStatus.RUNNING:
            if self.iterations >= cap:
                LOGGER.warning("Iteration cap %d reached; giving up", cap)
                self.status = SolveStatus.STUCK
                break
            self.step()

        elapsed = time.perf_counter() - started
        if self.status is SolveStatus.SOLVED:
            LOGGER.info("Solved in %d iterations (%.3fs)", self.iterations, elapsed)
        else:
            LOGGER.warning(
                "Stuck after %d iterations with %d unresolved lines",
                self.iterations,
                len(self.unresolved),
            )
        return SolveResult(
            status=self.status,
            grid=self.grid,
            clues=self.clues,
            iterations=self.iterations,
            unresolved=sorted(self.unresolved),
            history=list(self.history),
            elapsed_seconds=elapsed,
        )

    def initialize(self) -> None:
        """One-time edge sweep over both directions followed by a completion pass."""
        if self._initialized:
            return
        self._initialized = True
        for direction in TREAD_ORDER:
            edge_sweep(self.grid, self.clues, direction)
        self._completion_pass()
        LOGGER.debug(
            "Initial sweep resolved %d cells, %d lines remain",
            self.grid.resolved_count,
            len(self.unresolved),
        )
        self._update_status(progressed=True)

    def step(self) -> SolveStatus:
        """Run one fixpoint iteration and return the resulting status."""
        if not self._initialized:
            self.initialize()
        if self.status is not SolveStatus.RUNNING:
            return self.status

        self.iterations += 1
        mutations_before = self.grid.mutations
        unresolved_before = len(self.unresolved)

        for direction in TREAD_ORDER:
            for ref in sorted(line for line in self.unresolved if line.direction is direction):
                boundary_tread(self.grid, self.clues, ref)
        resolved: List[LineRef] = []
        for _ in range(self.config.completion_passes):
            resolved.extend(self._completion_pass())

        mutations = self.grid.mutations - mutations_before
        if self.config.record_history:
            self.history.append(
                IterationRecord(
                    iteration=self.iterations,
                    mutations=mutations,
                    resolved_lines=resolved,
                    unresolved_count=len(self.unresolved),
                )
            )
        LOGGER.debug(
            "Iteration %d: %d cells written, %d lines resolved, %d unresolved",
            self.iterations,
            mutations,
            len(resolved),
            len(self.unresolved),
        )
        self._update_status(
            progressed=mutations > 0 or len(self.unresolved) < unresolved_before
        )
        return self.status

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _completion_pass(self) -> List[LineRef]:
        resolved: List[LineRef] = []
        for direction in TREAD_ORDER:
            resolved.extend(
                completion_check(self.grid, self.clues, self.unresolved, direction)
            )
        return resolved

    def _update_status(self, progressed: bool) -> None:
        if not self.unresolved:
            self.status = SolveStatus.SOLVED
        elif not progressed:
            self.status = SolveStatus.STUCK


def solve(clues: ClueSet, config: Optional[SolverConfig] = None) -> SolveResult:
    """Convenience wrapper: build a solver for ``clues`` and run it."""
    return NonogramSolver(clues, config).solve()
