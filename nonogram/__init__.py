"""Nonogram (picross) solver built on iterative line propagation.

This package exposes the public API surface via:

- ``nonogram.core.models.ClueSet``: validated row and column clues.
- ``nonogram.engine.solver.NonogramSolver``: drives the rules to a fixpoint.
- ``nonogram.io.bitmap`` helpers: render a grid to a bitmap file.
"""

from .core.constants import CellState, Direction, SolveStatus
from .core.models import ClueSet, LineRef
from .engine.grid import Grid, LineView
from .engine.solver import NonogramSolver, SolveResult, SolverConfig, solve

__all__ = [
    "CellState",
    "ClueSet",
    "Direction",
    "Grid",
    "LineRef",
    "LineView",
    "NonogramSolver",
    "SolveResult",
    "SolveStatus",
    "SolverConfig",
    "solve",
]

__version__ = "0.1.0"
