"""Custom exception hierarchy for nonogram solving."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..engine.solver import SolveResult


class NonogramError(Exception):
    """Base exception for solver failures."""


class InvalidClueSet(NonogramError):
    """Raised when a clue set cannot describe any grid of its size."""


class InvalidTransition(NonogramError):
    """Raised when a rule tries to overwrite a resolved cell with another value."""


class UnsolvableError(NonogramError):
    """Raised on demand when the propagation rules stall before a full solution."""

    def __init__(self, message: str, result: "SolveResult") -> None:
        super().__init__(message)
        self.result = result


class PuzzleFormatError(NonogramError):
    """Raised when a puzzle file cannot be parsed into clues."""


class FormatError(NonogramError):
    """Raised when a bitmap file is truncated or its header is malformed."""
