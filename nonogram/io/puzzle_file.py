"""Load puzzle clues from JSON files.

Expected shape::

    {"rows": [[2, 2], [1], ...], "columns": [[1, 2], [1, 1, 1], ...]}

Zero entries are padding and are dropped, so left-padded rule tables such as
``[0, 0, 3]`` and the empty marker ``[0]`` both load naturally.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List

from ..core.exceptions import InvalidClueSet, PuzzleFormatError
from ..core.models import ClueSet
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


def _parse_lines(payload: Any, key: str) -> List[List[int]]:
    lines = payload.get(key)
    if not isinstance(lines, list) or not lines:
        raise PuzzleFormatError(f"'{key}' must be a non-empty list of run lists")
    parsed: List[List[int]] = []
    for index, runs in enumerate(lines):
        if not isinstance(runs, list):
            raise PuzzleFormatError(f"{key}[{index}] must be a list, got {type(runs).__name__}")
        cleaned: List[int] = []
        for run in runs:
            if not isinstance(run, int) or isinstance(run, bool):
                raise PuzzleFormatError(f"{key}[{index}] contains non-integer run {run!r}")
            if run != 0:
                cleaned.append(run)
        parsed.append(cleaned)
    return parsed


def parse_puzzle(payload: Any) -> ClueSet:
    """Build a validated :class:`ClueSet` from decoded JSON."""
    if not isinstance(payload, dict):
        raise PuzzleFormatError("Puzzle document must be a JSON object")
    rows = _parse_lines(payload, "rows")
    columns = _parse_lines(payload, "columns")
    return ClueSet.from_lists(rows, columns)


def load_puzzle(path: Path | str) -> ClueSet:
    """Read and validate a puzzle file.

    Raises :class:`PuzzleFormatError` for malformed JSON and lets
    :class:`InvalidClueSet` through for clues that cannot fit the grid.
    """
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise PuzzleFormatError(f"{path}: invalid JSON ({exc})") from exc
    try:
        clues = parse_puzzle(payload)
    except InvalidClueSet:
        LOGGER.error("Puzzle %s has an impossible clue set", path)
        raise
    LOGGER.info("Loaded %sx%s puzzle from %s", clues.width, clues.height, path)
    return clues
