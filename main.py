"""CLI entrypoint for the nonogram solver."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from nonogram.core.exceptions import (
    FormatError,
    InvalidClueSet,
    InvalidTransition,
    PuzzleFormatError,
)
from nonogram.engine.solver import NonogramSolver, SolverConfig
from nonogram.engine.validator import GridValidator
from nonogram.io.ascii_art import ascii_art_file
from nonogram.io.bitmap import write_bitmap
from nonogram.io.puzzle_file import load_puzzle
from nonogram.utils.logger import configure_logging
from nonogram.utils.pretty import print_solve_stats

EXIT_SOLVED = 0
EXIT_ERROR = 1
EXIT_STUCK = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solve nonogram puzzles by line propagation",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    solve = commands.add_parser("solve", help="Solve a puzzle JSON file")
    solve.add_argument("puzzle", type=Path, help="Path to the puzzle JSON file")
    solve.add_argument("--bitmap", type=Path, help="Write the solved grid to this .bmp file")
    solve.add_argument("--output", type=Path, help="Optional path to JSON output")
    solve.add_argument(
        "--max-iterations",
        type=int,
        default=None,
        help="Fixpoint iteration cap (default: (width + height) ** 2)",
    )
    solve.add_argument(
        "--crosscheck",
        action="store_true",
        help="Verify the result and solution uniqueness with the CP-SAT model",
    )
    solve.add_argument(
        "--store-dir",
        type=Path,
        help="Persist the result as a JSON document in this directory",
    )

    ascii_cmd = commands.add_parser("ascii", help="Print a bitmap as ASCII art")
    ascii_cmd.add_argument("image", type=Path, help="Path to a 24 or 32 bit .bmp file")
    return parser


def run_solve(args: argparse.Namespace) -> int:
    try:
        clues = load_puzzle(args.puzzle)
    except (PuzzleFormatError, InvalidClueSet, OSError) as exc:
        print(f"Error loading puzzle: {exc}", file=sys.stderr)
        return EXIT_ERROR

    config = SolverConfig(max_iterations=args.max_iterations)
    try:
        result = NonogramSolver(clues, config).solve()
    except InvalidTransition as exc:
        print(f"Error: contradictory puzzle: {exc}", file=sys.stderr)
        return EXIT_ERROR
    print_solve_stats(result)

    validation: List[str] = []
    if result.solved:
        validation = GridValidator(clues).validate(result.grid).messages

    payload: Dict[str, Any] = result.to_jsonable()
    payload["validation"] = validation

    if args.crosscheck:
        from nonogram.engine.crosscheck import conflicts, crosscheck

        check = crosscheck(clues)
        payload["crosscheck"] = {
            "status": check.status,
            "solutions_found": len(check.solutions),
            "unique": check.unique,
            "conflicts": [list(cell) for cell in conflicts(result.grid, check.solutions[0])]
            if check.solutions
            else [],
        }

    if args.bitmap:
        try:
            write_bitmap(result.grid, args.bitmap)
        except OSError as exc:
            print(f"Error writing bitmap: {exc}", file=sys.stderr)
            return EXIT_ERROR

    if args.store_dir:
        from nonogram.engine.result_store import SolveStore

        SolveStore(args.store_dir).save(
            result, config=config, puzzle_name=args.puzzle.name, validation=validation
        )

    if args.output:
        args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    return EXIT_SOLVED if result.solved else EXIT_STUCK


def run_ascii(args: argparse.Namespace) -> int:
    try:
        print(ascii_art_file(args.image))
    except (FormatError, OSError) as exc:
        print(f"Error reading bitmap: {exc}", file=sys.stderr)
        return EXIT_ERROR
    return EXIT_SOLVED


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.INFO)
    configure_logging(level)

    if args.command == "solve":
        return run_solve(args)
    return run_ascii(args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
