import json
import tempfile
import unittest
from pathlib import Path

from nonogram.core.exceptions import InvalidClueSet, PuzzleFormatError
from nonogram.io.puzzle_file import load_puzzle, parse_puzzle

from sample_puzzles import SCENARIO_A


class ParsePuzzleTests(unittest.TestCase):
    def test_parses_clue_lists(self) -> None:
        clues = parse_puzzle(SCENARIO_A.to_jsonable())
        self.assertEqual(clues, SCENARIO_A)

    def test_zero_entries_are_dropped(self) -> None:
        clues = parse_puzzle({"rows": [[0, 2], [0]], "columns": [[1], [1]]})
        self.assertEqual(clues.rows, ((2,), ()))

    def test_rejects_malformed_documents(self) -> None:
        cases = {
            "not an object": [[1]],
            "missing columns": {"rows": [[1]]},
            "empty rows": {"rows": [], "columns": [[1]]},
            "line not a list": {"rows": [1], "columns": [[1]]},
            "non-integer run": {"rows": [["1"]], "columns": [[1]]},
            "boolean run": {"rows": [[True]], "columns": [[1]]},
        }
        for name, payload in cases.items():
            with self.subTest(name):
                with self.assertRaises(PuzzleFormatError):
                    parse_puzzle(payload)

    def test_impossible_clues_raise_invalid_clue_set(self) -> None:
        with self.assertRaises(InvalidClueSet):
            parse_puzzle({"rows": [[3]], "columns": [[1], [1]]})


class LoadPuzzleTests(unittest.TestCase):
    def test_loads_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "a.json"
            path.write_text(json.dumps(SCENARIO_A.to_jsonable()), encoding="utf-8")
            self.assertEqual(load_puzzle(path), SCENARIO_A)

    def test_invalid_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "broken.json"
            path.write_text("{rows: ", encoding="utf-8")
            with self.assertRaises(PuzzleFormatError):
                load_puzzle(path)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
