import unittest

from nonogram.core.constants import CellState, Direction
from nonogram.core.exceptions import InvalidClueSet, InvalidTransition
from nonogram.core.models import ClueSet, LineRef, minimum_length
from nonogram.engine.grid import Grid


class GridAccessTests(unittest.TestCase):
    def test_row_and_column_views_share_cells(self) -> None:
        grid = Grid(width=4, height=3)
        grid.set(Direction.ROW, 1, 2, CellState.FILLED)

        self.assertIs(grid.get(Direction.COLUMN, 2, 1), CellState.FILLED)
        self.assertIs(grid.cell(1, 2), CellState.FILLED)
        column = grid.line(LineRef(Direction.COLUMN, 2))
        self.assertEqual(
            column.states(),
            [CellState.UNKNOWN, CellState.FILLED, CellState.UNKNOWN],
        )

    def test_column_write_visible_through_row_view(self) -> None:
        grid = Grid(width=3, height=2)
        row = grid.line(LineRef(Direction.ROW, 1))
        column = grid.line(LineRef(Direction.COLUMN, 0))
        column.set(1, CellState.CROSSED)
        self.assertIs(row[0], CellState.CROSSED)

    def test_rewriting_same_value_is_not_a_mutation(self) -> None:
        grid = Grid(width=2, height=2)
        self.assertTrue(grid.set(Direction.ROW, 0, 0, CellState.FILLED))
        self.assertFalse(grid.set(Direction.COLUMN, 0, 0, CellState.FILLED))
        self.assertEqual(grid.mutations, 1)
        self.assertEqual(grid.resolved_count, 1)

    def test_conflicting_write_raises(self) -> None:
        grid = Grid(width=2, height=2)
        grid.set(Direction.ROW, 0, 1, CellState.CROSSED)
        with self.assertRaises(InvalidTransition):
            grid.set(Direction.COLUMN, 1, 0, CellState.FILLED)
        self.assertIs(grid.cell(0, 1), CellState.CROSSED)

    def test_resetting_to_unknown_raises(self) -> None:
        grid = Grid(width=2, height=2)
        grid.set(Direction.ROW, 0, 0, CellState.FILLED)
        with self.assertRaises(InvalidTransition):
            grid.set(Direction.ROW, 0, 0, CellState.UNKNOWN)

    def test_out_of_range_access_raises(self) -> None:
        grid = Grid(width=3, height=2)
        with self.assertRaises(IndexError):
            grid.get(Direction.ROW, 2, 0)
        with self.assertRaises(IndexError):
            grid.get(Direction.COLUMN, 0, 2)
        with self.assertRaises(IndexError):
            grid.set(Direction.ROW, 0, -1, CellState.FILLED)

    def test_rejects_empty_dimensions(self) -> None:
        with self.assertRaises(ValueError):
            Grid(width=0, height=3)

    def test_completion_and_serialization(self) -> None:
        grid = Grid(width=2, height=1)
        grid.set(Direction.ROW, 0, 0, CellState.FILLED)
        self.assertFalse(grid.is_complete())
        grid.set(Direction.ROW, 0, 1, CellState.CROSSED)
        self.assertTrue(grid.is_complete())
        self.assertEqual(grid.to_jsonable(), [["FILLED", "CROSSED"]])
        self.assertEqual(grid.to_bits(), [[1, 0]])


class LineViewTests(unittest.TestCase):
    def test_count_and_resolution(self) -> None:
        grid = Grid(width=3, height=1)
        row = grid.line(LineRef(Direction.ROW, 0))
        row.set(0, CellState.FILLED)
        row.set(2, CellState.CROSSED)

        self.assertEqual(row.count(CellState.FILLED), 1)
        self.assertEqual(row.count(CellState.UNKNOWN), 1)
        self.assertFalse(row.is_resolved())
        row.set(1, CellState.FILLED)
        self.assertTrue(row.is_resolved())
        self.assertEqual(repr(row), "LineView(ROW 0, '##x')")


class ClueSetTests(unittest.TestCase):
    def test_minimum_length_counts_gaps(self) -> None:
        self.assertEqual(minimum_length([]), 0)
        self.assertEqual(minimum_length([3]), 3)
        self.assertEqual(minimum_length([2, 2]), 5)

    def test_accessors(self) -> None:
        clues = ClueSet.from_lists(rows=[[1], [2]], columns=[[2], [1]])
        self.assertEqual((clues.width, clues.height), (2, 2))
        self.assertEqual(clues.runs(LineRef(Direction.ROW, 1)), (2,))
        self.assertEqual(clues.runs(LineRef(Direction.COLUMN, 0)), (2,))
        self.assertEqual(
            list(clues.lines(Direction.COLUMN)),
            [LineRef(Direction.COLUMN, 0), LineRef(Direction.COLUMN, 1)],
        )

    def test_overflowing_runs_rejected(self) -> None:
        with self.assertRaises(InvalidClueSet):
            ClueSet.from_lists(rows=[[2, 2], [1]], columns=[[1], [1], [1]])

    def test_non_positive_runs_rejected(self) -> None:
        with self.assertRaises(InvalidClueSet):
            ClueSet.from_lists(rows=[[0]], columns=[[0]])
        with self.assertRaises(InvalidClueSet):
            ClueSet.from_lists(rows=[[True]], columns=[[1]])

    def test_mismatched_totals_rejected(self) -> None:
        with self.assertRaises(InvalidClueSet):
            ClueSet.from_lists(rows=[[2], [2]], columns=[[1], [1]])

    def test_empty_puzzle_rejected(self) -> None:
        with self.assertRaises(InvalidClueSet):
            ClueSet.from_lists(rows=[], columns=[[1]])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
