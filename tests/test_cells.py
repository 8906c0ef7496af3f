
import pytest

from gdrivews.errors import InvalidCellValue
from gdrivews.sheets.cells import GoogleSheetsCellStore

def test_empty():
    cells = GoogleSheetsCellStore()
    assert(cells.num_rows == 0)
    assert(cells.num_cols == 0)
    assert(cells.get(1, 1) == "")
    assert(cells.get_input(3, 4) == "")
    assert(cells.get_numeric(3, 4) is None)
    assert(not cells.is_dirty)
    assert(cells.dirty_bounds() is None)
    assert(cells.dirty_values() is None)

def test_set_and_bounds():
    cells = GoogleSheetsCellStore()
    cells.set(1, 1, "3")
    cells.set(1, 2, "5")
    cells.set(1, 3, "=A1+B1")
    assert(cells.num_rows == 1)
    assert(cells.num_cols == 3)
    assert(cells.dirty == {(1, 1), (1, 2), (1, 3)})
    assert(cells.get(1, 3) == "=A1+B1")
    assert(cells.get_input(1, 3) == "=A1+B1")
    assert(cells.get_numeric(1, 1) is None)
    # writes past the declared bounds grow them
    assert(cells.max_rows == 1)
    assert(cells.max_cols == 3)
    assert(cells.bounds_modified)

def test_round_trip_input():
    cells = GoogleSheetsCellStore(10, 10)
    for value in ["hoge", "", "=SUM(A1:A3)", "  spaced  ", "tab\there", "multi\nline", "日本語"]:
        cells.set(4, 7, value)
        assert(cells.get_input(4, 7) == value)

def test_coercion():
    cells = GoogleSheetsCellStore(10, 10)
    cells.set(1, 1, 42)
    assert(cells.get_input(1, 1) == "42")
    cells.set(1, 2, None)
    assert(cells.get_input(1, 2) == "")
    assert((1, 2) in cells.dirty)

def test_shrink_recomputes():
    cells = GoogleSheetsCellStore(10, 10)
    cells.set(2, 2, "x")
    cells.set(5, 6, "y")
    assert(cells.num_rows == 5)
    assert(cells.num_cols == 6)
    cells.set(5, 6, "")
    assert(cells.num_rows == 2)
    assert(cells.num_cols == 2)
    # growing extends the memo
    cells.set(7, 1, "z")
    assert(cells.num_rows == 7)
    assert(cells.num_cols == 2)
    # clearing something that isn't the max leaves it
    cells.set(2, 2, "")
    assert(cells.num_rows == 7)
    assert(cells.num_cols == 1)

def test_illegal_chars():
    cells = GoogleSheetsCellStore(10, 10)
    for bad in ["a\x00b", "\x07", "x\x0b", "\x1f", "\ufffe", "oops\uffff"]:
        with pytest.raises(InvalidCellValue):
            cells.set(1, 1, bad)
    assert(not cells.is_dirty)
    assert(cells.get(1, 1) == "")
    with pytest.raises(InvalidCellValue) as e:
        cells.set(2, 3, "a\x01")
    assert(e.value.row == 2 and e.value.col == 3)
    assert(e.value.char == "\x01")

def test_load_resets():
    cells = GoogleSheetsCellStore()
    cells.set(1, 1, "local")
    cells.load({(1, 1): ("1,000", "1000", 1000.0), (2, 3): ("8", "=A1+B1", 8.0)}, 50, 5)
    assert(not cells.is_dirty)
    assert(not cells.bounds_modified)
    assert(cells.max_rows == 50)
    assert(cells.max_cols == 5)
    assert(cells.get(1, 1) == "1,000")
    assert(cells.get_input(1, 1) == "1000")
    assert(cells.get_numeric(2, 3) == 8.0)
    assert(cells.num_rows == 2)
    assert(cells.num_cols == 3)

def test_dirty_rectangle():
    cells = GoogleSheetsCellStore(10, 10)
    cells.set(2, 3, "a")
    cells.set(4, 2, "b")
    assert(cells.dirty_bounds() == (2, 2, 4, 3))
    bounds, values = cells.dirty_values()
    assert(bounds == (2, 2, 4, 3))
    assert(values == [[None, "a"], [None, None], ["b", None]])
    cells.clear_dirty()
    assert(not cells.is_dirty)
    assert(cells.get(2, 3) == "a")

def test_shrinking_bounds_drops_cells():
    cells = GoogleSheetsCellStore(10, 10)
    cells.set(9, 2, "gone")
    cells.set(2, 9, "also gone")
    cells.set(1, 1, "kept")
    cells.max_rows = 5
    cells.max_cols = 5
    assert(cells.get(9, 2) == "")
    assert(cells.get(2, 9) == "")
    assert(cells.dirty == {(1, 1)})
    assert(cells.num_rows == 1)
    assert(cells.num_cols == 1)
