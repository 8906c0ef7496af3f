"""
In-memory sparse grid of a worksheet's cells.
Each cell has three facets, the formatted value (what the sheet displays),
the input value (what was typed, formula text included) and the numeric
value (only known after a round trip to the server).
Writes are tracked in a dirty set so the worksheet knows what to push.
"""
import re

from ..errors import InvalidCellValue

# characters that can't appear in XML 1.0 text, the API rejects them too
_ILLEGAL_CHARS_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")

class GoogleSheetsCellStore():
    """
    Maps (row, col) -> formatted/input/numeric values, 1-based coordinates.
    Also owns the declared bounds (max_rows/max_cols, the grid size stored
    as sheet metadata) and the content bounds (num_rows/num_cols, derived
    from the highest non-empty cell).
    """
    def __init__(self, max_rows: int = 0, max_cols: int = 0) -> None:
        self.load({}, max_rows, max_cols)

    def load(self, cells: dict[tuple[int,int],tuple[str,str,float|None]],
             max_rows: int, max_cols: int) -> None:
        """
        Replace everything with freshly fetched state.
        cells maps (row, col) -> (formatted, input, numeric)
        """
        self._cells = {}
        self._input_values = {}
        self._numeric_values = {}
        for (r, c), (formatted, input_value, numeric) in cells.items():
            self._cells[(r, c)] = formatted
            self._input_values[(r, c)] = input_value
            self._numeric_values[(r, c)] = numeric
        self._max_rows = int(max_rows)
        self._max_cols = int(max_cols)
        self._num_rows = None
        self._num_cols = None
        self._dirty = set()
        self.bounds_modified = False

    def __repr__(self) -> str:
        return (f"{self.__class__}:{len(self._cells)} cells,"
                f"{self._max_rows}Rx{self._max_cols}C,{len(self._dirty)} dirty")

    def __len__(self) -> int:
        """Number of cells held, empty ones included"""
        return len(self._cells)

    def get(self, row: int, col: int) -> str:
        return self._cells.get((row, col), "")

    def get_input(self, row: int, col: int) -> str:
        return self._input_values.get((row, col), "")

    def get_numeric(self, row: int, col: int) -> float|None:
        return self._numeric_values.get((row, col))

    def set(self, row: int, col: int, value) -> None:
        """
        Locally update a cell, nothing goes to the server until the worksheet saves.
        The numeric value is unknown until then.
        """
        value = "" if value is None else str(value)
        m = _ILLEGAL_CHARS_RE.search(value)
        if m:
            raise InvalidCellValue(row, col, value, m.group(0))
        self._cells[(row, col)] = value
        self._input_values[(row, col)] = value
        self._numeric_values[(row, col)] = None
        self._dirty.add((row, col))
        if row > self._max_rows:
            self.max_rows = row
        if col > self._max_cols:
            self.max_cols = col
        if value:
            if self._num_rows is not None and row > self._num_rows:
                self._num_rows = row
            if self._num_cols is not None and col > self._num_cols:
                self._num_cols = col
        else:
            # can't tell if this was the last cell in its row/col without a scan
            self._num_rows = None
            self._num_cols = None

    @property
    def num_rows(self) -> int:
        """Row number of the bottom-most non-empty row"""
        # memoized as the full scan gets expensive on big sheets
        if self._num_rows is None:
            self._num_rows = max((r for (r, c), v in self._input_values.items() if v), default=0)
        return self._num_rows

    @property
    def num_cols(self) -> int:
        """Column number of the right-most non-empty column"""
        if self._num_cols is None:
            self._num_cols = max((c for (r, c), v in self._input_values.items() if v), default=0)
        return self._num_cols

    @property
    def max_rows(self) -> int:
        """Declared number of rows, empty ones included"""
        return self._max_rows

    @max_rows.setter
    def max_rows(self, rows: int) -> None:
        """Shrinking drops the cells outside, the server does the same when the grid shrinks"""
        rows = int(rows)
        if rows < self._max_rows:
            self._drop(lambda r, c: r > rows)
        self._max_rows = rows
        self.bounds_modified = True

    @property
    def max_cols(self) -> int:
        """Declared number of columns, empty ones included"""
        return self._max_cols

    @max_cols.setter
    def max_cols(self, cols: int) -> None:
        cols = int(cols)
        if cols < self._max_cols:
            self._drop(lambda r, c: c > cols)
        self._max_cols = cols
        self.bounds_modified = True

    def _drop(self, outside) -> None:
        for key in [k for k in self._cells if outside(*k)]:
            del self._cells[key]
            self._input_values.pop(key, None)
            self._numeric_values.pop(key, None)
        self._dirty = {k for k in self._dirty if not outside(*k)}
        self._num_rows = None
        self._num_cols = None

    @property
    def dirty(self) -> frozenset[tuple[int,int]]:
        return frozenset(self._dirty)

    @property
    def is_dirty(self) -> bool:
        return bool(self._dirty)

    def clear_dirty(self) -> None:
        self._dirty.clear()

    def dirty_bounds(self) -> tuple[int,int,int,int]|None:
        """
        Smallest rectangle covering every dirty cell as
        (min_row, min_col, max_row, max_col), or None when clean.
        """
        if not self._dirty:
            return None
        rows = [r for r, c in self._dirty]
        cols = [c for r, c in self._dirty]
        return (min(rows), min(cols), max(rows), max(cols))

    def dirty_values(self) -> tuple[tuple[int,int,int,int],list[list[str|None]]]|None:
        """
        The dirty rectangle plus its values in row major order, cells in the
        rectangle that were not written are None.
        """
        bounds = self.dirty_bounds()
        if bounds is None:
            return None
        min_row, min_col, max_row, max_col = bounds
        values = [[self._input_values.get((r, c), "") if (r, c) in self._dirty else None
                   for c in range(min_col, max_col + 1)]
                  for r in range(min_row, max_row + 1)]
        return (bounds, values)
