"""
Treat a worksheet as a list of records, the first row holding the column names.
Record i lives on row i + 2.  Names are looked up in the header row on every
access, so renaming a column in row 1 is picked up straight away.

    ws.list.column_names()       # ["name", "age"]
    ws.list[0]["name"]           # value of A2
    ws.list[0]["age"] = "31"     # writes B2
    ws.list.push({"name": "bob", "age": "30"})
    ws.save()
"""
from collections.abc import Mapping

from ..errors import UnknownColumn

class GoogleSheetsRecordList():
    """
    Rows of a worksheet as records keyed by the header row.
    Get one from GoogleWorksheet.list.
    """
    def __init__(self, worksheet) -> None:
        self._worksheet = worksheet

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._worksheet}, {self.row_count()} records)"

    @property
    def worksheet(self):
        return self._worksheet

    def column_names(self) -> list[str]:
        """
        The header row read left to right up to the last declared column.
        Empty header cells are skipped and a repeated name is only listed once.
        """
        ws = self._worksheet
        names = []
        for c in range(1, ws.max_cols + 1):
            name = ws[1, c]
            if name and name not in names:
                names.append(name)
        return names

    keys = column_names

    def column_of(self, name: str) -> int:
        """
        Physical column of name, the first header cell holding it.
        Raises UnknownColumn if there is none.
        """
        ws = self._worksheet
        key = str(name)
        for c in range(1, ws.max_cols + 1):
            if ws[1, c] == key:
                return c
        raise UnknownColumn(key)

    def set_column_names(self, names: list[str]) -> None:
        """Rewrites the header row, header cells past the new names are blanked"""
        ws = self._worksheet
        names = [str(n) for n in names]
        for c, name in enumerate(names, 1):
            ws[1, c] = name
        for c in range(len(names) + 1, ws.num_cols + 1):
            if ws[1, c]:
                ws[1, c] = ""

    def row_count(self) -> int:
        """Number of records, content rows minus the header"""
        return max(self._worksheet.num_rows - 1, 0)

    def __len__(self) -> int:
        return self.row_count()

    def get_record(self, index: int) -> "GoogleSheetsRecord":
        """
        The record at index, 0 is row 2.
        Indexes past the end are allowed, writing to one adds rows.
        """
        if index < 0:
            raise IndexError(f"Record index must be >= 0: {index}")
        return GoogleSheetsRecord(self._worksheet, index, self.column_of)

    def __getitem__(self, index: int) -> "GoogleSheetsRecord":
        n = self.row_count()
        i = index + n if index < 0 else index
        if i < 0 or i >= n:
            raise IndexError(f"Record index out of range: {index}")
        return self.get_record(i)

    def __setitem__(self, index: int, values: Mapping) -> None:
        """Replaces the whole record at index with values"""
        self.get_record(index + self.row_count() if index < 0 else index).replace(values)

    def __iter__(self):
        for i in range(self.row_count()):
            yield self.get_record(i)

    def push(self, values: Mapping) -> "GoogleSheetsRecord":
        """
        Adds a record after the last one and returns it
            ws.list.push({"name": "bob", "age": "30"})
        """
        record = self.get_record(self.row_count())
        record.update(values)
        return record

    def to_dicts(self) -> list[dict[str,str]]:
        return [r.to_dict() for r in self]

class GoogleSheetsRecord():
    """
    One row of a GoogleSheetsRecordList.  Reads and writes go straight to the
    worksheet's cells, resolve maps a column name to the physical column.
    Compares equal to another record or a mapping with the same content.
    """
    def __init__(self, worksheet, index: int, resolve) -> None:
        self._worksheet = worksheet
        self._index = int(index)
        self._resolve = resolve

    @property
    def index(self) -> int:
        return self._index

    @property
    def row(self) -> int:
        """Worksheet row number, the header is row 1"""
        return self._index + 2

    def _names(self) -> list[str]:
        return self._worksheet.list.column_names()

    def __getitem__(self, name: str) -> str:
        return self._worksheet[self.row, self._resolve(name)]

    def __setitem__(self, name: str, value) -> None:
        self._worksheet[self.row, self._resolve(name)] = value

    def input_value(self, name: str) -> str:
        return self._worksheet.input_value(self.row, self._resolve(name))

    def numeric_value(self, name: str) -> float|None:
        return self._worksheet.numeric_value(self.row, self._resolve(name))

    def __contains__(self, name) -> bool:
        return name in self._names()

    def __iter__(self):
        return iter(self._names())

    def __len__(self) -> int:
        return len(self._names())

    def keys(self) -> list[str]:
        return self._names()

    def values(self) -> list[str]:
        return [self[k] for k in self._names()]

    def items(self) -> list[tuple[str,str]]:
        return [(k, self[k]) for k in self._names()]

    def get(self, name: str, default=None):
        try:
            return self[name]
        except UnknownColumn:
            return default

    def update(self, values: Mapping|None = None, **kwargs) -> None:
        """
        Writes every name/value pair.  All names are resolved before anything is
        written so an UnknownColumn leaves the row untouched.
        """
        pairs = dict(values or {}, **kwargs)
        cols = [(self._resolve(k), v) for k, v in pairs.items()]
        for col, v in cols:
            self._worksheet[self.row, col] = v

    def clear(self) -> None:
        """Blanks every named column of the row"""
        for k in self._names():
            self[k] = ""

    def replace(self, values: Mapping) -> None:
        """Like clear() then update(values)"""
        for k in values:
            self._resolve(k)
        self.clear()
        self.update(values)

    def to_dict(self) -> dict[str,str]:
        return {k: self[k] for k in self._names()}

    def __eq__(self, other) -> bool:
        if isinstance(other, GoogleSheetsRecord):
            return self.to_dict() == other.to_dict()
        if isinstance(other, Mapping):
            return self.to_dict() == dict(other)
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(row={self.row}, {self.to_dict()!r})"
