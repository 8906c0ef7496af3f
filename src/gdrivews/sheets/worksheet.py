"""
A worksheet is one tab of a spreadsheet.
Cells are fetched once into a GoogleSheetsCellStore and read from there,
writes stay local until save() pushes them.  save() sends, in order,
  1. changed sheet properties (title, index, row/col counts),
  2. queued structural requests (formatting, merges),
  3. one values update covering the rectangle around every written cell,
and each step only forgets its own pending work once it went through.
reload() throws all local state away and fetches again.

    ws = spreadsheet.worksheets()[0]
    ws["A1"] = "3"
    ws[1, 2] = "5"
    ws["C1"] = "=A1+B1"
    ws.synchronize()
    ws["C1"]  # "8"
"""
import logging
from pathlib import Path

from . import ops, GoogleSheetsMaxCells
from .a1 import parse_cell_args, name_to_coords, quote_sheet_title, r1c1_range
from .cells import GoogleSheetsCellStore
from .resources import (SheetProperties, GridRange, ValueRange, NumberFormat, Color,
                        TextFormat, Border, extract_value)
from .requests import (GoogleSheetsUpdateRequestBase, GoogleSheetsUpdateRequest,
                       UpdateSheetPropertiesRequest, DeleteSheetRequest, RepeatCellRequest,
                       UpdateBordersRequest, MergeCellsRequest)
from ..errors import GoogleDriveError, OutOfRange

logger = logging.getLogger(__name__)

# only what reload needs, grid data otherwise carries every cell's formatting
_RELOAD_FIELDS = ("sheets(properties,data(startRow,startColumn,"
                  "rowData.values(formattedValue,userEnteredValue,effectiveValue)))")

_BORDER_SIDES = ["top", "bottom", "left", "right", "innerHorizontal", "innerVertical"]

class GoogleWorksheet():
    """
    A worksheet (tab) in a spreadsheet.
    Use GoogleSpreadsheet.worksheets() or worksheet_by_title() etc. to get one.
    Cells are addressed either by name or 1-based (row, col):
        ws["B1"] == ws[1, 2]
    """
    def __init__(self, session, spreadsheet, properties: SheetProperties|dict) -> None:
        self._session = session
        self._spreadsheet = spreadsheet
        self._props = SheetProperties.from_response(properties)
        # title as the server knows it, reload has to ask for that one
        self._remote_title = self._props.title
        self._cells = None
        self._meta_modified = False
        self._requests = []
        self._list = None

    def __str__(self) -> str:
        return str(self._props)

    def __repr__(self) -> str:
        return f"{self.__class__}:{str(self)}"

    def __eq__(self, other) -> bool:
        return (isinstance(other, GoogleWorksheet) and
                self.spreadsheet_key == other.spreadsheet_key and
                self.sheet_id == other.sheet_id)

    def __hash__(self) -> int:
        return hash((self.spreadsheet_key, self.sheet_id))

    @property
    def session(self):
        return self._session

    @property
    def spreadsheet(self):
        """The GoogleSpreadsheet this worksheet belongs to"""
        return self._spreadsheet

    @property
    def spreadsheet_key(self) -> str:
        return self._spreadsheet.key

    @property
    def properties(self) -> SheetProperties:
        return self._props

    @property
    def sheet_id(self) -> int:
        """
        Unique ID of the worksheet within the spreadsheet, the 'gid' in its URL.
        The index can be changed but not the sheet ID.
        """
        return self._props.sheetId

    gid = sheet_id

    @property
    def title(self) -> str:
        return self._props.title

    @title.setter
    def title(self, title: str) -> None:
        """Updates title of the worksheet, saved on the next save()"""
        self._props.title = str(title)
        self._meta_modified = True

    @property
    def index(self) -> int:
        """
        Index within the spreadsheet, which is the ordering you see
        of the tabs when you open the spreadsheet.
        """
        return self._props.index

    @index.setter
    def index(self, index: int) -> None:
        self._props.index = int(index)
        self._meta_modified = True

    @property
    def human_url(self) -> str:
        """URL to view/edit the worksheet in a Web browser"""
        return f"https://docs.google.com/spreadsheets/d/{self.spreadsheet_key}/edit#gid={self.sheet_id}"

    @property
    def csv_export_url(self) -> str:
        return (f"https://docs.google.com/spreadsheets/d/{self.spreadsheet_key}"
                f"/export?format=csv&gid={self.sheet_id}")

    @property
    def loaded(self) -> bool:
        """True once cells have been fetched"""
        return self._cells is not None

    @property
    def cells(self) -> GoogleSheetsCellStore:
        """The local cell store, fetched on first use"""
        if self._cells is None:
            self._load(keep_changes=True)
        return self._cells

    @property
    def max_rows(self) -> int:
        """Number of rows in the worksheet, empty rows included"""
        if self._cells is not None:
            return self._cells.max_rows
        return self._props.gridProperties.rowCount

    @max_rows.setter
    def max_rows(self, rows: int) -> None:
        """Updates the number of rows, saved on the next save()"""
        self._check_size(rows, self.max_cols)
        self.cells.max_rows = rows
        self._meta_modified = True

    @property
    def max_cols(self) -> int:
        """Number of columns in the worksheet, empty columns included"""
        if self._cells is not None:
            return self._cells.max_cols
        return self._props.gridProperties.columnCount

    @max_cols.setter
    def max_cols(self, cols: int) -> None:
        self._check_size(self.max_rows, cols)
        self.cells.max_cols = cols
        self._meta_modified = True

    def _check_size(self, rows: int, cols: int) -> None:
        if rows < 0 or cols < 0 or rows * cols > GoogleSheetsMaxCells:
            raise OutOfRange(f"A worksheet can't be {rows}x{cols}, at most {GoogleSheetsMaxCells} cells")

    @property
    def num_rows(self) -> int:
        """Row number of the bottom-most non-empty row"""
        return self.cells.num_rows

    @property
    def num_cols(self) -> int:
        """Column number of the right-most non-empty column"""
        return self.cells.num_cols

    def __getitem__(self, key) -> str:
        """
        Returns the value of the cell as shown in the sheet
            ws[2, 1]  # row 2, column 1
            ws["A2"]
        """
        row, col = parse_cell_args((key,))
        return self.cells.get(row, col)

    def __setitem__(self, key, value) -> None:
        """
        Updates the cell locally, call save() to send it.
        Anything is written as str(value), None clears the cell, a value starting
        with '=' is a formula.
            ws[2, 1] = "hoge"
            ws["A3"] = "=A1+A2"
        """
        row, col = parse_cell_args((key,))
        self.cells.set(row, col, value)

    def input_value(self, *args) -> str:
        """
        Returns the value as typed in, formula text for formula cells
            ws.input_value(1, 3)  # "=A1+B1"
            ws.input_value("C1")
        """
        row, col = parse_cell_args(args)
        return self.cells.get_input(row, col)

    def numeric_value(self, *args) -> float|None:
        """
        Returns the numeric value of the cell, None when it isn't a number or
        was written since the last reload.
        """
        row, col = parse_cell_args(args)
        return self.cells.get_numeric(row, col)

    def cell_name_to_row_col(self, name: str) -> tuple[int,int]:
        """'C2' -> (2, 3)"""
        return name_to_coords(name)

    def update_cells(self, top_row: int, left_col: int, rows: list[list]) -> None:
        """
        Writes a block of values with its top left at (top_row, left_col).
            ws.update_cells(2, 3, [["1", "2"], ["3", "4"]])
        """
        parse_cell_args((top_row, left_col))
        store = self.cells
        for r, row in enumerate(rows):
            for c, value in enumerate(row):
                store.set(top_row + r, left_col + c, value)

    def rows(self, skip: int = 0) -> tuple[tuple[str,...],...]:
        """
        The content area as a tuple of rows of shown values, skip leading
        rows with skip, e.g. 1 to leave out a header.
        """
        store = self.cells
        nc = store.num_cols
        return tuple(tuple(store.get(r, c) for c in range(1, nc + 1))
                     for r in range(skip + 1, store.num_rows + 1))

    @property
    def is_dirty(self) -> bool:
        """True if there is anything save() would send"""
        return (self._meta_modified or bool(self._requests) or
                (self._cells is not None and (self._cells.is_dirty or self._cells.bounds_modified)))

    @property
    def pending_requests(self) -> list:
        """Structural requests queued for the next save()"""
        return list(self._requests)

    def reload(self) -> bool:
        """
        Fetches the worksheet's properties and cells again.
        Any local change that wasn't saved is discarded, requests queued
        for the next save() included.
        """
        self._load(keep_changes=False)
        return True

    def _load(self, keep_changes: bool) -> None:
        """
        Fetch and replace the cells.  The first, lazy, load keeps the title/index
        changes and requests made before it, reload() drops them.
        """
        ss = ops.get(self._session, self.spreadsheet_key,
                     ranges=[quote_sheet_title(self._remote_title)],
                     includeGridData=True, fields=_RELOAD_FIELDS)
        if self.sheet_id >= 0:
            # a different tab under the old title is not this worksheet
            sheet = next((s for s in ss.sheets if s.properties.sheetId == self.sheet_id), None)
        else:
            sheet = ss.sheets[0] if ss.sheets else None
        if sheet is None:
            raise GoogleDriveError(f"Worksheet {self._remote_title!r} (sheet ID {self.sheet_id}) "
                                   f"not found in {self.spreadsheet_key}")
        cells = {}
        for gd in sheet.data:
            for r, c, cell in gd.cells():
                formatted = cell.get('formattedValue', "")
                input_value = extract_value(cell.get('userEnteredValue'))
                numeric = (cell.get('effectiveValue') or {}).get('numberValue')
                cells[(r, c)] = (formatted, formatted if input_value is None else input_value, numeric)
        props = sheet.properties
        self._remote_title = props.title
        if keep_changes and self._meta_modified:
            props.title = self._props.title
            props.index = self._props.index
        self._props = props
        if self._cells is None:
            self._cells = GoogleSheetsCellStore()
        self._cells.load(cells, self._props.gridProperties.rowCount, self._props.gridProperties.columnCount)
        if not keep_changes:
            self._meta_modified = False
            self._requests = []
        logger.debug("loaded %s: %d cells", self, len(self._cells))

    def save(self) -> bool:
        """
        Sends all local changes, returns True if anything was sent.
        If a request fails the error propagates, work from the steps that already
        succeeded is not resent, what's left stays pending for the next save().
        """
        sent = False
        if self._meta_modified or (self._cells is not None and self._cells.bounds_modified):
            if self._cells is not None:
                self._props.gridProperties.rowCount = self._cells.max_rows
                self._props.gridProperties.columnCount = self._cells.max_cols
            request = GoogleSheetsUpdateRequest([UpdateSheetPropertiesRequest(self._props)])
            ops.batchUpdate(self._session, self.spreadsheet_key, request)
            self._meta_modified = False
            if self._cells is not None:
                self._cells.bounds_modified = False
            self._remote_title = self._props.title
            sent = True

        if self._requests:
            ops.batchUpdate(self._session, self.spreadsheet_key, GoogleSheetsUpdateRequest(list(self._requests)))
            self._requests = []
            sent = True

        if self._cells is not None and self._cells.is_dirty:
            (min_row, min_col, max_row, max_col), values = self._cells.dirty_values()
            data = ValueRange(r1c1_range(self.title, min_row, min_col, max_row, max_col), "ROWS", values)
            ops.updateValues(self._session, self.spreadsheet_key, data, "USER_ENTERED")
            self._cells.clear_dirty()
            sent = True
        return sent

    def synchronize(self) -> None:
        """Calls save() and reload()"""
        self.save()
        self.reload()

    def delete(self) -> None:
        """Deletes this worksheet right away, no save() needed"""
        request = GoogleSheetsUpdateRequest([DeleteSheetRequest(self.sheet_id)])
        ops.batchUpdate(self._session, self.spreadsheet_key, request)
        logger.debug("deleted worksheet %s", self)

    def export_as_string(self) -> str:
        """The worksheet as CSV, the server side content not the local one"""
        return self._session.request("GET", self.csv_export_url).content.decode('utf-8')

    def export_as_file(self, path: Path|str) -> None:
        """Exports the worksheet as a CSV file"""
        response = self._session.request("GET", self.csv_export_url)
        with open(path, 'wb') as f:
            f.write(response.content)

    def _check_rows(self, row: int, num: int, limit: int) -> None:
        if row < 1 or num < 0 or row + num - 1 > limit:
            raise OutOfRange(f"The row number is out of range: {row}+{num} with {self.max_rows} rows")

    def _check_cols(self, col: int, num: int, limit: int) -> None:
        if col < 1 or num < 0 or col + num - 1 > limit:
            raise OutOfRange(f"The column number is out of range: {col}+{num} with {self.max_cols} columns")

    def insert_rows(self, row: int, rows: int|list[list]) -> None:
        """
        Inserts rows before row, shifting what was there down.
            ws.insert_rows(2, 3)                      # 3 empty rows
            ws.insert_rows(2, [["a", "b"], ["c"]])    # 2 rows with values
        The cells are rewritten locally so this is sent as values on save().
        """
        new_rows = [[] for _ in range(rows)] if isinstance(rows, int) else [list(r) for r in rows]
        store = self.cells
        # inserting right after the last row is fine
        self._check_rows(row, 1, store.max_rows + 1)
        n = len(new_rows)
        if n == 0:
            return
        nr, nc = store.num_rows, store.num_cols
        self.max_rows = store.max_rows + n
        for r in range(nr, row - 1, -1):
            for c in range(1, nc + 1):
                store.set(r + n, c, store.get_input(r, c))
        for i, values in enumerate(new_rows):
            for c in range(max(len(values), nc)):
                store.set(row + i, c + 1, values[c] if c < len(values) else "")

    def delete_rows(self, row: int, num: int) -> None:
        """Deletes num rows starting at row, shifting what's below up"""
        store = self.cells
        self._check_rows(row, num, store.max_rows)
        if num == 0:
            return
        nr, nc = store.num_rows, store.num_cols
        for r in range(row, min(store.max_rows - num, nr) + 1):
            for c in range(1, nc + 1):
                store.set(r, c, store.get_input(r + num, c))
        self.max_rows = store.max_rows - num

    def insert_cols(self, col: int, cols: int|list[list]) -> None:
        """
        Inserts columns before col, shifting what was there right.
        A list gives the new columns' values, one inner list per column.
        """
        new_cols = [[] for _ in range(cols)] if isinstance(cols, int) else [list(c) for c in cols]
        store = self.cells
        self._check_cols(col, 1, store.max_cols + 1)
        n = len(new_cols)
        if n == 0:
            return
        nr, nc = store.num_rows, store.num_cols
        self.max_cols = store.max_cols + n
        for c in range(nc, col - 1, -1):
            for r in range(1, nr + 1):
                store.set(r, c + n, store.get_input(r, c))
        for i, values in enumerate(new_cols):
            for r in range(max(len(values), nr)):
                store.set(r + 1, col + i, values[r] if r < len(values) else "")

    def delete_cols(self, col: int, num: int) -> None:
        """Deletes num columns starting at col, shifting what's right of them left"""
        store = self.cells
        self._check_cols(col, num, store.max_cols)
        if num == 0:
            return
        nr, nc = store.num_rows, store.num_cols
        for c in range(col, min(store.max_cols - num, nc) + 1):
            for r in range(1, nr + 1):
                store.set(r, c, store.get_input(r, c + num))
        self.max_cols = store.max_cols - num

    def add_request(self, request: GoogleSheetsUpdateRequestBase|dict) -> None:
        """
        Queue a raw batchUpdate request for the next save()
            ws.add_request({"autoResizeDimensions": {"dimensions": {...}}})
        """
        self._requests.append(request)

    def _range(self, row: int, col: int, num_rows: int, num_cols: int) -> GridRange:
        parse_cell_args((row, col))
        if num_rows < 1 or num_cols < 1:
            raise OutOfRange(f"Range size must be at least 1x1, not {num_rows}x{num_cols}")
        return GridRange.from_cells(self.sheet_id, row, col, num_rows, num_cols)

    def set_number_format(self, row: int, col: int, num_rows: int, num_cols: int,
                          pattern: str, type: str = "NUMBER") -> None:
        """
        Changes the number format of a block of cells, see
        https://developers.google.com/sheets/api/guides/formats for the patterns.
            ws.set_number_format(1, 1, 2, 2, "#,##0.00")
            ws.set_number_format(1, 3, 10, 1, "yyyy-mm-dd", type="DATE")
        """
        nf = NumberFormat(type, pattern)
        self.add_request(RepeatCellRequest(self._range(row, col, num_rows, num_cols),
                                           {'userEnteredFormat': {'numberFormat': nf.to_base()}},
                                           "userEnteredFormat.numberFormat"))

    def set_text_format(self, row: int, col: int, num_rows: int, num_cols: int,
                        bold: bool|None = None, italic: bool|None = None,
                        strikethrough: bool|None = None, underline: bool|None = None,
                        font_family: str|None = None, font_size: int|None = None,
                        foreground_color: Color|dict|None = None) -> None:
        """Changes the text format of a block of cells, only the arguments given are changed"""
        tf = TextFormat(foregroundColor=foreground_color, fontFamily=font_family, fontSize=font_size,
                        bold=bold, italic=italic, strikethrough=strikethrough, underline=underline)
        mask = tf.field_mask()
        if not mask:
            return
        fields = ",".join(f"userEnteredFormat.textFormat.{f}" for f in mask.split(","))
        self.add_request(RepeatCellRequest(self._range(row, col, num_rows, num_cols),
                                           {'userEnteredFormat': {'textFormat': tf.to_base()}},
                                           fields))

    def set_background_color(self, row: int, col: int, num_rows: int, num_cols: int,
                             color: Color|dict) -> None:
        """
        Changes the background color of a block of cells
            ws.set_background_color(1, 1, 1, 5, Color(red=1, green=0.9, blue=0.9))
        """
        c = color if isinstance(color, Color) else Color(**dict(color))
        self.add_request(RepeatCellRequest(self._range(row, col, num_rows, num_cols),
                                           {'userEnteredFormat': {'backgroundColor': c.to_base()}},
                                           "userEnteredFormat.backgroundColor"))

    def set_borders(self, row: int, col: int, num_rows: int, num_cols: int,
                    borders: dict[str,Border|dict]) -> None:
        """
        Changes the borders of a block of cells, borders maps the side
        (top, bottom, left, right, innerHorizontal, innerVertical) to a Border
            ws.set_borders(1, 1, 3, 3, {"top": Border("SOLID"), "bottom": {"style": "DOUBLE"}})
        """
        sides = {}
        for side, border in borders.items():
            if side not in _BORDER_SIDES:
                raise ValueError(f"Invalid border side: {side}, must be one of {_BORDER_SIDES}")
            sides[side] = border if isinstance(border, Border) else Border(**dict(border))
        self.add_request(UpdateBordersRequest(self._range(row, col, num_rows, num_cols), **sides))

    def merge_cells(self, row: int, col: int, num_rows: int, num_cols: int,
                    merge_type: str = "MERGE_ALL") -> None:
        self.add_request(MergeCellsRequest(self._range(row, col, num_rows, num_cols), merge_type))

    @property
    def list(self):
        """
        The worksheet as a list of records keyed by the header row
            ws.list[0]["name"]
            ws.list.push({"name": "bob", "age": "30"})
        """
        if self._list is None:
            from .records import GoogleSheetsRecordList
            self._list = GoogleSheetsRecordList(self)
        return self._list
