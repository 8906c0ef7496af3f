import logging

from . import ops
from .requests import GoogleSheetsUpdateRequestBase, GoogleSheetsUpdateRequest, AddSheetRequest
from .worksheet import GoogleWorksheet
from ..drive.file import GoogleDriveFile
from ..errors import GoogleDriveError

logger = logging.getLogger(__name__)

class GoogleSpreadsheet(GoogleDriveFile):
    """
    A spreadsheet, a Drive file holding one or more worksheets.
    Use GoogleDriveSession.spreadsheet_by_key(), spreadsheet_by_title() etc. to get one.
    """
    def __len__(self) -> int:
        """
        In this context length is the number of worksheets, which needs a fetch.
        """
        return len(self.worksheets())

    def __contains__(self, val: str|int) -> bool:
        """
        Is the worksheet in this spreadsheet?
        val can be either a string (title) or int (sheet ID)
        """
        if isinstance(val, int):
            return self.worksheet_by_sheet_id(val) is not None
        return self.worksheet_by_title(val) is not None

    @property
    def key(self) -> str:
        """Key of the spreadsheet, the same as its file ID"""
        return self.id

    def properties(self):
        """SpreadsheetProperties (locale, time zone etc.), fetched each call"""
        return ops.get(self._session, self.key, fields="spreadsheetId,properties").properties

    def worksheets(self) -> list[GoogleWorksheet]:
        """
        Returns the worksheets in tab order, fetched each call.
        Worksheet cells are loaded on first access.
        """
        ss = ops.get(self._session, self.key, fields="spreadsheetId,sheets.properties")
        sheets = sorted(ss.sheets, key=lambda s: s.properties.index)
        return [GoogleWorksheet(self._session, self, s.properties) for s in sheets]

    def worksheet_by_title(self, title: str) -> GoogleWorksheet|None:
        """The worksheet with the title, None if there isn't one"""
        return next((ws for ws in self.worksheets() if ws.title == title), None)

    def worksheet_by_sheet_id(self, sheet_id: int|str) -> GoogleWorksheet|None:
        """The worksheet with the sheet ID (the gid in its URL), None if there isn't one"""
        sid = int(sheet_id)
        return next((ws for ws in self.worksheets() if ws.sheet_id == sid), None)

    worksheet_by_gid = worksheet_by_sheet_id

    def worksheet_by_index(self, index: int) -> GoogleWorksheet|None:
        """The worksheet at the tab position, 0 being the first"""
        return next((ws for ws in self.worksheets() if ws.index == index), None)

    def batch_update(self, requests: list[GoogleSheetsUpdateRequestBase|dict]) -> list[dict]:
        """
        Sends batchUpdate requests right away, returns the replies.
        Requests can be request classes or raw dicts, see
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request
        """
        response = ops.batchUpdate(self._session, self.key, GoogleSheetsUpdateRequest(list(requests)))
        return response.replies

    def add_worksheet(self, title: str, max_rows: int = 100, max_cols: int = 20,
                      index: int|None = None) -> GoogleWorksheet:
        """Adds a new worksheet, right away, and returns it"""
        replies = self.batch_update([AddSheetRequest(str(title), int(max_rows), int(max_cols), index)])
        if not replies or 'addSheet' not in (replies[0] or {}):
            raise GoogleDriveError(f"No addSheet reply adding worksheet {title!r} to {self.key}")
        logger.debug("added worksheet %s to %s", title, self.key)
        return GoogleWorksheet(self._session, self, replies[0]['addSheet']['properties'])

    def duplicate(self, title: str|None = None) -> "GoogleSpreadsheet":
        """Copy of the whole spreadsheet, default title 'Copy of <title>'"""
        return self.copy(title or f"Copy of {self.title}")

    def download_to_io(self, out) -> None:
        raise GoogleDriveError("Downloading a spreadsheet is not supported. "
                               "Use export_as_file, export_as_string or export_to_io instead, e.g. "
                               "spreadsheet.export_as_file('/path/to/hoge.xlsx')")
