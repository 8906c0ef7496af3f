from dataclasses import dataclass, field
from typing import List
import re

from ..resources import GoogleWorkSpaceResourceBase, prune
from .resources import *

class GoogleSheetsUpdateRequestBase(GoogleWorkSpaceResourceBase):
    """
    Base class for sheet batchUpdate requests to get the actual
    request dict into the right format.
    """
    def to_request(self) -> dict[str,dict]:
        name = self.__class__.__name__
        # need to strip off the trailing 'Request' class name and
        # set the first letter to lower case.  could be done
        # several ways but lets go re
        request = {}
        m = re.match("^([a-zA-Z])([a-zA-Z]+)Request$", name)
        if m:
            key = m.group(1).lower() + m.group(2)
            request[key] = prune(self.to_base())
        else:
            raise RuntimeError("Invalid Google Sheets request format for class name")

        return request

# need to add request here and pull the name out via self.__class__.__name__

@dataclass
class UpdateSheetPropertiesRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#updatesheetpropertiesrequest
    fields is the mask of what to touch, '*' would also reset everything not supplied
    so keep it to what the worksheet tracks.
    """
    properties: SheetProperties|dict
    fields: str = field(default="title,index,gridProperties(rowCount,columnCount)")

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.properties = SheetProperties.from_response(self.properties)

    def to_base(self) -> dict:
        self.fixup()
        p = self.properties
        props = {'sheetId': p.sheetId, 'title': p.title, 'index': p.index,
                 'gridProperties': {'rowCount': p.gridProperties.rowCount,
                                    'columnCount': p.gridProperties.columnCount}}
        return {'properties': props, 'fields': self.fields}

@dataclass
class AddSheetRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#addsheetrequest
    """
    title: str
    rowCount: int = field(default=100)
    columnCount: int = field(default=20)
    index: int|None = field(default=None)

    def to_base(self) -> dict:
        props = {'title': self.title, 'index': self.index,
                 'gridProperties': {'rowCount': self.rowCount, 'columnCount': self.columnCount}}
        return {'properties': props}

@dataclass
class DeleteSheetRequest(GoogleSheetsUpdateRequestBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#deletesheetrequest"""
    sheetId: int

@dataclass
class RepeatCellRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#repeatcellrequest
    Apply the same userEnteredFormat to every cell in a range, this is how the
    number format/text format/background color setters are sent.
    """
    range: GridRange
    cell: dict
    fields: str

    def to_base(self) -> dict:
        return {'range': self.range.to_base(), 'cell': self.cell, 'fields': self.fields}

@dataclass
class UpdateBordersRequest(GoogleSheetsUpdateRequestBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#updatebordersrequest"""
    range: GridRange
    top: Border|None = field(default=None)
    bottom: Border|None = field(default=None)
    left: Border|None = field(default=None)
    right: Border|None = field(default=None)
    innerHorizontal: Border|None = field(default=None)
    innerVertical: Border|None = field(default=None)

@dataclass
class MergeCellsRequest(GoogleSheetsUpdateRequestBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#mergecellsrequest"""
    range: GridRange
    mergeType: str = field(default="MERGE_ALL")

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        m = GoogleSheetsEnum.mergeType(self.mergeType)
        if not m:
            raise ValueError(f"Invalid merge type: {self.mergeType}")
        self.mergeType = m

@dataclass
class GoogleSheetsUpdateRequest(GoogleWorkSpaceResourceBase):
    """
    Generate a GSheet Batch Update request body.
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate#request-body
    requests can be a mix of request classes and raw dicts.
    """
    requests: List[GoogleSheetsUpdateRequestBase|dict]
    includeSpreadsheetInResponse: bool = field(default=False)
    responseRanges: List[str] = field(default_factory=list)
    responseIncludeGridData: bool = field(default=False)

    def to_base(self) -> dict:
        return {
            'requests': [r.to_request() if isinstance(r, GoogleSheetsUpdateRequestBase) else r
                         for r in self.requests],
            'includeSpreadsheetInResponse': self.includeSpreadsheetInResponse,
            'responseRanges': list(self.responseRanges),
            'responseIncludeGridData': self.responseIncludeGridData
        }

@dataclass
class GoogleSheetsUpdateRequestResponse(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate#response-body
    """
    spreadsheetId: str = field(default="")
    replies: List[dict] = field(default_factory=list)
    updatedSpreadsheet: Spreadsheet|dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fixup()

    def __bool__(self) -> bool:
        return bool(self.spreadsheetId)

    def fixup(self) -> None:
        self.updatedSpreadsheet = Spreadsheet.from_response(self.updatedSpreadsheet)

@dataclass
class UpdateValuesRequestResponse(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/batchUpdate#response-body
    """
    spreadsheetId: str = field(default="")
    totalUpdatedRows: int = field(default=0)
    totalUpdatedColumns: int = field(default=0)
    totalUpdatedCells: int = field(default=0)
    totalUpdatedSheets: int = field(default=0)
    responses: list[UpdateValuesResponse|dict] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.fixup()

    def __bool__(self) -> bool:
        """Response is valid if an ID came back"""
        return bool(self.spreadsheetId)

    def fixup(self) -> None:
        self.responses = [UpdateValuesResponse.from_response(r) for r in self.responses]
