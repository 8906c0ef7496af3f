"""
Class implementations of sheets request resources.
As these are just logical groupings of data fields we use dataclasses
to implement.  The nested aspect does cause some headaches as there
is a handy dataclass.asdict() method to get a dict translation of the
class fields, which is exactly what that request client needs, but
there's no inverse support, as in initializing a dataclass from a dict.
So for dataclasses with dataclasses as fields we fix them up in __post_init__.
Not all resources/requests/responses are implemented.
"""
from dataclasses import dataclass, field, asdict
from typing import List,ClassVar

from ..resources import GoogleWorkSpaceResourceBase

class GoogleSheetsEnum():
    """
    An 'enum' in the sheets client is just a string so this is
    just to translate and validate input.
    """
    _VALID_DIMENSION_OPTIONS = {
        "ROWS": "ROWS",
        "R": "ROWS",
        "C": "COLUMNS",
        "COLS": "COLUMNS",
        "COLUMNS": "COLUMNS"
    }
    _VALID_VALUE_INPUT_OPTIONS = {
        "RAW": "RAW",
        "USER": "USER_ENTERED",
        "USER_ENTERED": "USER_ENTERED"
    }
    _VALID_MERGE_TYPES = {
        "ALL": "MERGE_ALL",
        "MERGE_ALL": "MERGE_ALL",
        "COLUMNS": "MERGE_COLUMNS",
        "MERGE_COLUMNS": "MERGE_COLUMNS",
        "ROWS": "MERGE_ROWS",
        "MERGE_ROWS": "MERGE_ROWS"
    }
    _VALID_BORDER_STYLES = ["DOTTED", "DASHED", "SOLID", "SOLID_MEDIUM",
                            "SOLID_THICK", "NONE", "DOUBLE"]

    @classmethod
    def dimension(cls, dim: str) -> str:
        """https://developers.google.com/sheets/api/reference/rest/v4/Dimension"""
        return cls._VALID_DIMENSION_OPTIONS.get(str(dim), "")

    @classmethod
    def valueInputOption(cls, option: str) -> str:
        """https://developers.google.com/sheets/api/reference/rest/v4/ValueInputOption"""
        return cls._VALID_VALUE_INPUT_OPTIONS.get(str(option).upper(), "")

    @classmethod
    def mergeType(cls, option: str) -> str:
        """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#mergetype"""
        return cls._VALID_MERGE_TYPES.get(str(option).upper(), "")

    @classmethod
    def borderStyle(cls, option: str) -> str:
        """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/cells#style"""
        s = str(option).upper()
        return s if s in cls._VALID_BORDER_STYLES else ""

@dataclass
class NumberFormat(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/cells#numberformat
    """
    type: str = field(default="")
    pattern: str = field(default="")

    valid_values: ClassVar[List[str]] = ['TEXT', 'NUMBER', 'PERCENT',
                                         'CURRENCY', 'DATE', 'TIME',
                                         'DATE_TIME', 'SCIENTIFIC']

    def __post_init__(self):
        self.fixup()

    def __bool__(self) -> bool:
        return bool(self.type) and self.type in self.valid_values

    def fixup(self) -> None:
        if self.type:
            self.type = self.type if isinstance(self.type,str) else str(self.type)
            if self.type not in self.valid_values:
                t = str(self.type).upper()
                if t in self.valid_values:
                    self.type = t
                else:
                    raise ValueError('Invalid number format type: ' + t)

@dataclass
class Color(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/other#color
    Components are floats in [0,1].
    """
    red: int|float = field(default=0)
    green: int|float = field(default=0)
    blue: int|float = field(default=0)
    alpha: int|float = field(default=1)

@dataclass
class TextFormat(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/other#textformat
    None means 'leave as is', only set fields end up in a request.
    """
    foregroundColor: Color|dict|None = field(default=None)
    fontFamily: str|None = field(default=None)
    fontSize: int|None = field(default=None)
    bold: bool|None = field(default=None)
    italic: bool|None = field(default=None)
    strikethrough: bool|None = field(default=None)
    underline: bool|None = field(default=None)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        if self.foregroundColor is not None and not isinstance(self.foregroundColor, Color):
            self.foregroundColor = Color(**dict(self.foregroundColor))

    def field_mask(self) -> str:
        """Comma list of the fields that are set, for the request 'fields' mask"""
        return ",".join(k for k,v in self.__dict__.items() if v is not None)

@dataclass
class Border(GoogleWorkSpaceResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/cells#border"""
    style: str = field(default="SOLID")
    width: int|None = field(default=None)
    color: Color|dict|None = field(default=None)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        s = GoogleSheetsEnum.borderStyle(self.style)
        if not s:
            raise ValueError(f"Invalid border style: {self.style}")
        self.style = s
        if self.color is not None and not isinstance(self.color, Color):
            self.color = Color(**dict(self.color))

@dataclass
class SpreadsheetProperties(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets#SpreadsheetProperties
    """
    title: str = field(default="")
    locale: str = field(default="")
    autoRecalc: str = field(default="")
    timeZone: str = field(default="")
    defaultFormat: dict = field(default_factory=dict)
    iterativeCalculationSettings: dict = field(default_factory=dict)
    spreadsheetTheme: dict = field(default_factory=dict)
    importFunctionsExternalUrlAccessAllowed: bool = field(default=False)

    def __bool__(self) -> bool:
        return bool(self.title)

@dataclass
class GridProperties(GoogleWorkSpaceResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#gridproperties"""
    rowCount: int = field(default=-1)
    columnCount: int = field(default=-1)
    frozenRowCount: int = field(default=0)
    frozenColumnCount: int = field(default=0)
    hideGridlines: bool = field(default=False)
    rowGroupControlAfter: bool = field(default=False)
    columnGroupControlAfter: bool = field(default=False)

    def __bool__(self) -> bool:
        return self.rowCount >= 0 and self.columnCount >= 0

@dataclass
class SheetProperties(GoogleWorkSpaceResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#sheetproperties"""
    sheetId: int = field(default=-1)
    title: str = field(default="")
    index: int = field(default=-1)
    sheetType: str = field(default="")
    gridProperties: GridProperties|dict = field(default_factory=dict)
    hidden: bool = field(default=False)
    tabColor: dict = field(default_factory=dict)
    tabColorStyle: dict = field(default_factory=dict)
    rightToLeft: bool = field(default=False)
    dataSourceSheetProperties: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.gridProperties = GridProperties.from_response(self.gridProperties)

    def to_base(self) -> dict:
        self.fixup()
        b = asdict(self)
        b['gridProperties'] = self.gridProperties.to_base()
        return b

    def __bool__(self) -> bool:
        """
        True if it is valid, which is the ID and index are 0 or positive
        as negative index is not possible
        """
        return self.sheetId >= 0 and self.index >= 0 and bool(self.title)

    def __str__(self) -> str:
        val = ""
        if self:
            val = f"{str(self.title)}({str(self.sheetId)}[{str(self.index)}]):{str(self.sheetType)}"
            if self.is_grid():
                val += f"({self.gridProperties.rowCount}Rx{self.gridProperties.columnCount}C)"
        else:
            val = "<invalid sheet>"
        return val

    def is_grid(self) -> bool:
        """
        A GRID sheet is the traditional range of cells and is normally
        what you want to work with.
        """
        return self.sheetType == 'GRID'

@dataclass
class GridData(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#griddata
    rowData is left as raw dicts, RowData -> values -> CellData, the worksheet
    only ever walks it once on reload.
    """
    startRow: int = field(default=0)
    startColumn: int = field(default=0)
    rowData: List[dict] = field(default_factory=list)
    rowMetadata: List[dict] = field(default_factory=list)
    columnMetadata: List[dict] = field(default_factory=list)

    def cells(self):
        """
        Yield (row, col, CellData dict) for every cell present, 1-based
        coordinates.  Rows/cells the API left out are simply skipped.
        """
        for r, row in enumerate(self.rowData):
            for c, cell in enumerate((row or {}).get('values', [])):
                if cell:
                    yield (self.startRow + r + 1, self.startColumn + c + 1, cell)

@dataclass
class GridRange(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/other#gridrange
    Indexes are 0-based and half open, [start, end).
    """
    sheetId: int = field(default=-1)
    startRowIndex: int|None = field(default=None)
    endRowIndex: int|None = field(default=None)
    startColumnIndex: int|None = field(default=None)
    endColumnIndex: int|None = field(default=None)

    @classmethod
    def from_cells(cls, sheetId: int, row: int, col: int,
                   num_rows: int = 1, num_cols: int = 1):
        """Build from 1-based worksheet coordinates plus a size"""
        return cls(sheetId, row - 1, row - 1 + num_rows, col - 1, col - 1 + num_cols)

    def __bool__(self) -> bool:
        return self.sheetId >= 0

@dataclass
class ValueRange(GoogleWorkSpaceResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values#resource:-valuerange"""
    range: str = field(default="")
    majorDimension: str = field(default="")
    values: list[list[bool|str|float|None]] = field(default_factory=list)

    def __post_init__(self):
        self.fixup()

    def fixup(self) -> None:
        if self.majorDimension:
            self.majorDimension = GoogleSheetsEnum.dimension(str(self.majorDimension))

    def __bool__(self) -> bool:
        """
        A ValueRange is valid if the range string is not empty
        and the majorDimension has a valid value.
        """
        return bool(self.range) and bool(self.majorDimension)

@dataclass
class UpdateValuesResponse(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/UpdateValuesResponse
    """
    spreadsheetId: str = field(default="")
    updatedRange: str = field(default="")
    updatedRows: int = field(default=0)
    updatedColumns: int = field(default=0)
    updatedCells: int = field(default=0)
    updatedData: ValueRange|dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.updatedData = ValueRange.from_response(self.updatedData)

    def __bool__(self) -> bool:
        return bool(self.spreadsheetId) and bool(self.updatedRange)

@dataclass
class Sheet(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#sheet
    Representation of a sheet within a spreadsheet
    """
    properties: SheetProperties|dict = field(default_factory=dict)
    data: List[GridData|dict] = field(default_factory=list)
    merges: List[GridRange|dict] = field(default_factory=list)
    conditionalFormats: List[dict] = field(default_factory=list)
    filterViews: List[dict] = field(default_factory=list)
    protectedRanges: List[dict] = field(default_factory=list)
    basicFilter: dict = field(default_factory=dict)
    charts: List[dict] = field(default_factory=list)
    bandedRanges: List[dict] = field(default_factory=list)
    developerMetadata: List[dict] = field(default_factory=list)
    rowGroups: List[dict] = field(default_factory=list)
    columnGroups: List[dict] = field(default_factory=list)
    slicers: List[dict] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.properties = SheetProperties.from_response(self.properties)
        self.data = [GridData.from_response(gd) for gd in self.data]
        self.merges = [GridRange.from_response(gr) for gr in self.merges]

    def __bool__(self) -> bool:
        return bool(self.properties)

    def __str__(self) -> str:
        return str(self.properties)

@dataclass
class Spreadsheet(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets#resource:-spreadsheet
    The representation of a spreadsheet.
    """
    spreadsheetId: str = field(default="")
    properties: SpreadsheetProperties|dict = field(default_factory=dict)
    sheets: List[Sheet|dict] = field(default_factory=list)
    namedRanges: List[dict] = field(default_factory=list)
    spreadsheetUrl: str = field(default="")
    developerMetadata: List[dict] = field(default_factory=list)
    dataSources: List[dict] = field(default_factory=list)
    dataSourceSchedules: List[dict] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.properties = SpreadsheetProperties.from_response(self.properties)
        self.sheets = [Sheet.from_response(s) for s in self.sheets]

    def __bool__(self) -> bool:
        return bool(self.spreadsheetId)

    def __str__(self) -> str:
        val = 'unconnected'
        if self.spreadsheetId:
            if self.sheets:
                val = self.properties.title
                val += '[' + ','.join(str(s) for s in self.sheets) + ']'
            else:
                val = f"{self.spreadsheetId}(unconnected)"
        return val

def extract_value(value: dict|None) -> str|None:
    """
    Flatten an ExtendedValue into the string a user would have typed.
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/other#ExtendedValue
    Whole numbers come back from the API as floats, show them without the '.0'
    """
    if not value:
        return None
    if 'formulaValue' in value:
        return str(value['formulaValue'])
    if 'stringValue' in value:
        return str(value['stringValue'])
    if 'numberValue' in value:
        n = value['numberValue']
        if isinstance(n, float) and n.is_integer():
            return str(int(n))
        return str(n)
    if 'boolValue' in value:
        return 'TRUE' if value['boolValue'] else 'FALSE'
    if 'errorValue' in value:
        return str(value['errorValue'].get('message', ''))
    return None
