"""
Spreadsheets, worksheets and their cells.
A worksheet keeps a local copy of its cells, writes are batched until save().
"""

# can address up to 'ZZZ'
GoogleSheetsMaxColumns = 18278
# current cell limit in a single spreadsheet
# this can be any R and C dimensions as long as RxC <= 10000000
# the row limit is anywhere between 1-10000000 depending on the number of columns
GoogleSheetsMaxCells = 10000000

# the constants above have to be defined first, a1 imports them
from .a1 import name_to_coords, coords_to_name, col_to_int, int_to_col
from .cells import GoogleSheetsCellStore
from .worksheet import GoogleWorksheet
from .records import GoogleSheetsRecordList, GoogleSheetsRecord
from .spreadsheet import GoogleSpreadsheet
