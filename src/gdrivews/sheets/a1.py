"""
Cell address handling for Google Sheets.
See https://developers.google.com/sheets/api/guides/concepts#cell
Only the pieces the worksheet actually needs live here: turning a cell name
like 'AB12' into 1-based (row, col) coordinates and back, and building the
R1C1 range references sent when pushing a block of cells.

Columns are bijective base 26, there is no zero digit:
    A = 1, Z = 26, AA = 27, AZ = 52, BA = 53, ZZZ = 18278
"""
import re

from . import GoogleSheetsMaxColumns
from ..errors import InvalidAddress

_CELL_NAME_RE = re.compile(r"([A-Za-z]+)([0-9]+)", re.ASCII)
_COL_RE = re.compile(r"[A-Za-z]+", re.ASCII)

def col_to_int(column: str) -> int:
    """
    Convert column letters to the 1-based column index.
    'A' -> 1, 'AA' -> 27.  Lower case is accepted.
    A return value of 0 means the letters were not valid.
    """
    c = str(column)
    num = 0
    if _COL_RE.fullmatch(c):
        for ch in c.upper():
            num = num * 26 + (ord(ch) - 64)
    return num

def int_to_col(index: int) -> str:
    """
    Translate a 1-based column index to its letters, 1 -> 'A', 28 -> 'AB'.
    An empty string signals an invalid index.
    """
    i = int(index)
    if i < 1 or i > GoogleSheetsMaxColumns:
        return ""
    col = ""
    while i:
        i, r = divmod(i - 1, 26)
        col = chr(r + 65) + col
    return col

def name_to_coords(name: str) -> tuple[int,int]:
    """
    Returns a (row, col) pair for a cell name string.
        name_to_coords("C2") -> (2, 3)
    Raises InvalidAddress for anything that isn't letters followed by digits,
    including absolute markers like '$A$1' and a row of 0.
    """
    if not isinstance(name, str):
        raise InvalidAddress(name, "cell name must be a string")
    m = _CELL_NAME_RE.fullmatch(name)
    if not m:
        raise InvalidAddress(name, "must be only letters followed by digits with no spaces in between")
    row = int(m.group(2))
    if row < 1:
        raise InvalidAddress(name, "row must be >= 1")
    return (row, col_to_int(m.group(1)))

def coords_to_name(row: int, col: int) -> str:
    """(2, 3) -> 'C2'"""
    if row < 1 or col < 1:
        raise InvalidAddress((row, col), "row/col must be >= 1 (1-origin)")
    letters = int_to_col(col)
    if not letters:
        raise InvalidAddress((row, col), "column out of range")
    return f"{letters}{row}"

def parse_cell_args(args: tuple) -> tuple[int,int]:
    """
    Normalize the two ways of addressing a cell, either a single cell
    name string or a (row, col) integer pair.
    """
    if len(args) == 1 and isinstance(args[0], tuple):
        args = args[0]
    if len(args) == 1 and isinstance(args[0], str):
        return name_to_coords(args[0])
    if len(args) == 2 and all(isinstance(a, int) and not isinstance(a, bool) for a in args):
        row, col = args
        if row >= 1 and col >= 1:
            return (row, col)
        raise InvalidAddress(args, f"row/col must be >= 1 (1-origin), but are {row}/{col}")
    raise InvalidAddress(args, "arguments must be either one string or two integers")

def quote_sheet_title(title: str) -> str:
    """
    Sheet titles in a range are single quoted with any embedded
    single quote doubled, so "Bob's" becomes "'Bob''s'"
    """
    t = str(title).replace("'", "''")
    return f"'{t}'"

def r1c1_range(title: str, min_row: int, min_col: int, max_row: int, max_col: int) -> str:
    """
    Range reference for a rectangle of cells on a sheet, 1-based and inclusive:
        'Sheet1'!R1C1:R3C4
    """
    return f"{quote_sheet_title(title)}!R{min_row}C{min_col}:R{max_row}C{max_col}"
