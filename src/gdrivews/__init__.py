"""
Object oriented access to Google Drive and Google Sheets on top of the
Google API Python client.
The goal is to simplify the more tedious aspects like authentication, cell
addressing, batching cell writes and building search queries.

Python dataclasses are used for the raw resource structs and most of the logic is
translating between those and the raw dicts.  Behaviour lives in wrapper classes
that all talk to the APIs through a GoogleDriveSession.

    session = GoogleDriveSession.from_config("config.json")
    ws = session.spreadsheet_by_key("...").worksheets()[0]
    ws["A1"] = "hello"
    ws.save()
"""
from .errors import (GoogleDriveError, InvalidAddress, InvalidCellValue, UnknownColumn,
                     OutOfRange, RemoteRequestFailed, AuthenticationFailed)
from .access import GoogleDriveAccess
from .session import GoogleDriveSession
from .drive import GoogleDriveFile, GoogleDriveCollection, GoogleDriveAcl, GoogleDriveAclEntry
from .sheets import (GoogleSpreadsheet, GoogleWorksheet, GoogleSheetsRecordList,
                     GoogleSheetsRecord, GoogleSheetsCellStore)
