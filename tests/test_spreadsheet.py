import pytest

from gdrivews.errors import GoogleDriveError
from gdrivews.sheets.spreadsheet import GoogleSpreadsheet
from gdrivews.sheets.requests import DeleteSheetRequest

from fakes import make_session, spreadsheet_file, sheet_properties

def sheets_response(*props) -> dict:
    return {"spreadsheetId": "key1", "sheets": [{"properties": p} for p in props]}

def test_worksheets_in_tab_order():
    session, service = make_session({"spreadsheets.get": sheets_response(
        sheet_properties("Second", 5, 1), sheet_properties("First", 0, 0), sheet_properties("Third", 9, 2))})
    ss = GoogleSpreadsheet(session, spreadsheet_file())
    assert([ws.title for ws in ss.worksheets()] == ["First", "Second", "Third"])
    assert(service.called("spreadsheets.get")[0]["fields"] == "spreadsheetId,sheets.properties")
    assert(service.called("spreadsheets.get")[0]["includeGridData"] is False)
    assert(ss.worksheet_by_title("Third").sheet_id == 9)
    assert(ss.worksheet_by_gid("5").title == "Second")
    assert(ss.worksheet_by_index(0).title == "First")
    assert(ss.worksheet_by_title("Nope") is None)
    assert("Second" in ss)
    assert(9 in ss)
    assert(len(ss) == 3)

def test_add_worksheet():
    reply = {"spreadsheetId": "key1",
             "replies": [{"addSheet": {"properties": sheet_properties("New", 42, 3, 50, 4)}}]}
    session, service = make_session({"spreadsheets.batchUpdate": reply})
    ss = GoogleSpreadsheet(session, spreadsheet_file())
    ws = ss.add_worksheet("New", max_rows=50, max_cols=4)
    assert(ws.sheet_id == 42)
    assert(ws.max_rows == 50)
    assert(ws.max_cols == 4)
    req = service.called("spreadsheets.batchUpdate")[0]["body"]["requests"][0]
    props = req["addSheet"]["properties"]
    assert(props["title"] == "New")
    assert(props["gridProperties"] == {"rowCount": 50, "columnCount": 4})
    assert("index" not in props)

    session, service = make_session({"spreadsheets.batchUpdate": {"spreadsheetId": "key1", "replies": [{}]}})
    ss = GoogleSpreadsheet(session, spreadsheet_file())
    with pytest.raises(GoogleDriveError):
        ss.add_worksheet("New")

def test_batch_update_mixes_requests():
    session, service = make_session({"spreadsheets.batchUpdate": {"spreadsheetId": "key1", "replies": [{}, {}]}})
    ss = GoogleSpreadsheet(session, spreadsheet_file())
    replies = ss.batch_update([DeleteSheetRequest(3), {"deleteSheet": {"sheetId": 4}}])
    assert(replies == [{}, {}])
    reqs = service.called("spreadsheets.batchUpdate")[0]["body"]["requests"]
    assert(reqs == [{"deleteSheet": {"sheetId": 3}}, {"deleteSheet": {"sheetId": 4}}])
