
import pytest

from gdrivews.errors import AuthenticationFailed, RemoteRequestFailed, GoogleDriveError
from gdrivews.drive.file import GoogleDriveFile
from gdrivews.drive.collection import GoogleDriveCollection
from gdrivews.sheets.spreadsheet import GoogleSpreadsheet
from gdrivews.session import GoogleDriveSession, id_from_url

from fakes import make_session, http_error, spreadsheet_file, FakeHttp, FakeResponse

FOLDER = "application/vnd.google-apps.folder"

def test_auth_retry_then_fail():
    answers = [True, False]
    hook_calls = []
    def on_auth_fail():
        hook_calls.append(1)
        return answers.pop(0)

    session, service = make_session({"files.get": http_error(401)}, on_auth_fail=on_auth_fail)
    with pytest.raises(AuthenticationFailed) as e:
        session.file_by_id("abc")
    assert(len(service.called("files.get")) == 2)
    assert(len(hook_calls) == 2)
    assert(e.value.status == 401)
    assert(isinstance(e.value, RemoteRequestFailed))
    assert(e.value.__cause__ is not None)

def test_auth_retry_succeeds():
    session, service = make_session({"files.get": [http_error(401), spreadsheet_file("abc")]},
                                    on_auth_fail=lambda: True)
    f = session.file_by_id("abc")
    assert(isinstance(f, GoogleSpreadsheet))
    assert(len(service.called("files.get")) == 2)

def test_no_hook():
    session, service = make_session({"files.get": http_error(401)})
    with pytest.raises(AuthenticationFailed):
        session.file_by_id("abc")
    assert(len(service.called("files.get")) == 1)

def test_other_errors_not_retried():
    calls = []
    session, service = make_session({"files.get": http_error(404, '{"error": {"message": "nope"}}')},
                                    on_auth_fail=lambda: calls.append(1) or True)
    with pytest.raises(RemoteRequestFailed) as e:
        session.file_by_id("abc")
    assert(not isinstance(e.value, AuthenticationFailed))
    assert(e.value.status == 404)
    assert("nope" in e.value.body)
    assert(calls == [])

def test_raw_request():
    http = FakeHttp([FakeResponse(401), FakeResponse(200, b"ok")])
    session, _ = make_session(on_auth_fail=lambda: True, http=http)
    assert(session.request("GET", "https://example.com/x").content == b"ok")
    assert(len(http.calls) == 2)

    http = FakeHttp([FakeResponse(500, b"boom")])
    session, _ = make_session(http=http)
    with pytest.raises(RemoteRequestFailed) as e:
        session.request("GET", "https://example.com/x")
    assert(e.value.status == 500)
    assert(e.value.body == "boom")
    assert(e.value.uri == "https://example.com/x")

def test_wrap_file():
    session, _ = make_session()
    assert(isinstance(session.wrap_file(spreadsheet_file()), GoogleSpreadsheet))
    folder = session.wrap_file({"id": "f1", "name": "dir", "mimeType": FOLDER})
    assert(isinstance(folder, GoogleDriveCollection))
    plain = session.wrap_file({"id": "p1", "name": "a.txt", "mimeType": "text/plain"})
    assert(type(plain) is GoogleDriveFile)
    doc = session.wrap_file({"id": "d1", "name": "doc", "mimeType": "application/vnd.google-apps.document"})
    assert(type(doc) is GoogleDriveFile)
    assert(doc.resource_type == "document")

def test_files_paging():
    pages = [{"files": [{"id": "1", "name": "a", "mimeType": "text/plain"}], "nextPageToken": "t"},
             {"files": [{"id": "2", "name": "b", "mimeType": FOLDER}]}]
    session, service = make_session({"files.list": pages})
    files = session.files()
    assert([f.id for f in files] == ["1", "2"])
    calls = service.called("files.list")
    assert(calls[0]["q"] == "trashed = false")
    assert("pageToken" not in calls[0])
    assert(calls[1]["pageToken"] == "t")

def test_file_by_title():
    session, service = make_session({"files.list": {"files": [spreadsheet_file("k", "Bob's")]}})
    f = session.file_by_title("Bob's")
    assert(f.title == "Bob's")
    assert(service.called("files.list")[0]["q"] == "name = 'Bob\\'s' and trashed = false")

    session, service = make_session({"files.list": {"files": []}})
    assert(session.file_by_title("missing") is None)
    assert(session.spreadsheet_by_title("missing") is None)

def test_file_by_title_path():
    def listing(q, **kwargs):
        if "'root' in parents" in q and "name = 'docs'" in q:
            return {"files": [{"id": "dir1", "name": "docs", "mimeType": FOLDER}]}
        if "'dir1' in parents" in q:
            return {"files": [{"id": "f9", "name": "notes", "mimeType": "text/plain"}]}
        return {"files": []}
    session, service = make_session({"files.list": listing})
    f = session.file_by_title(["docs", "notes"])
    assert(f.id == "f9")
    assert(session.file_by_title(["nowhere", "notes"]) is None)

def test_spreadsheet_by_key():
    session, _ = make_session({"files.get": spreadsheet_file("k1", "Book")})
    ss = session.spreadsheet_by_key("k1")
    assert(ss.key == "k1")
    session, _ = make_session({"files.get": {"id": "p1", "name": "a.txt", "mimeType": "text/plain"}})
    with pytest.raises(GoogleDriveError):
        session.spreadsheet_by_key("p1")

def test_urls():
    assert(id_from_url("https://docs.google.com/spreadsheets/d/1L3-kvw_JbS/edit#gid=0") == "1L3-kvw_JbS")
    assert(id_from_url("https://drive.google.com/drive/folders/0B9abc") == "0B9abc")
    assert(id_from_url("https://drive.google.com/drive/#folders/0B9abc") == "0B9abc")
    assert(id_from_url("https://drive.google.com/open?id=xyz") == "xyz")
    assert(id_from_url("https://docs.google.com/spreadsheet/ccc?key=old1&usp=sharing") == "old1")
    with pytest.raises(GoogleDriveError):
        id_from_url("https://example.com/nothing")

def test_worksheet_by_url():
    sheets = {"spreadsheetId": "k1", "sheets": [
        {"properties": {"sheetId": 0, "title": "A", "index": 0, "gridProperties": {"rowCount": 10, "columnCount": 5}}},
        {"properties": {"sheetId": 77, "title": "B", "index": 1, "gridProperties": {"rowCount": 10, "columnCount": 5}}}]}
    session, service = make_session({"files.get": spreadsheet_file("k1"), "spreadsheets.get": sheets})
    ws = session.worksheet_by_url("https://docs.google.com/spreadsheets/d/k1/edit#gid=77")
    assert(ws.title == "B")
    assert(service.called("files.get")[0]["fileId"] == "k1")
    with pytest.raises(GoogleDriveError):
        session.worksheet_by_url("https://docs.google.com/spreadsheets/d/k1/edit")

def test_create_and_upload():
    created = {"id": "new", "name": "data", "mimeType": "application/vnd.google-apps.spreadsheet"}
    session, service = make_session({"files.create": created})
    ss = session.create_spreadsheet("data")
    assert(isinstance(ss, GoogleSpreadsheet))
    assert(service.called("files.create")[0]["body"] == {"name": "data",
                                                          "mimeType": "application/vnd.google-apps.spreadsheet"})
    f = session.upload_from_string("a,b\n1,2\n", "data.csv")
    body = service.called("files.create")[1]["body"]
    assert(body["mimeType"] == "application/vnd.google-apps.spreadsheet")
    assert(body["name"] == "data.csv")
    assert(service.called("files.create")[1]["media_body"].mimetype() == "text/csv")

    session.upload_from_string("plain", "notes.csv", convert=False)
    assert("mimeType" not in service.called("files.create")[2]["body"])

def test_root_collection():
    session, _ = make_session()
    root = session.root_collection()
    assert(root.root)
    assert(root.id == "root")
    assert(session.root_collection() is root)

def test_service_unavailable():
    class NoAccess():
        def get_service(self, name, version):
            return None
    session = GoogleDriveSession(NoAccess())
    with pytest.raises(AuthenticationFailed):
        session.files()
