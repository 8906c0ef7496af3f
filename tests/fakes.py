"""
Stand-ins for the googleapiclient service objects.
service.spreadsheets().values().batchUpdate(**kw) returns a FakeRequest whose
execute() records ("spreadsheets.values.batchUpdate", kw) in service.calls and
answers from service.responses, keyed by that same dotted name.  A response
can be a value, a callable taking the call kwargs, a list (answered in
order) or an exception instance to raise.
"""
from googleapiclient.errors import HttpError

from gdrivews.session import GoogleDriveSession

_RESOURCES = ["spreadsheets", "values", "files", "permissions"]

class FakeHttpResponse():
    def __init__(self, status: int, reason: str = "") -> None:
        self.status = status
        self.reason = reason

def http_error(status: int, body: str = '{"error": {"message": "failed"}}') -> HttpError:
    return HttpError(FakeHttpResponse(status, "failed"), body.encode('utf-8'))

class FakeRequest():
    def __init__(self, service, name: str, kwargs: dict) -> None:
        self._service = service
        self.name = name
        self.kwargs = kwargs
        self.method = "POST"
        self.uri = f"https://fake/{name}"

    def execute(self):
        self._service.calls.append((self.name, self.kwargs))
        response = self._service.responses.get(self.name, {})
        if isinstance(response, list):
            response = response.pop(0) if len(response) > 1 else response[0]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            response = response(**self.kwargs)
        return response

class FakeResource():
    def __init__(self, service, path: list[str]) -> None:
        self._service = service
        self._path = path

    def __getattr__(self, name: str):
        def call(**kwargs):
            if name in _RESOURCES:
                return FakeResource(self._service, self._path + [name])
            return FakeRequest(self._service, ".".join(self._path + [name]), kwargs)
        return call

class FakeService(FakeResource):
    def __init__(self, responses: dict|None = None) -> None:
        super().__init__(self, [])
        self.responses = dict(responses or {})
        self.calls = []

    def called(self, name: str) -> list[dict]:
        """kwargs of every call to name, in order"""
        return [kw for n, kw in self.calls if n == name]

class FakeHttp():
    """Stands in for the requests AuthorizedSession"""
    def __init__(self, responses: list) -> None:
        self.responses = list(responses)
        self.calls = []

    def request(self, method: str, url: str, **kwargs):
        self.calls.append((method, url))
        return self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]

class FakeResponse():
    def __init__(self, status_code: int, content: bytes = b"") -> None:
        self.status_code = status_code
        self.content = content
        self.text = content.decode('utf-8')

class FakeAccess():
    """Has the two calls GoogleDriveSession makes on a GoogleDriveAccess"""
    def __init__(self, service: FakeService, http: FakeHttp|None = None) -> None:
        self.service = service
        self.http = http

    def get_service(self, name: str, version: str):
        return self.service

    def authorized_session(self):
        return self.http

def make_session(responses: dict|None = None, on_auth_fail=None,
                 http: FakeHttp|None = None) -> tuple[GoogleDriveSession, FakeService]:
    service = FakeService(responses)
    return GoogleDriveSession(FakeAccess(service, http), on_auth_fail), service

def sheet_properties(title: str = "Sheet1", sheet_id: int = 0, index: int = 0,
                     rows: int = 100, cols: int = 20) -> dict:
    return {"sheetId": sheet_id, "title": title, "index": index, "sheetType": "GRID",
            "gridProperties": {"rowCount": rows, "columnCount": cols}}

def cell_data(value) -> dict:
    """CellData the way the API returns it for a typed in value"""
    if value is None or value == "":
        return {}
    if isinstance(value, str) and value.startswith("="):
        raise ValueError("use formula_cell() for formulas")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return {"formattedValue": str(value), "userEnteredValue": {"numberValue": value},
                "effectiveValue": {"numberValue": value}}
    return {"formattedValue": str(value), "userEnteredValue": {"stringValue": str(value)},
            "effectiveValue": {"stringValue": str(value)}}

def formula_cell(formula: str, result) -> dict:
    c = cell_data(result)
    c["userEnteredValue"] = {"formulaValue": formula}
    return c

def spreadsheet_response(grid: list[list]|None = None, title: str = "Sheet1", sheet_id: int = 0,
                         rows: int = 100, cols: int = 20, key: str = "key1") -> dict:
    """spreadsheets.get response with grid data, grid rows hold values or CellData dicts"""
    row_data = [{"values": [c if isinstance(c, dict) else cell_data(c) for c in row]}
                for row in (grid or [])]
    return {"spreadsheetId": key,
            "sheets": [{"properties": sheet_properties(title, sheet_id, 0, rows, cols),
                        "data": [{"rowData": row_data}]}]}

def spreadsheet_file(key: str = "key1", title: str = "Book") -> dict:
    return {"id": key, "name": title, "mimeType": "application/vnd.google-apps.spreadsheet",
            "webViewLink": f"https://docs.google.com/spreadsheets/d/{key}/edit"}
