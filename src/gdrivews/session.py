"""
The session is what every object in gdrivews talks to the APIs through.
It owns the access object (credentials and services), executes requests,
turns HTTP failures into GoogleDriveError subclasses and gives the Drive
entry points for finding, creating and uploading files.

    session = GoogleDriveSession.from_config("config.json")
    ss = session.spreadsheet_by_title("Budget")
    ws = ss.worksheets()[0]
    ws["A1"] = "hello"
    ws.save()
"""
import io
import logging
import re
from pathlib import Path
from urllib.parse import urlparse, parse_qs

from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload, MediaFileUpload

from .access import GoogleDriveAccess
from .errors import GoogleDriveError, RemoteRequestFailed, AuthenticationFailed
from .query import GoogleDriveQuery, title_is, mime_type_is, not_trashed
from .drive.resources import (File, FILE_FIELDS, FOLDER_MIME_TYPE, SPREADSHEET_MIME_TYPE,
                              CONVERSION_TARGETS, content_type_for)
from .drive.file import GoogleDriveFile
from .drive.collection import GoogleDriveCollection
from .sheets.spreadsheet import GoogleSpreadsheet

logger = logging.getLogger(__name__)

_URL_ID_RES = [re.compile(r"/d/([\w-]+)"),
               re.compile(r"/folders/([\w-]+)")]

def _and(q1: GoogleDriveQuery|str, q2: GoogleDriveQuery|str|None) -> GoogleDriveQuery|str:
    if q2 is None:
        return q1
    if isinstance(q1, GoogleDriveQuery) and isinstance(q2, GoogleDriveQuery):
        return q1 & q2
    return f"({q1}) and ({q2})"

def id_from_url(url: str) -> str:
    """
    Pull the file/folder ID out of the URLs Drive, Docs and Sheets hand out, e.g.
        https://docs.google.com/spreadsheets/d/<id>/edit#gid=0
        https://drive.google.com/drive/folders/<id>
        https://drive.google.com/open?id=<id>
        https://docs.google.com/spreadsheet/ccc?key=<id>
    """
    u = urlparse(str(url))
    for part in (u.path, u.fragment):
        for r in _URL_ID_RES:
            m = r.search(part if part.startswith("/") else "/" + part)
            if m:
                return m.group(1)
    params = parse_qs(u.query)
    for name in ("id", "key"):
        if params.get(name):
            return params[name][0]
    raise GoogleDriveError(f"The given URL is not a known Google Drive URL: {url}")

class GoogleDriveSession():
    """
    A session with Google Drive.
    on_auth_fail, if given, is called with no arguments when a request gets a 401.
    If it returns something truthy (after refreshing credentials, say) the request
    is retried, otherwise AuthenticationFailed is raised.
    """
    def __init__(self, access, on_auth_fail=None) -> None:
        self._access = access
        self.on_auth_fail = on_auth_fail
        self._root = None

    def __repr__(self) -> str:
        return f"{self.__class__}:{self._access!r}"

    @classmethod
    def from_credentials(cls, credentials, on_auth_fail=None):
        """Use already obtained google.auth credentials"""
        return cls(GoogleDriveAccess.from_credentials(credentials), on_auth_fail)

    @classmethod
    def from_config(cls, path: Path|str, scopes: list[str]|None = None, on_auth_fail=None):
        """See GoogleDriveAccess.from_config_file for the file format"""
        return cls(GoogleDriveAccess.from_config_file(path, scopes), on_auth_fail)

    @classmethod
    def from_service_account_key(cls, path: Path|str, scopes: list[str]|None = None, on_auth_fail=None):
        return cls(GoogleDriveAccess.from_service_account_key(path, scopes), on_auth_fail)

    @property
    def access(self):
        return self._access

    def get_service(self, name: str, version: str):
        s = self._access.get_service(name, version)
        if s is None:
            raise AuthenticationFailed(401, "no credentials available", "", f"{name}:{version}")
        return s

    @property
    def drive(self):
        return self.get_service("drive", "v3")

    @property
    def sheets(self):
        return self.get_service("sheets", "v4")

    def _auth_retry(self, method: str, uri: str) -> bool:
        if self.on_auth_fail is not None and self.on_auth_fail():
            logger.warning("authentication failed for %s %s, retrying", method, uri)
            return True
        return False

    def execute(self, request):
        """
        Execute a googleapiclient request, the one place API errors are mapped.
        A 401 runs the on_auth_fail hook first, see the class doc.
        """
        method = getattr(request, 'method', '')
        uri = getattr(request, 'uri', '')
        while True:
            try:
                logger.debug("%s %s", method, uri)
                return request.execute()
            except HttpError as e:
                status = int(e.resp.status)
                body = e.content.decode('utf-8', 'replace') if isinstance(e.content, bytes) else str(e.content)
                if status == 401:
                    if self._auth_retry(method, uri):
                        continue
                    raise AuthenticationFailed(status, body, method, uri) from e
                raise RemoteRequestFailed(status, body, method, uri) from e

    def request(self, method: str, url: str, **kwargs):
        """
        Raw authorized HTTP for URLs outside the discovery services, like the CSV
        export of a single worksheet.  Returns the requests.Response.
        """
        while True:
            http = self._access.authorized_session()
            if http is None:
                raise AuthenticationFailed(401, "no credentials available", method, url)
            logger.debug("%s %s", method, url)
            response = http.request(method, url, **kwargs)
            if response.status_code < 300:
                return response
            if response.status_code == 401:
                if self._auth_retry(method, url):
                    continue
                raise AuthenticationFailed(response.status_code, response.text, method, url)
            raise RemoteRequestFailed(response.status_code, response.text, method, url)

    def wrap_file(self, file: File|dict) -> GoogleDriveFile:
        """Wrap a Drive file resource in the class matching its MIME type"""
        f = File.from_response(file)
        if f.mimeType == SPREADSHEET_MIME_TYPE:
            return GoogleSpreadsheet(self, f)
        if f.mimeType == FOLDER_MIME_TYPE:
            return GoogleDriveCollection(self, f)
        return GoogleDriveFile(self, f)

    def files(self, query: GoogleDriveQuery|str|None = None, include_trashed: bool = False,
              **params) -> list[GoogleDriveFile]:
        """
        Returns the files matching query, every file the account can see if None.
            session.files(title_contains("hoge"))
            session.files("name = 'hoge'")
        Other params are passed to files.list, e.g. orderBy='modifiedTime desc'.
        Trashed files are left out unless include_trashed.
        """
        q = query
        if not include_trashed:
            q = not_trashed() if q is None else _and(q, not_trashed())
        args = {'fields': f"nextPageToken,files({FILE_FIELDS})", 'pageSize': 1000}
        if q is not None:
            args['q'] = str(q)
        args.update(params)
        drive = self.drive
        ret = []
        while True:
            response = self.execute(drive.files().list(**args)) or {}
            ret.extend(self.wrap_file(f) for f in response.get('files', []))
            token = response.get('nextPageToken')
            if not token:
                break
            args['pageToken'] = token
        return ret

    def file_by_id(self, id: str) -> GoogleDriveFile:
        drive = self.drive
        return self.wrap_file(self.execute(drive.files().get(fileId=id, fields=FILE_FIELDS)))

    def file_by_title(self, title: str|list[str]) -> GoogleDriveFile|None:
        """
        A file with the title, None if there isn't one.
        A list is a path from the root folder, the last element the file title
            session.file_by_title(["myfolder", "mysubfolder/even/w/slash", "myfile"])
        """
        if isinstance(title, (list, tuple)):
            return self.root_collection().file_by_title(title)
        found = self.files(title_is(title))
        return found[0] if found else None

    def file_by_url(self, url: str) -> GoogleDriveFile:
        """
        The file for a Drive/Docs/Sheets URL, e.g.
            https://docs.google.com/spreadsheets/d/1L3-kvwJblyW_TvjYD-7pE-AXxw5_bkb6S_MljuIPVL0/edit
        """
        return self.file_by_id(id_from_url(url))

    def spreadsheets(self, query: GoogleDriveQuery|str|None = None, **params) -> list[GoogleSpreadsheet]:
        return self.files(_and(mime_type_is(SPREADSHEET_MIME_TYPE), query), **params)

    def spreadsheet_by_key(self, key: str) -> GoogleSpreadsheet:
        """
        The spreadsheet with the key, the part after /d/ in its URL
            session.spreadsheet_by_key("1L3-kvwJblyW_TvjYD-7pE-AXxw5_bkb6S_MljuIPVL0")
        """
        f = self.file_by_id(key)
        if not isinstance(f, GoogleSpreadsheet):
            raise GoogleDriveError(f"The file with the ID is not a spreadsheet: {key}")
        return f

    def spreadsheet_by_url(self, url: str) -> GoogleSpreadsheet:
        return self.spreadsheet_by_key(id_from_url(url))

    def spreadsheet_by_title(self, title: str) -> GoogleSpreadsheet|None:
        """The first spreadsheet with the title, None if there isn't one"""
        found = self.spreadsheets(title_is(title))
        return found[0] if found else None

    def worksheet_by_url(self, url: str):
        """
        The worksheet a URL points at, the sheet is picked by the gid parameter
            https://docs.google.com/spreadsheets/d/<key>/edit#gid=<gid>
        """
        u = urlparse(str(url))
        params = parse_qs(u.query)
        params.update(parse_qs(u.fragment))
        if not params.get('gid'):
            raise GoogleDriveError(f"URL is not a worksheet URL, no gid in it: {url}")
        ss = self.spreadsheet_by_url(url)
        return ss.worksheet_by_sheet_id(int(params['gid'][0]))

    def root_collection(self) -> GoogleDriveCollection:
        """The root folder, 'My Drive'"""
        if self._root is None:
            # 'root' is the alias Drive accepts for the root folder's ID
            self._root = GoogleDriveCollection(self, File(id="root", name="My Drive",
                                                          mimeType=FOLDER_MIME_TYPE), root=True)
        return self._root

    def collections(self, query: GoogleDriveQuery|str|None = None, **params) -> list[GoogleDriveCollection]:
        return self.files(_and(mime_type_is(FOLDER_MIME_TYPE), query), **params)

    def collection_by_title(self, title: str) -> GoogleDriveCollection|None:
        """The folder with the title directly under the root folder"""
        return self.root_collection().subcollection_by_title(title)

    def collection_by_id(self, id: str) -> GoogleDriveCollection:
        f = self.file_by_id(id)
        if not isinstance(f, GoogleDriveCollection):
            raise GoogleDriveError(f"The file with the ID is not a folder: {id}")
        return f

    def collection_by_url(self, url: str) -> GoogleDriveCollection:
        return self.collection_by_id(id_from_url(url))

    def create_file(self, title: str, mime_type: str, parents: list[str]|None = None) -> GoogleDriveFile:
        """Create an empty file with no content, how Google Docs types and folders get made"""
        body = {'name': str(title), 'mimeType': mime_type}
        if parents:
            body['parents'] = list(parents)
        drive = self.drive
        response = self.execute(drive.files().create(body=body, fields=FILE_FIELDS))
        logger.debug("created %s %s", mime_type, response.get('id') if response else None)
        return self.wrap_file(response)

    def create_spreadsheet(self, title: str = "Untitled", parents: list[str]|None = None) -> GoogleSpreadsheet:
        return self.create_file(title, SPREADSHEET_MIME_TYPE, parents)

    def create_collection(self, title: str, parents: list[str]|None = None) -> GoogleDriveCollection:
        return self.create_file(title, FOLDER_MIME_TYPE, parents)

    def _upload(self, media, title: str, content_type: str, convert: bool,
                parents: list[str]|None) -> GoogleDriveFile:
        body = {'name': str(title)}
        if convert and content_type in CONVERSION_TARGETS:
            body['mimeType'] = CONVERSION_TARGETS[content_type]
        if parents:
            body['parents'] = list(parents)
        drive = self.drive
        response = self.execute(drive.files().create(body=body, media_body=media, fields=FILE_FIELDS))
        return self.wrap_file(response)

    def upload_from_io(self, src, title: str = "Untitled", content_type: str|None = None,
                       convert: bool = True, parents: list[str]|None = None) -> GoogleDriveFile:
        """
        Uploads the content read from src as a new file.
        If convert and the content type has a Google Docs equivalent (csv -> spreadsheet etc.)
        the file is converted.  content_type is guessed from title when None.
        """
        ct = content_type or content_type_for(title) or "application/octet-stream"
        media = MediaIoBaseUpload(src, mimetype=ct, resumable=True)
        return self._upload(media, title, ct, convert, parents)

    def upload_from_string(self, content: str|bytes, title: str = "Untitled", content_type: str|None = None,
                           convert: bool = True, parents: list[str]|None = None) -> GoogleDriveFile:
        """
        Uploads content as a new file, the content type is guessed from title
        and falls back to text/plain
            session.upload_from_string("Hello world.", "Hello", content_type="text/plain")
        """
        data = content.encode('utf-8') if isinstance(content, str) else content
        ct = content_type or content_type_for(title) or "text/plain"
        return self.upload_from_io(io.BytesIO(data), title, ct, convert, parents)

    def upload_from_file(self, path: Path|str, title: str|None = None, content_type: str|None = None,
                         convert: bool = True, parents: list[str]|None = None) -> GoogleDriveFile:
        """Uploads a local file, the title defaults to the file name"""
        p = Path(path)
        ct = content_type or content_type_for(p.name) or "application/octet-stream"
        media = MediaFileUpload(str(p), mimetype=ct, resumable=True)
        return self._upload(media, title or p.name, ct, convert, parents)
