import io
import logging
from pathlib import Path

from googleapiclient.http import MediaIoBaseUpload, MediaFileUpload

from ..errors import GoogleDriveError
from .resources import (File, FILE_FIELDS, GOOGLE_APPS_MIME_PREFIX, content_type_for)
from .acl import GoogleDriveAcl

logger = logging.getLogger(__name__)

class GoogleDriveFile():
    """
    A file in Google Drive, including Google Docs documents/spreadsheets/presentations.
    Use GoogleDriveSession.files() or file_by_title() etc. to get one.
    Only the File fields listed below are exposed, use the file property for the raw
    resource.
    """
    def __init__(self, session, file: File|dict) -> None:
        self._session = session
        self._file = File.from_response(file)
        self._acl = None

    def __bool__(self) -> bool:
        return bool(self._file)

    def __str__(self) -> str:
        return str(self._file)

    def __repr__(self) -> str:
        return f"{self.__class__}:{str(self)}"

    def __eq__(self, other) -> bool:
        return isinstance(other, GoogleDriveFile) and bool(self.id) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def session(self):
        return self._session

    @property
    def file(self) -> File:
        """The wrapped Drive resource"""
        return self._file

    @property
    def id(self) -> str:
        return self._file.id

    @property
    def title(self) -> str:
        return self._file.name

    @title.setter
    def title(self, value: str) -> None:
        self.rename(value)

    @property
    def mime_type(self) -> str:
        return self._file.mimeType

    @property
    def parents(self) -> list[str]:
        return list(self._file.parents)

    @property
    def human_url(self) -> str:
        """URL to view/edit the file in a Web browser"""
        return self._file.webViewLink

    @property
    def size(self) -> int|None:
        """Size in bytes, Google Docs types have none"""
        return int(self._file.size) if self._file.size is not None else None

    @property
    def created_time(self) -> str|None:
        return self._file.createdTime

    @property
    def modified_time(self) -> str|None:
        return self._file.modifiedTime

    @property
    def trashed(self) -> bool:
        return bool(self._file.trashed)

    @property
    def description(self) -> str|None:
        return self._file.description

    @property
    def export_links(self) -> dict[str,str]:
        return dict(self._file.exportLinks)

    @property
    def resource_type(self) -> str:
        """
        The type of resource, e.g. 'document', 'spreadsheet', 'folder' for
        Google Docs types, 'file' for everything else.
        """
        mt = self.mime_type or ""
        if mt.startswith(GOOGLE_APPS_MIME_PREFIX):
            return mt[len(GOOGLE_APPS_MIME_PREFIX):]
        return "file"

    @property
    def is_google_type(self) -> bool:
        return (self.mime_type or "").startswith(GOOGLE_APPS_MIME_PREFIX)

    @property
    def available_content_types(self) -> list[str]:
        """
        Content types usable with download_to_*.  Zero or one of them, Google Docs types
        can only be exported, see export_links for the formats they export to.
        """
        if self.mime_type and not self.is_google_type:
            return [self.mime_type]
        return []

    def reload_metadata(self) -> None:
        """Reloads file metadata such as title and acl."""
        drive = self._session.drive
        response = self._session.execute(drive.files().get(fileId=self.id, fields=FILE_FIELDS))
        self._file = File.from_response(response)
        if self._acl is not None:
            self._acl = GoogleDriveAcl(self._session, self)

    def _set_file(self, response: dict) -> None:
        self._file = File.from_response(response)

    def download_to_io(self, out) -> None:
        """
        Downloads the file and writes the bytes to out.
        To export a Google Docs file in some format, use export_to_io.
        """
        if self.is_google_type:
            raise GoogleDriveError(f"Downloading is not supported for {self.mime_type}, "
                                   "use export_to_io/export_as_string/export_as_file instead")
        drive = self._session.drive
        data = self._session.execute(drive.files().get_media(fileId=self.id))
        out.write(data)

    def download_to_string(self, encoding: str|None = "utf-8") -> str|bytes:
        """Downloads the file and returns it as a string, or bytes if encoding is None"""
        buf = io.BytesIO()
        self.download_to_io(buf)
        data = buf.getvalue()
        return data.decode(encoding) if encoding else data

    def download_to_file(self, path: Path|str) -> None:
        with open(path, 'wb') as f:
            self.download_to_io(f)

    def _export_mime_type(self, format: str) -> str:
        mime_type = content_type_for(format)
        if not mime_type:
            raise ValueError(f"Cannot guess the export format from {format!r}, "
                             "specify a MIME type or known extension")
        if not self.is_google_type:
            raise GoogleDriveError("This file doesn't support exporting. You may still download the file in the "
                                   "original format using download_to_file, download_to_string or download_to_io.")
        links = self.export_links
        if links and mime_type not in links:
            raise GoogleDriveError(f"This file doesn't support export with mime type {mime_type!r}. "
                                   f"Supported mime types: {sorted(links)}")
        return mime_type

    def export_to_io(self, out, format: str) -> None:
        """
        Export the file to out in the format given as a MIME type or
        extension ('csv', 'pdf', ...).
        """
        mime_type = self._export_mime_type(format)
        drive = self._session.drive
        data = self._session.execute(drive.files().export(fileId=self.id, mimeType=mime_type))
        out.write(data)

    def export_as_string(self, format: str, encoding: str|None = "utf-8") -> str|bytes:
        buf = io.BytesIO()
        self.export_to_io(buf, format)
        data = buf.getvalue()
        return data.decode(encoding) if encoding else data

    def export_as_file(self, path: Path|str, format: str|None = None) -> None:
        """
        Export to a local file, if format is None it is guessed from the file name
            spreadsheet.export_as_file("/path/to/hoge.csv")
        """
        fmt = format or Path(path).suffix
        if not fmt:
            raise ValueError(f"Cannot guess format from the file name: {path}, specify format explicitly")
        mime_type = self._export_mime_type(fmt)
        with open(path, 'wb') as f:
            self.export_to_io(f, mime_type)

    def _update_media(self, media) -> "GoogleDriveFile":
        drive = self._session.drive
        response = self._session.execute(drive.files().update(fileId=self.id, media_body=media,
                                                              fields=FILE_FIELDS))
        self._set_file(response)
        return self

    def update_from_io(self, src, content_type: str|None = None) -> "GoogleDriveFile":
        """Reads content from src and replaces the file content with it"""
        media = MediaIoBaseUpload(src, mimetype=content_type or self.mime_type or "application/octet-stream",
                                  resumable=True)
        return self._update_media(media)

    def update_from_string(self, content: str|bytes, content_type: str|None = None) -> "GoogleDriveFile":
        """
        Updates the file with content.
            file.update_from_string("Good bye, world.")
        """
        data = content.encode('utf-8') if isinstance(content, str) else content
        return self.update_from_io(io.BytesIO(data), content_type)

    def update_from_file(self, path: Path|str, content_type: str|None = None) -> "GoogleDriveFile":
        media = MediaFileUpload(str(path),
                                mimetype=content_type or content_type_for(path) or self.mime_type,
                                resumable=True)
        return self._update_media(media)

    def delete(self, permanent: bool = False) -> None:
        """
        If permanent is False, moves the file to the trash.
        If permanent is True, deletes the file permanently.
        """
        drive = self._session.drive
        if permanent:
            self._session.execute(drive.files().delete(fileId=self.id))
        else:
            response = self._session.execute(drive.files().update(fileId=self.id, body={'trashed': True},
                                                                  fields=FILE_FIELDS))
            self._set_file(response)
        logger.debug("%s %s", "deleted" if permanent else "trashed", self.id)

    def rename(self, title: str) -> None:
        """Renames title of the file."""
        drive = self._session.drive
        response = self._session.execute(drive.files().update(fileId=self.id, body={'name': str(title)},
                                                              fields=FILE_FIELDS))
        self._set_file(response)

    def copy(self, title: str):
        """Creates copy of this file with the given title."""
        drive = self._session.drive
        response = self._session.execute(drive.files().copy(fileId=self.id, body={'name': str(title)},
                                                            fields=FILE_FIELDS))
        return self._session.wrap_file(response)

    def move(self, add_parent: str|None = None, remove_parent: str|None = None) -> None:
        """Add/remove a parent folder, Drive's way of filing a file into folders"""
        args = {'fileId': self.id, 'fields': FILE_FIELDS}
        if add_parent:
            args['addParents'] = add_parent
        if remove_parent:
            args['removeParents'] = remove_parent
        drive = self._session.drive
        self._set_file(self._session.execute(drive.files().update(**args)))

    def acl(self, reload: bool = False) -> GoogleDriveAcl:
        """
        The access control list of the file, changes to it take effect immediately.
            for entry in file.acl():
                print(entry.scope_type, entry.scope, entry.role)
            file.acl().push({'type': 'user', 'emailAddress': 'someone@example.com', 'role': 'reader'})
            file.acl()[1].role = 'writer'
            file.acl().delete(file.acl()[1])
        """
        if self._acl is None or reload:
            self._acl = GoogleDriveAcl(self._session, self)
        return self._acl
