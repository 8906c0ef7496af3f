import logging

from .file import GoogleDriveFile
from .resources import File, FOLDER_MIME_TYPE, SPREADSHEET_MIME_TYPE
from ..query import GoogleDriveQuery, in_folder, mime_type_is, title_is

logger = logging.getLogger(__name__)

class GoogleDriveCollection(GoogleDriveFile):
    """
    A folder in Google Drive.
    Use GoogleDriveSession.root_collection(), collection_by_title() etc. to get one.
    """
    def __init__(self, session, file: File|dict, root: bool = False) -> None:
        super().__init__(session, file)
        self._root = bool(root)

    @property
    def root(self) -> bool:
        """True if this is the root folder, 'My Drive'"""
        return self._root

    def _query(self, query: GoogleDriveQuery|str|None) -> GoogleDriveQuery|str:
        q = in_folder(self.id)
        if query is None:
            return q
        if isinstance(query, GoogleDriveQuery):
            return q & query
        return f"{q} and ({query})"

    def files(self, query: GoogleDriveQuery|str|None = None, **params) -> list[GoogleDriveFile]:
        """
        Files and folders directly in this folder, optionally narrowed by query
            folder.files(title_contains("report"))
        """
        return self._session.files(self._query(query), **params)

    contents = files

    def spreadsheets(self, query: GoogleDriveQuery|str|None = None, **params) -> list:
        q = mime_type_is(SPREADSHEET_MIME_TYPE)
        if query is not None:
            q = q & query if isinstance(query, GoogleDriveQuery) else f"{q} and ({query})"
        return self.files(q, **params)

    def subcollections(self, query: GoogleDriveQuery|str|None = None, **params) -> list["GoogleDriveCollection"]:
        q = mime_type_is(FOLDER_MIME_TYPE)
        if query is not None:
            q = q & query if isinstance(query, GoogleDriveQuery) else f"{q} and ({query})"
        return self.files(q, **params)

    def subcollection_by_title(self, title: str) -> "GoogleDriveCollection|None":
        """The sub folder with the given title, None if there isn't one"""
        found = self.subcollections(title_is(title))
        return found[0] if found else None

    def file_by_title(self, title: str|list[str]) -> GoogleDriveFile|None:
        """
        A file in this folder by title, or a path given as a list
            folder.file_by_title(["subfolder", "subsubfolder", "file title"])
        Returns None when nothing matches.
        """
        if isinstance(title, (list, tuple)):
            names = list(title)
            if not names:
                return None
            folder = self
            for name in names[:-1]:
                folder = folder.subcollection_by_title(name)
                if folder is None:
                    return None
            return folder.file_by_title(names[-1])
        found = self.files(title_is(title))
        return found[0] if found else None

    def add(self, file: GoogleDriveFile) -> None:
        """
        Adds the file to this folder, it keeps any other parent folders.
        Use remove() from the old folder to do a move.
        """
        file.move(add_parent=self.id)
        logger.debug("added %s to folder %s", file.id, self.id)

    def remove(self, file: GoogleDriveFile) -> None:
        """Removes the file from this folder, the file itself isn't deleted"""
        file.move(remove_parent=self.id)

    def create_subcollection(self, title: str) -> "GoogleDriveCollection":
        return self._session.create_file(title, FOLDER_MIME_TYPE, parents=[self.id])

    def upload_from_string(self, content, title: str, content_type: str|None = None, convert: bool = True):
        """Like GoogleDriveSession.upload_from_string, the new file goes in this folder"""
        return self._session.upload_from_string(content, title, content_type, convert, parents=[self.id])

    def upload_from_file(self, path, title: str|None = None, content_type: str|None = None,
                         convert: bool = True):
        return self._session.upload_from_file(path, title, content_type, convert, parents=[self.id])

    def upload_from_io(self, src, title: str, content_type: str|None = None, convert: bool = True):
        return self._session.upload_from_io(src, title, content_type, convert, parents=[self.id])
