"""
Dataclasses for the Drive v3 resources we use.
https://developers.google.com/drive/api/reference/rest/v3
Note that the GWS client will trim out any attribute with a value of None so use that
as the empty/default
"""
from dataclasses import dataclass, field
import re
from typing import List, ClassVar

from ..resources import GoogleWorkSpaceResourceBase

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
SPREADSHEET_MIME_TYPE = "application/vnd.google-apps.spreadsheet"
DOCUMENT_MIME_TYPE = "application/vnd.google-apps.document"
PRESENTATION_MIME_TYPE = "application/vnd.google-apps.presentation"
GOOGLE_APPS_MIME_PREFIX = "application/vnd.google-apps."

# fields mask asked for on every files.get/list so File below is always filled in
FILE_FIELDS = ("id,name,mimeType,parents,webViewLink,size,createdTime,modifiedTime,"
               "trashed,exportLinks,description")
PERMISSION_FIELDS = "id,type,emailAddress,domain,role,allowFileDiscovery,displayName"

_MIME_RE = re.compile(r"^[a-z]+/[\w.+-]+$")

EXT_TO_CONTENT_TYPE = {
    ".csv": "text/csv",
    ".tsv": "text/tab-separated-values",
    ".tab": "text/tab-separated-values",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".ods": "application/x-vnd.oasis.opendocument.spreadsheet",
    ".odt": "application/vnd.oasis.opendocument.text",
    ".rtf": "application/rtf",
    ".sxw": "application/vnd.sun.xml.writer",
    ".txt": "text/plain",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pps": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".htm": "text/html",
    ".html": "text/html",
    ".zip": "application/zip",
}

# what an upload of a given content type converts to when convert=True
CONVERSION_TARGETS = {
    "text/csv": SPREADSHEET_MIME_TYPE,
    "text/tab-separated-values": SPREADSHEET_MIME_TYPE,
    "application/vnd.ms-excel": SPREADSHEET_MIME_TYPE,
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": SPREADSHEET_MIME_TYPE,
    "application/x-vnd.oasis.opendocument.spreadsheet": SPREADSHEET_MIME_TYPE,
    "text/plain": DOCUMENT_MIME_TYPE,
    "text/html": DOCUMENT_MIME_TYPE,
    "application/rtf": DOCUMENT_MIME_TYPE,
    "application/msword": DOCUMENT_MIME_TYPE,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DOCUMENT_MIME_TYPE,
    "application/vnd.oasis.opendocument.text": DOCUMENT_MIME_TYPE,
    "application/vnd.ms-powerpoint": PRESENTATION_MIME_TYPE,
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": PRESENTATION_MIME_TYPE,
}

def content_type_for(format_or_path: str) -> str|None:
    """
    Accepts a MIME type, an extension ('csv' or '.csv') or a file name and
    returns the matching content type or None if it can't be guessed.
    """
    f = str(format_or_path)
    ext = f[f.rfind("."):].lower() if "." in f else "." + f.lower()
    if ext in EXT_TO_CONTENT_TYPE:
        return EXT_TO_CONTENT_TYPE[ext]
    if _MIME_RE.match(f):
        return f
    return None

@dataclass
class File(GoogleWorkSpaceResourceBase):
    """
    https://developers.google.com/drive/api/reference/rest/v3/files#File
    Only what FILE_FIELDS asks for.
    """
    id: str|None = field(default=None)
    name: str|None = field(default=None)
    mimeType: str|None = field(default=None)
    parents: List[str] = field(default_factory=list)
    webViewLink: str|None = field(default=None)
    size: str|None = field(default=None)
    createdTime: str|None = field(default=None)
    modifiedTime: str|None = field(default=None)
    trashed: bool|None = field(default=None)
    exportLinks: dict[str,str] = field(default_factory=dict)
    description: str|None = field(default=None)

    def __bool__(self) -> bool:
        return bool(self.id)

    def __str__(self) -> str:
        if self:
            return f"{self.id}:{self.name}"
        return "<empty>"

@dataclass
class Permission(GoogleWorkSpaceResourceBase):
    """https://developers.google.com/drive/api/reference/rest/v3/permissions#Permission"""
    id: str|None = field(default=None)
    type: str|None = field(default=None)
    emailAddress: str|None = field(default=None)
    domain: str|None = field(default=None)
    role: str|None = field(default=None)
    allowFileDiscovery: bool|None = field(default=None)
    displayName: str|None = field(default=None)

    valid_types: ClassVar[List[str]] = ["user", "group", "domain", "anyone"]
    valid_roles: ClassVar[List[str]] = ["owner", "organizer", "fileOrganizer", "writer", "commenter", "reader"]

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        if self.type is not None and self.type not in self.valid_types:
            raise ValueError(f"Invalid permission type: {self.type}")
        if self.role is not None and self.role not in self.valid_roles:
            raise ValueError(f"Invalid permission role: {self.role}")

    def __bool__(self) -> bool:
        return bool(self.type) and bool(self.role)
