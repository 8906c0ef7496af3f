"""
Access control list of a Drive file, a thin layer over the permissions resource.
https://developers.google.com/drive/api/reference/rest/v3/permissions
Every change is sent immediately, there's nothing to save.
"""
import logging
from collections.abc import Sequence

from .resources import Permission, PERMISSION_FIELDS

logger = logging.getLogger(__name__)

class GoogleDriveAclEntry():
    """
    One permission of a file.
    scope_type is the permission type (user, group, domain or anyone),
    scope is the email address or domain it applies to.
    """
    def __init__(self, permission: Permission|dict, acl=None) -> None:
        self._permission = Permission.from_response(permission)
        self._acl = acl

    def __eq__(self, other) -> bool:
        if isinstance(other, GoogleDriveAclEntry):
            return self._permission == other._permission
        return NotImplemented

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(type={self.type!r}, scope={self.scope!r}, "
                f"role={self.role!r})")

    @property
    def permission(self) -> Permission:
        return self._permission

    @property
    def id(self) -> str|None:
        return self._permission.id

    @property
    def type(self) -> str|None:
        return self._permission.type

    scope_type = type

    @property
    def email_address(self) -> str|None:
        return self._permission.emailAddress

    @property
    def domain(self) -> str|None:
        return self._permission.domain

    @property
    def scope(self) -> str|None:
        """The email address or the domain, None for 'anyone'"""
        return self._permission.emailAddress or self._permission.domain

    @property
    def allow_file_discovery(self) -> bool|None:
        return self._permission.allowFileDiscovery

    @property
    def display_name(self) -> str|None:
        return self._permission.displayName

    @property
    def role(self) -> str|None:
        return self._permission.role

    @role.setter
    def role(self, role: str) -> None:
        """Changes the role, immediately sent if the entry belongs to an acl"""
        if self._acl is not None:
            self._acl.update_role(self, role)
        else:
            self._permission.role = role
            self._permission.fixup()

    def _set_permission(self, permission: Permission|dict) -> None:
        self._permission = Permission.from_response(permission)

class GoogleDriveAcl(Sequence):
    """
    The permissions of one file, fetched when constructed.
    Use GoogleDriveFile.acl() rather than building one directly.
    """
    def __init__(self, session, file) -> None:
        self._session = session
        self._file = file
        self._entries = []
        drive = session.drive
        token = None
        while True:
            args = {'fileId': file.id, 'fields': f"nextPageToken,permissions({PERMISSION_FIELDS})"}
            if token:
                args['pageToken'] = token
            response = session.execute(drive.permissions().list(**args)) or {}
            self._entries.extend(GoogleDriveAclEntry(p, self) for p in response.get('permissions', []))
            token = response.get('nextPageToken')
            if not token:
                break

    def __getitem__(self, index):
        return self._entries[index]

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._entries!r})"

    def push(self, entry: GoogleDriveAclEntry|Permission|dict, notify: bool = True,
             email_message: str|None = None) -> GoogleDriveAclEntry:
        """
        Adds a new entry, entry is an entry, a Permission or a dict of its fields
            file.acl().push({'type': 'user', 'emailAddress': 'x@example.com', 'role': 'reader'})
            file.acl().push({'type': 'anyone', 'role': 'reader'})
        notify sends the notification email for user and group entries.
        """
        perm = entry.permission if isinstance(entry, GoogleDriveAclEntry) else Permission.from_response(entry)
        if not perm:
            raise ValueError("An acl entry needs both a type and a role")
        body = perm.trim()
        body.pop('id', None)
        args = {'fileId': self._file.id, 'body': body, 'fields': PERMISSION_FIELDS}
        if perm.type in ("user", "group"):
            args['sendNotificationEmail'] = bool(notify)
            if notify and email_message:
                args['emailMessage'] = str(email_message)
        drive = self._session.drive
        response = self._session.execute(drive.permissions().create(**args))
        new_entry = GoogleDriveAclEntry(response, self)
        self._entries.append(new_entry)
        logger.debug("acl push %s: %r", self._file.id, new_entry)
        return new_entry

    def delete(self, entry: GoogleDriveAclEntry) -> None:
        """Deletes an entry from the file's permissions"""
        drive = self._session.drive
        self._session.execute(drive.permissions().delete(fileId=self._file.id, permissionId=entry.id))
        self._entries = [e for e in self._entries if e.id != entry.id]

    def update_role(self, entry: GoogleDriveAclEntry, role: str) -> GoogleDriveAclEntry:
        """Changes the role of an existing entry, entry.role = 'writer' does the same"""
        if role not in Permission.valid_roles:
            raise ValueError(f"Invalid permission role: {role}")
        drive = self._session.drive
        response = self._session.execute(drive.permissions().update(fileId=self._file.id,
                                                                     permissionId=entry.id,
                                                                     body={'role': role},
                                                                     fields=PERMISSION_FIELDS))
        entry._set_permission(response)
        return entry
