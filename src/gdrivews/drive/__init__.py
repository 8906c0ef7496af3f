"""
Drive files, folders and their permissions.
"""
from .acl import GoogleDriveAcl, GoogleDriveAclEntry
from .file import GoogleDriveFile
from .collection import GoogleDriveCollection
