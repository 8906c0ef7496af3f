import io

import pytest

from gdrivews.errors import GoogleDriveError
from gdrivews.drive.file import GoogleDriveFile
from gdrivews.drive.collection import GoogleDriveCollection
from gdrivews.drive.acl import GoogleDriveAclEntry

from fakes import make_session, spreadsheet_file

FOLDER = "application/vnd.google-apps.folder"

def plain_file(id="p1", name="a.txt", **extra) -> dict:
    f = {"id": id, "name": name, "mimeType": "text/plain", "size": "12", "parents": ["dir1"]}
    f.update(extra)
    return f

def test_accessors():
    session, _ = make_session()
    f = GoogleDriveFile(session, plain_file(description="notes", trashed=False, unknownField=1))
    assert(f.id == "p1")
    assert(f.title == "a.txt")
    assert(f.size == 12)
    assert(f.parents == ["dir1"])
    assert(f.description == "notes")
    assert(not f.trashed)
    assert(f.resource_type == "file")
    assert(not f.is_google_type)
    assert(f.available_content_types == ["text/plain"])

    ss = session.wrap_file(spreadsheet_file())
    assert(ss.resource_type == "spreadsheet")
    assert(ss.is_google_type)
    assert(ss.available_content_types == [])
    assert(ss.size is None)
    assert(ss.human_url == "https://docs.google.com/spreadsheets/d/key1/edit")

    assert(f == GoogleDriveFile(session, plain_file(name="other")))
    assert(f != ss)

def test_rename_and_delete():
    session, service = make_session({"files.update": lambda **kw: plain_file(**kw.get("body", {}))})
    f = GoogleDriveFile(session, plain_file())
    f.title = "b.txt"
    assert(f.title == "b.txt")
    assert(service.called("files.update")[0]["body"] == {"name": "b.txt"})

    f.delete()
    assert(service.called("files.update")[1]["body"] == {"trashed": True})
    assert(f.trashed)
    assert(service.called("files.delete") == [])
    f.delete(permanent=True)
    assert(service.called("files.delete")[0]["fileId"] == "p1")

def test_copy_and_move():
    session, service = make_session({"files.copy": spreadsheet_file("k2", "Copy of Book"),
                                     "files.update": plain_file(parents=["dir2"])})
    ss = session.wrap_file(spreadsheet_file())
    dup = ss.duplicate()
    assert(dup.key == "k2")
    assert(service.called("files.copy")[0]["body"] == {"name": "Copy of Book"})

    f = GoogleDriveFile(session, plain_file())
    folder = GoogleDriveCollection(session, {"id": "dir2", "name": "d", "mimeType": FOLDER})
    folder.add(f)
    assert(service.called("files.update")[0]["addParents"] == "dir2")
    assert("removeParents" not in service.called("files.update")[0])
    assert(f.parents == ["dir2"])
    folder.remove(f)
    assert(service.called("files.update")[1]["removeParents"] == "dir2")

def test_download_and_export():
    session, service = make_session({"files.get_media": b"hello there!",
                                     "files.export": b"a,b\r\n"})
    f = GoogleDriveFile(session, plain_file())
    assert(f.download_to_string() == "hello there!")
    with pytest.raises(GoogleDriveError):
        f.export_as_string("csv")

    ss = session.wrap_file(spreadsheet_file())
    with pytest.raises(GoogleDriveError):
        ss.download_to_string()
    assert(ss.export_as_string("csv") == "a,b\r\n")
    assert(service.called("files.export")[0]["mimeType"] == "text/csv")
    with pytest.raises(ValueError):
        ss.export_as_string("nonsense")

    doc = session.wrap_file({"id": "d1", "name": "doc", "mimeType": "application/vnd.google-apps.document",
                             "exportLinks": {"application/pdf": "https://x/pdf"}})
    with pytest.raises(GoogleDriveError):
        doc.export_as_string("csv")

def test_update_content():
    session, service = make_session({"files.update": plain_file(size="3")})
    f = GoogleDriveFile(session, plain_file())
    f.update_from_string("new")
    call = service.called("files.update")[0]
    assert(call["fileId"] == "p1")
    assert(call["media_body"].mimetype() == "text/plain")
    assert(f.size == 3)

def test_acl():
    perms = {"permissions": [{"id": "o1", "type": "user", "emailAddress": "me@example.com", "role": "owner"},
                             {"id": "a1", "type": "anyone", "role": "reader"}]}
    def create(**kw):
        return dict(kw["body"], id="n1")
    def update(**kw):
        return {"id": kw["permissionId"], "type": "anyone", "role": kw["body"]["role"]}
    session, service = make_session({"permissions.list": perms, "permissions.create": create,
                                     "permissions.update": update})
    f = GoogleDriveFile(session, plain_file())
    acl = f.acl()
    assert(len(acl) == 2)
    assert(acl[0].scope_type == "user")
    assert(acl[0].scope == "me@example.com")
    assert(acl[1].scope is None)
    assert(f.acl() is acl)

    entry = acl.push({"type": "user", "emailAddress": "x@example.com", "role": "reader"},
                     email_message="hi")
    call = service.called("permissions.create")[0]
    assert(call["body"] == {"type": "user", "emailAddress": "x@example.com", "role": "reader"})
    assert(call["sendNotificationEmail"])
    assert(call["emailMessage"] == "hi")
    assert(entry.id == "n1")
    assert(len(acl) == 3)

    acl.push({"type": "domain", "domain": "example.com", "role": "reader"})
    assert("sendNotificationEmail" not in service.called("permissions.create")[1])

    acl[1].role = "writer"
    assert(service.called("permissions.update")[0]["body"] == {"role": "writer"})
    assert(acl[1].role == "writer")
    with pytest.raises(ValueError):
        acl[1].role = "superuser"

    acl.delete(acl[1])
    assert(service.called("permissions.delete")[0]["permissionId"] == "a1")
    assert([e.id for e in acl] == ["o1", "n1", "n1"])

    with pytest.raises(ValueError):
        acl.push({"type": "user", "emailAddress": "x@example.com"})

def test_detached_acl_entry():
    e = GoogleDriveAclEntry({"type": "anyone", "role": "reader"})
    e.role = "commenter"
    assert(e.role == "commenter")
    with pytest.raises(ValueError):
        GoogleDriveAclEntry({"type": "robot", "role": "reader"})

def test_collection_listing():
    listing = {"files": [{"id": "s1", "name": "sheet", "mimeType": "application/vnd.google-apps.spreadsheet"},
                         {"id": "d2", "name": "sub", "mimeType": FOLDER}]}
    session, service = make_session({"files.list": listing,
                                     "files.create": {"id": "d3", "name": "new", "mimeType": FOLDER}})
    folder = GoogleDriveCollection(session, {"id": "dir1", "name": "d", "mimeType": FOLDER})
    files = folder.files()
    assert([type(f) for f in files][1] is GoogleDriveCollection)
    assert(service.called("files.list")[0]["q"] == "'dir1' in parents and trashed = false")

    folder.files("starred = true")
    assert(service.called("files.list")[1]["q"] == "('dir1' in parents and (starred = true)) and (trashed = false)")

    sub = folder.create_subcollection("new")
    assert(isinstance(sub, GoogleDriveCollection))
    assert(service.called("files.create")[0]["body"]["parents"] == ["dir1"])
