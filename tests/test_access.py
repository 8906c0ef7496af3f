import json

import pytest

from gdrivews.access import GoogleDriveAccess

class FakeCreds():
    def __init__(self, valid: bool = True) -> None:
        self.valid = valid
        self.scopes = ["https://www.googleapis.com/auth/drive"]
        self.refreshed = 0

    def refresh(self, request) -> None:
        self.refreshed += 1
        self.valid = True

def test_scopes():
    assert(GoogleDriveAccess.get_scope("drive") == "https://www.googleapis.com/auth/drive")
    assert(GoogleDriveAccess.get_scope("https://www.googleapis.com/auth/calendar") ==
           "https://www.googleapis.com/auth/calendar")
    assert(GoogleDriveAccess.get_scope("bogus") == "")
    access = GoogleDriveAccess()
    access.scopes = "drive sheets drive"
    assert(access.scopes == ["https://www.googleapis.com/auth/drive",
                             "https://www.googleapis.com/auth/spreadsheets"])
    assert(not access.connected)
    assert(str(access).startswith("Disconnected"))

def test_config(tmp_path):
    access = GoogleDriveAccess({"port": 8080, "server": "127.0.0.1", "scopes": ["drive-ro"],
                                "secrets": str(tmp_path / "s.json"), "cache": str(tmp_path / "c.json")})
    conf = access.config
    assert(conf["port"] == 8080)
    assert(conf["server"] == "127.0.0.1")
    assert(conf["scopes"] == ["https://www.googleapis.com/auth/drive.readonly"])
    assert(access.client_secrets == tmp_path / "s.json")
    assert(access.cred_cache == tmp_path / "c.json")
    access.reset()
    assert(access.auth_port == 0)

def test_given_credentials():
    creds = FakeCreds()
    access = GoogleDriveAccess.from_credentials(creds)
    assert(access.connected)
    assert(access.creds is creds)
    assert(access.session_scopes == ["https://www.googleapis.com/auth/drive"])
    # changing scopes keeps credentials that were handed in
    access.scopes = ["sheets"]
    assert(access.creds is creds)

def test_given_credentials_refresh():
    creds = FakeCreds(valid=False)
    access = GoogleDriveAccess.from_credentials(creds)
    assert(not access)
    assert(access.connect())
    assert(creds.refreshed == 1)

def test_config_file_needs_client(tmp_path):
    p = tmp_path / "config.json"
    p.write_text(json.dumps({"scope": ["drive"]}), encoding='utf-8')
    with pytest.raises(ValueError):
        GoogleDriveAccess.from_config_file(p)
