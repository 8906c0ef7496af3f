"""
Exceptions raised by gdrivews.
Everything derives from GoogleDriveError so callers can catch the lot,
the local validation errors also derive from the matching builtin so
they behave like the ValueError/KeyError/IndexError a caller would expect.
"""

class GoogleDriveError(Exception):
    """Base class for all gdrivews errors"""
    pass

class InvalidAddress(GoogleDriveError, ValueError):
    """A cell name or (row, col) pair that cannot address a cell"""
    def __init__(self, address, reason: str = "") -> None:
        self.address = address
        msg = f"Invalid cell address: {address!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)

class InvalidCellValue(GoogleDriveError, ValueError):
    """Cell value holds a character that cannot be serialized"""
    def __init__(self, row: int, col: int, value: str, char: str) -> None:
        self.row = row
        self.col = col
        self.value = value
        self.char = char
        super().__init__(f"Cell ({row},{col}) value contains illegal character "
                         f"U+{ord(char):04X}: {value!r}")

class UnknownColumn(GoogleDriveError, KeyError):
    """Named column lookup could not find the header"""
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Column doesn't exist: {key!r}")

    def __str__(self) -> str:
        # KeyError would repr() the message
        return self.args[0]

class OutOfRange(GoogleDriveError, IndexError):
    """Row/column insertion or deletion outside the declared sheet bounds"""
    pass

class RemoteRequestFailed(GoogleDriveError):
    """
    The remote API answered with a non-success status.
    Carries the status, body and the request that failed.
    """
    def __init__(self, status: int, body: str = "",
                 method: str = "", uri: str = "") -> None:
        self.status = int(status)
        self.body = body
        self.method = method
        self.uri = uri
        super().__init__(f"Response code {self.status} for {method} {uri}: {body}")

class AuthenticationFailed(RemoteRequestFailed):
    """401 from the remote API, after the session's on_auth_fail hook gave up"""
    pass
