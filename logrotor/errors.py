"""Exceptions raised while constructing a rotation sink.

Only construction can fail loudly; once a sink is running, filesystem
errors are logged and swallowed.
"""


class RotationSinkError(Exception):
    """Base class for sink construction failures."""


class InvalidFilePathError(RotationSinkError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid log file path {path!r}: {reason}")
        self.path = path
        self.reason = reason


class InvalidFilePermissionError(RotationSinkError):
    def __init__(self, permission: str):
        super().__init__(
            f"Invalid file permission {permission!r}: expected 3 or 4 octal digits"
        )
        self.permission = permission


class FileOpenError(RotationSinkError):
    def __init__(self, path: str, cause: OSError):
        super().__init__(f"Could not open log file {path!r}: {cause}")
        self.path = path
        self.cause = cause
