"""Raw append handle on the target log file."""

import logging
import os
import re

from logrotor.errors import InvalidFilePathError, InvalidFilePermissionError

logger = logging.getLogger(__name__)

_PERMISSION_RE = re.compile(r"^[0-7]{3,4}$")


def parse_permission(permission: str) -> int:
    """Convert an octal permission string such as "640" into a mode integer."""
    permission = str(permission).strip()
    if not _PERMISSION_RE.match(permission):
        raise InvalidFilePermissionError(permission)
    return int(permission, 8)


def validate_path(path: str) -> str:
    """Return the absolute form of *path*, rejecting anything that names a directory."""
    if not path or not str(path).strip():
        raise InvalidFilePathError(str(path), "path is empty")
    path = os.fspath(path)
    if path.endswith(os.sep) or (os.altsep and path.endswith(os.altsep)):
        raise InvalidFilePathError(path, "path names a directory")
    if os.path.isdir(path):
        raise InvalidFilePathError(path, "path is an existing directory")
    return os.path.abspath(path)


class TargetFile:
    """Unbuffered append-only file: every write reaches the OS immediately,
    sync() pushes it to stable storage."""

    def __init__(self, path: str, mode: int, encoding: str = "utf-8"):
        self.path = path
        self.mode = mode
        self.encoding = encoding
        self._fd: int | None = None

    @property
    def is_open(self) -> bool:
        return self._fd is not None

    def open(self):
        """Create parent directories and the file if needed, then open for append.

        Raises OSError on failure.
        """
        self.close()
        os.makedirs(os.path.dirname(self.path), exist_ok=True)
        created = not os.path.exists(self.path)
        fd = os.open(self.path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, self.mode)
        if created:
            try:
                # os.open's mode is filtered by the umask
                os.chmod(self.path, self.mode)
            except OSError as exc:
                logger.warning("Could not set mode %o on %s: %s", self.mode, self.path, exc)
        self._fd = fd
        logger.debug("Opened %s (created=%s)", self.path, created)

    def write_line(self, line: str):
        """Append *line* plus a newline. Raises OSError, or ValueError if closed."""
        if self._fd is None:
            raise ValueError(f"{self.path} is not open")
        data = (line if line.endswith("\n") else line + "\n").encode(self.encoding, errors="replace")
        view = memoryview(data)
        while view:
            written = os.write(self._fd, view)
            view = view[written:]

    def sync(self):
        if self._fd is not None:
            os.fsync(self._fd)

    def close(self):
        if self._fd is None:
            return
        fd, self._fd = self._fd, None
        try:
            os.close(fd)
        except OSError as exc:
            logger.warning("Closing %s failed: %s", self.path, exc)
