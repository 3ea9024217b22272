"""File size and modification-time lookups, one implementation per platform."""

import logging
import os
import sys
import time
from typing import Protocol

logger = logging.getLogger(__name__)


class FileMetadata(Protocol):
    def size(self, path: str) -> int:
        ...

    def mtime_ns(self, path: str) -> int:
        ...


class StatFileMetadata:
    """os.stat based lookups. Errors propagate as OSError."""

    def size(self, path: str) -> int:
        return os.stat(path).st_size

    def mtime_ns(self, path: str) -> int:
        return os.stat(path).st_mtime_ns


class WindowsFileMetadata(StatFileMetadata):
    """Retries stat calls that fail with a sharing violation.

    Antivirus scanners and indexers briefly hold files open on Windows,
    which surfaces as PermissionError from os.stat.
    """

    def __init__(self, attempts: int = 3, delay: float = 0.05):
        self._attempts = attempts
        self._delay = delay

    def _retry(self, fn, path: str):
        for attempt in range(1, self._attempts + 1):
            try:
                return fn(path)
            except PermissionError:
                if attempt == self._attempts:
                    raise
                logger.debug("stat %s busy (attempt %d/%d)", path, attempt, self._attempts)
                time.sleep(self._delay)

    def size(self, path: str) -> int:
        return self._retry(super().size, path)

    def mtime_ns(self, path: str) -> int:
        return self._retry(super().mtime_ns, path)


def default_metadata(platform: str | None = None) -> FileMetadata:
    """Pick the metadata implementation for *platform* (defaults to sys.platform)."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        return WindowsFileMetadata()
    return StatFileMetadata()
