"""Metrics collector — thread-safe counters for writes, flushes, and rotations."""

import threading
import time
import logging

logger = logging.getLogger(__name__)


class RotationMetrics:
    """Counters describing what a sink has done since it was created."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._lines_written: int = 0
        self._lines_dropped: int = 0
        self._lines_filtered: int = 0
        self._flushes: int = 0
        self._size_checks: int = 0
        self._rotations: int = 0
        self._archives_created: int = 0
        self._archives_renumbered: int = 0
        self._archives_removed: int = 0
        self._failures: dict = {}
        self._start_time = time.monotonic()

    def record_write(self) -> None:
        with self._lock:
            self._lines_written += 1

    def record_dropped(self) -> None:
        with self._lock:
            self._lines_dropped += 1

    def record_filtered(self) -> None:
        with self._lock:
            self._lines_filtered += 1

    def record_flush(self) -> None:
        with self._lock:
            self._flushes += 1

    def record_size_check(self) -> None:
        with self._lock:
            self._size_checks += 1

    def record_rotation(self, archived: bool, renumbered: int, removed: int) -> None:
        """Record one rotation pass.

        Args:
            archived: Whether the target file was moved to an archive.
            renumbered: Number of old archives renamed to a new generation.
            removed: Number of archives evicted.
        """
        with self._lock:
            self._rotations += 1
            self._archives_created += 1 if archived else 0
            self._archives_renumbered += renumbered
            self._archives_removed += removed

    def record_failure(self, step: str) -> None:
        with self._lock:
            self._failures[step] = self._failures.get(step, 0) + 1

    def snapshot(self) -> dict:
        """Return a point-in-time snapshot of all counters plus uptime."""
        with self._lock:
            return {
                "lines_written": self._lines_written,
                "lines_dropped": self._lines_dropped,
                "lines_filtered": self._lines_filtered,
                "flushes": self._flushes,
                "size_checks": self._size_checks,
                "rotations": self._rotations,
                "archives_created": self._archives_created,
                "archives_renumbered": self._archives_renumbered,
                "archives_removed": self._archives_removed,
                "failures": dict(self._failures),
                "uptime_seconds": time.monotonic() - self._start_time,
            }
