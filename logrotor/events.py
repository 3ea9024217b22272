"""Rotation notifications: an observer interface and a queue-backed channel."""

import enum
import logging
import queue
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol

logger = logging.getLogger(__name__)


class RotationObserver(Protocol):
    def on_archived(self, old_path: str, new_path: str) -> None:
        ...

    def on_archive_removed(self, path: str) -> None:
        ...


class EventKind(str, enum.Enum):
    ARCHIVED = "archived"
    REMOVED = "removed"


@dataclass(frozen=True)
class RotationEvent:
    kind: EventKind
    path: str
    new_path: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class QueueObserver:
    """Observer that publishes RotationEvent values onto a queue for another thread."""

    def __init__(self, q: queue.Queue | None = None):
        self.queue = q if q is not None else queue.Queue()

    def on_archived(self, old_path: str, new_path: str) -> None:
        self.queue.put(RotationEvent(EventKind.ARCHIVED, old_path, new_path))

    def on_archive_removed(self, path: str) -> None:
        self.queue.put(RotationEvent(EventKind.REMOVED, path))

    def drain(self) -> list[RotationEvent]:
        """Return every event currently queued without blocking."""
        events = []
        while True:
            try:
                events.append(self.queue.get_nowait())
            except queue.Empty:
                return events


def notify(observer, method: str, *args) -> None:
    """Call *method* on *observer* if there is one. A failing observer is logged, never raised."""
    if observer is None:
        return
    try:
        getattr(observer, method)(*args)
    except Exception:
        logger.exception("Rotation observer %s.%s failed", type(observer).__name__, method)
