"""FileRotationSink: appends lines to one file and rotates it by size.

All file work for a sink happens on its own worker thread. Callers only
enqueue; the worker appends, syncs, checks the throttle and rotates one
item at a time, so the write counter, throttle and file handle are never
shared between threads.
"""

import itertools
import logging
import queue
import threading
from dataclasses import dataclass, field

from logrotor.config import SinkConfig
from logrotor.errors import FileOpenError
from logrotor.levels import LogLevel, format_line, parse_level
from logrotor.metadata import FileMetadata, default_metadata
from logrotor.metrics import RotationMetrics
from logrotor.rotator import RotationExecutor, RotationResult
from logrotor.target import TargetFile, parse_permission, validate_path
from logrotor.throttle import RotationThrottle
from logrotor.write_buffer import WriteBuffer

logger = logging.getLogger(__name__)

# Lower runs first. Control commands overtake queued lines; everything that
# must respect write order (lines, forced rotation, drain, stop) shares a priority.
PRIORITY_CONTROL = 0
PRIORITY_ORDERED = 1


@dataclass
class _Command:
    kind: str
    payload: object = None
    done: threading.Event | None = field(default=None)
    result: object = None


class SinkWorker(threading.Thread):
    """Single consumer of a sink's command queue."""

    def __init__(self, handler, name: str):
        super().__init__(name=name, daemon=True)
        self._handler = handler
        self._queue: queue.PriorityQueue = queue.PriorityQueue()
        self._seq = itertools.count()

    def submit(self, command: _Command, priority: int = PRIORITY_ORDERED):
        self._queue.put((priority, next(self._seq), command))

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def run(self):
        while True:
            _priority, _seq, command = self._queue.get()
            try:
                self._handler(command)
            except Exception:
                logger.exception("Sink worker failed handling %r", command.kind)
            finally:
                if command.done is not None:
                    command.done.set()
            if command.kind == "stop":
                return


class FileRotationSink:
    """Log sink writing to ``config.file_path`` with throttled size-based rotation.

    Construction validates the path and permission and opens the file,
    raising a RotationSinkError subclass on failure. After that no method
    raises because of filesystem trouble.
    """

    def __init__(
        self,
        config: SinkConfig,
        observer=None,
        metadata: FileMetadata | None = None,
        formatter=None,
        clock=None,
        now=None,
    ):
        self.config = config
        path = validate_path(config.file_path)
        mode = parse_permission(config.file_permission)

        self._metadata = metadata or default_metadata()
        self._formatter = formatter or format_line
        self._metrics = RotationMetrics()
        self._target = TargetFile(path, mode, encoding=config.encoding)
        try:
            self._target.open()
        except OSError as exc:
            raise FileOpenError(path, exc) from exc

        self._throttle = RotationThrottle(config.check_frequency, config.check_interval, clock=clock)
        self._buffer = WriteBuffer(self._sync, config.flush_threshold, metrics=self._metrics)
        self._executor = RotationExecutor(
            path, config.rotation, metadata=self._metadata,
            observer=observer, metrics=self._metrics, now=now,
        )
        self._rotation_paused = threading.Event()
        self._closed = False
        self._close_lock = threading.Lock()
        self._degraded = False
        self._last_rotation: RotationResult | None = None

        self._worker = SinkWorker(self._handle, name=f"logrotor-{config.label or path}")
        self._worker.start()
        logger.info("Initialized sink for %s (suffix=%s, max_size=%d, max_archives=%d)",
                    path, config.rotation.suffix_extension.value,
                    config.rotation.max_file_size, config.rotation.max_archived_files_count)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def path(self) -> str:
        return self._target.path

    @property
    def metrics(self) -> RotationMetrics:
        return self._metrics

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def rotation_paused(self) -> bool:
        return self._rotation_paused.is_set()

    @property
    def last_rotation(self) -> RotationResult | None:
        return self._last_rotation

    # ------------------------------------------------------------------
    # Write API
    # ------------------------------------------------------------------

    def log(self, level, message: str):
        """Queue one line. Never blocks on file I/O and never raises for I/O errors."""
        level = parse_level(level)
        if level < self.config.min_level:
            self._metrics.record_filtered()
            return
        line = self._formatter(level, message, self.config.label)
        # close() queues stop under the same lock, so no line lands behind it
        with self._close_lock:
            if not self._closed:
                self._worker.submit(_Command("line", line))
                return
        self._metrics.record_dropped()
        logger.debug("Dropping line for closed sink %s", self.path)

    def trace(self, message: str):
        self.log(LogLevel.TRACE, message)

    def debug(self, message: str):
        self.log(LogLevel.DEBUG, message)

    def info(self, message: str):
        self.log(LogLevel.INFO, message)

    def notice(self, message: str):
        self.log(LogLevel.NOTICE, message)

    def warning(self, message: str):
        self.log(LogLevel.WARNING, message)

    def error(self, message: str):
        self.log(LogLevel.ERROR, message)

    def critical(self, message: str):
        self.log(LogLevel.CRITICAL, message)

    # ------------------------------------------------------------------
    # Control API
    # ------------------------------------------------------------------

    def _call(self, kind: str, priority: int, wait: bool, timeout: float | None, payload=None):
        command = _Command(kind, payload, done=threading.Event() if wait else None)
        with self._close_lock:
            if self._closed:
                return None
            self._worker.submit(command, priority)
        if not wait:
            return None
        if not command.done.wait(timeout):
            logger.warning("Timed out waiting for %s on %s", kind, self.path)
            return None
        return command.result

    def flush(self, wait: bool = True, timeout: float | None = None, ordered: bool = False):
        """Sync unsynced writes.

        By default the sync runs ahead of any queued lines, so lines still in
        the queue are not covered. With ``ordered=True`` it runs after every
        line queued so far, making them all durable.
        """
        priority = PRIORITY_ORDERED if ordered else PRIORITY_CONTROL
        self._call("flush", priority, wait, timeout)

    def drain(self, timeout: float | None = None) -> bool:
        """Block until every line queued so far has been handled."""
        return self._call("noop", PRIORITY_ORDERED, True, timeout) is True

    def rotate_now(self, wait: bool = True, timeout: float | None = None) -> RotationResult | None:
        """Rotate after the lines already queued, skipping throttle and size check."""
        return self._call("rotate", PRIORITY_ORDERED, wait, timeout)

    def pause_rotation(self):
        self._rotation_paused.set()
        logger.debug("Rotation paused for %s", self.path)

    def resume_rotation(self):
        self._rotation_paused.clear()
        logger.debug("Rotation resumed for %s", self.path)

    def suspend(self):
        """Host is going to the background: stop rotating and sync right away."""
        self.pause_rotation()
        self.flush(wait=False)

    def resume(self):
        self.resume_rotation()

    def close(self, timeout: float | None = 5.0):
        """Handle queued lines, sync, close the file and stop the worker."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
            self._worker.submit(_Command("stop"), PRIORITY_ORDERED)
        self._worker.join(timeout)
        if self._worker.is_alive():
            logger.warning("Sink worker for %s did not stop within %ss", self.path, timeout)
        logger.info("Closed sink for %s, metrics: %s", self.path, self._metrics.snapshot())

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    # ------------------------------------------------------------------
    # Worker side
    # ------------------------------------------------------------------

    def _handle(self, command: _Command):
        if command.kind == "line":
            self._append(command.payload)
        elif command.kind == "flush":
            self._buffer.flush_if_needed(force=True)
        elif command.kind == "rotate":
            command.result = self._rotate()
        elif command.kind == "noop":
            command.result = True
        elif command.kind == "stop":
            self._buffer.flush_if_needed(force=True)
            self._target.close()

    def _sync(self):
        if self.config.fsync:
            self._target.sync()

    def _ensure_open(self) -> bool:
        """Reopen the target if a previous rotation could not. One attempt per line."""
        if self._target.is_open:
            return True
        try:
            self._target.open()
        except OSError as exc:
            if not self._degraded:
                logger.warning("Target %s unavailable, dropping lines until it can be reopened: %s",
                               self.path, exc)
            self._degraded = True
            return False
        if self._degraded:
            logger.info("Target %s reopened, resuming writes", self.path)
        self._degraded = False
        return True

    def _append(self, line: str):
        if not self._ensure_open():
            self._metrics.record_dropped()
        else:
            try:
                self._target.write_line(line)
            except OSError as exc:
                logger.error("Appending to %s failed: %s", self.path, exc)
                self._metrics.record_failure("append")
                self._metrics.record_dropped()
            else:
                self._metrics.record_write()
                self._buffer.record_write()
                self._buffer.flush_if_needed()
        self._maybe_rotate()

    def _maybe_rotate(self):
        if self._rotation_paused.is_set():
            logger.debug("Rotation paused, skipping check for %s", self.path)
            return
        if not self._throttle.tick():
            return
        self._metrics.record_size_check()
        try:
            size = self._metadata.size(self.path)
        except OSError as exc:
            logger.debug("Size check on %s failed: %s", self.path, exc)
            self._metrics.record_failure("stat")
            return
        if size <= self.config.rotation.max_file_size:
            return
        logger.info("%s is %d bytes (limit %d), rotating",
                    self.path, size, self.config.rotation.max_file_size)
        self._rotate()

    def _rotate(self) -> RotationResult:
        # Sync and release the handle before the rename.
        self._buffer.flush_if_needed(force=True)
        self._target.close()
        result = self._executor.rotate(reopen=self._target.open)
        if not result.reopened:
            self._degraded = True
        self._last_rotation = result
        return result
