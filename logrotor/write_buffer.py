"""Unsynced-write counter that decides when to sync the target file."""

import logging

logger = logging.getLogger(__name__)

DEFAULT_FLUSH_THRESHOLD = 200


class WriteBuffer:
    """Counts writes since the last sync and calls *flush* on threshold or force.

    At most *threshold* writes are ever unsynced, unless a forced flush is
    never requested and the sink stops logging.
    """

    def __init__(self, flush, threshold: int = DEFAULT_FLUSH_THRESHOLD, metrics=None):
        self._flush = flush
        self.threshold = threshold
        self._metrics = metrics
        self._unsynced = 0

    @property
    def unsynced_writes(self) -> int:
        return self._unsynced

    def record_write(self):
        self._unsynced += 1

    def flush_if_needed(self, force: bool = False) -> bool:
        """Flush when forced with pending writes or when the threshold is met.

        Returns True if a flush was attempted.
        """
        if not ((force and self._unsynced > 0) or self._unsynced >= self.threshold):
            return False
        pending = self._unsynced
        try:
            self._flush()
        except OSError as exc:
            logger.error("Flush of %d unsynced writes failed: %s", pending, exc)
            if self._metrics:
                self._metrics.record_failure("flush")
        else:
            if self._metrics:
                self._metrics.record_flush()
        self._unsynced = 0
        return True
