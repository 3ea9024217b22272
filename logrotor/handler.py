"""logging.Handler that routes stdlib log records into a FileRotationSink."""

import logging

from logrotor.levels import from_stdlib

DEFAULT_RECORD_FORMAT = "%(name)s: %(message)s"
FLUSH_TIMEOUT = 5.0  # seconds


class RotatingSinkHandler(logging.Handler):
    """Forwards each record to ``sink.log``.

    The sink stamps the time and level itself, so the default record
    format only carries the logger name and message. Records emitted by
    logrotor's own modules are skipped; they describe the sink and must
    not loop back into the file it manages.
    """

    def __init__(self, sink, level=logging.NOTSET, close_sink: bool = False):
        super().__init__(level)
        self.sink = sink
        self._close_sink = close_sink
        self.setFormatter(logging.Formatter(DEFAULT_RECORD_FORMAT))

    def filter(self, record: logging.LogRecord):
        # runs before the handler lock is taken, so the sink worker never waits on it
        if record.name == "logrotor" or record.name.startswith("logrotor."):
            return False
        return super().filter(record)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.sink.log(from_stdlib(record.levelno), self.format(record))
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        self.sink.flush(ordered=True, timeout=FLUSH_TIMEOUT)

    def close(self) -> None:
        try:
            if self._close_sink:
                self.sink.close()
        finally:
            super().close()
