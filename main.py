"""Demo service — writes synthetic log lines through a rotating file sink."""

import logging
import random
import signal
import sys
import time
import uuid

from logrotor.config import build_cli_parser, config_from_args
from logrotor.events import EventKind, QueueObserver
from logrotor.sink import FileRotationSink

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [logrotor] %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

_running = True
_sink: FileRotationSink | None = None


def _signal_handler(sig, _frame):
    global _running
    logger.info("Shutdown signal received (signal %d), stopping...", sig)
    _running = False


def _suspend_handler(_sig, _frame):
    if _sink is not None:
        logger.info("Suspending rotation and flushing")
        _sink.suspend()


def _resume_handler(_sig, _frame):
    if _sink is not None:
        logger.info("Resuming rotation")
        _sink.resume()


LEVELS = ["INFO", "INFO", "INFO", "INFO", "DEBUG", "WARNING", "ERROR"]
SERVICES = ["auth-api", "order-svc", "payment-gw", "user-svc", "catalog-api"]
MESSAGES = {
    "INFO": [
        "Request processed successfully",
        "Health check passed",
        "Cache hit for user session",
        "Database query completed in 12ms",
    ],
    "DEBUG": [
        "Entering request handler",
        "Token validation started",
    ],
    "WARNING": [
        "Slow query detected (>500ms)",
        "Connection pool nearing capacity",
    ],
    "ERROR": [
        "Failed to connect to database",
        "Timeout waiting for upstream response",
    ],
}


def generate_entry() -> tuple[str, str]:
    level = random.choice(LEVELS)
    service = random.choice(SERVICES)
    req_id = uuid.uuid4().hex[:8]
    return level, f"[{service}] [{req_id}] {random.choice(MESSAGES[level])}"


def _report_events(observer: QueueObserver):
    for event in observer.drain():
        if event.kind is EventKind.ARCHIVED:
            logger.info("Archived %s -> %s", event.path, event.new_path)
        else:
            logger.info("Removed archive %s", event.path)


def main():
    global _sink
    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)
    if hasattr(signal, "SIGUSR1"):
        signal.signal(signal.SIGUSR1, _suspend_handler)
        signal.signal(signal.SIGUSR2, _resume_handler)

    parser = build_cli_parser(description="Rotating log sink demo")
    parser.add_argument("--logs-per-second", type=int, default=20)
    parser.add_argument("--run-time", type=int, default=0,
                        help="Seconds to run, 0 runs until interrupted")
    args = parser.parse_args()
    config = config_from_args(args)

    observer = QueueObserver()
    _sink = FileRotationSink(config, observer=observer)
    logger.info(
        "Config: file=%s, suffix=%s, max_size=%d bytes, max_archives=%d, flush_threshold=%d",
        _sink.path, config.rotation.suffix_extension.value, config.rotation.max_file_size,
        config.rotation.max_archived_files_count, config.flush_threshold,
    )

    delay = 1.0 / max(args.logs_per_second, 1)
    deadline = time.monotonic() + args.run_time if args.run_time else None
    entries_written = 0

    try:
        while _running and (deadline is None or time.monotonic() < deadline):
            level, message = generate_entry()
            _sink.log(level, message)
            entries_written += 1
            _report_events(observer)
            time.sleep(delay)
    except KeyboardInterrupt:
        pass

    _sink.close()
    _report_events(observer)
    logger.info("Shut down cleanly. Total entries logged: %d", entries_written)


if __name__ == "__main__":
    main()
