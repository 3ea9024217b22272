"""Log levels and the default line format."""

import enum
import logging
from datetime import datetime, timezone


class LogLevel(enum.IntEnum):
    TRACE = 5
    DEBUG = 10
    INFO = 20
    NOTICE = 25
    WARNING = 30
    ERROR = 40
    CRITICAL = 50


_ALIASES = {
    "WARN": LogLevel.WARNING,
    "FATAL": LogLevel.CRITICAL,
}


def parse_level(value) -> LogLevel:
    """Accept a LogLevel, an int, or a case-insensitive name such as "warn"."""
    if isinstance(value, LogLevel):
        return value
    if isinstance(value, int):
        return LogLevel(value)
    name = str(value).strip().upper()
    if name in _ALIASES:
        return _ALIASES[name]
    try:
        return LogLevel[name]
    except KeyError:
        raise ValueError(f"Unknown log level: {value!r}") from None


def from_stdlib(levelno: int) -> LogLevel:
    """Map a stdlib logging level number onto the nearest LogLevel at or below it."""
    if levelno >= logging.CRITICAL:
        return LogLevel.CRITICAL
    if levelno >= logging.ERROR:
        return LogLevel.ERROR
    if levelno >= logging.WARNING:
        return LogLevel.WARNING
    if levelno >= LogLevel.NOTICE:
        return LogLevel.NOTICE
    if levelno >= logging.INFO:
        return LogLevel.INFO
    if levelno >= logging.DEBUG:
        return LogLevel.DEBUG
    return LogLevel.TRACE


def format_line(level: LogLevel, message: str, label: str = "", when: datetime | None = None) -> str:
    """Render one log line: ``<iso-utc-ms> [LEVEL] [label] message``."""
    now = when or datetime.now(timezone.utc)
    timestamp = now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
    prefix = f"{timestamp} [{level.name}]"
    if label:
        prefix += f" [{label}]"
    return f"{prefix} {message}"
