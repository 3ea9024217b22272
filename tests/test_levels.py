"""Tests for log levels and line formatting."""

import logging
from datetime import datetime, timezone

import pytest

from logrotor.levels import LogLevel, format_line, from_stdlib, parse_level


@pytest.mark.parametrize("value,expected", [
    ("info", LogLevel.INFO),
    ("WARN", LogLevel.WARNING),
    (" error ", LogLevel.ERROR),
    ("fatal", LogLevel.CRITICAL),
    (10, LogLevel.DEBUG),
    (LogLevel.TRACE, LogLevel.TRACE),
])
def test_parse_level(value, expected):
    assert parse_level(value) is expected


def test_parse_level_rejects_unknown():
    with pytest.raises(ValueError):
        parse_level("verbose")


@pytest.mark.parametrize("levelno,expected", [
    (logging.DEBUG, LogLevel.DEBUG),
    (logging.INFO, LogLevel.INFO),
    (logging.WARNING, LogLevel.WARNING),
    (logging.ERROR, LogLevel.ERROR),
    (logging.CRITICAL, LogLevel.CRITICAL),
    (5, LogLevel.TRACE),
    (27, LogLevel.NOTICE),
])
def test_from_stdlib(levelno, expected):
    assert from_stdlib(levelno) is expected


def test_format_line():
    when = datetime(2025, 1, 15, 12, 0, 0, 123456, tzinfo=timezone.utc)
    assert format_line(LogLevel.INFO, "ready", "api", when) == \
        "2025-01-15T12:00:00.123Z [INFO] [api] ready"
    assert format_line(LogLevel.ERROR, "boom", when=when) == \
        "2025-01-15T12:00:00.123Z [ERROR] boom"
