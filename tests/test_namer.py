"""Tests for archive naming."""

import re
from datetime import datetime, timedelta, timezone

from logrotor.config import SuffixExtension
from logrotor.namer import (
    archive_path_for,
    generation_of,
    strip_suffix,
    suffix_of,
    with_generation,
)

DATE_UUID_RE = re.compile(
    r"^/var/log/app\.log\.\d{8}T\d{6}Z_[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$"
)


class TestArchivePathFor:
    def test_numbering_always_uses_one(self):
        assert archive_path_for("/var/log/app.log", SuffixExtension.NUMBERING) == "/var/log/app.log.1"

    def test_date_uuid_format(self):
        path = archive_path_for("/var/log/app.log", SuffixExtension.DATE_UUID)
        assert DATE_UUID_RE.match(path), path

    def test_date_uuid_uses_utc_timestamp(self):
        local = datetime(2025, 1, 15, 14, 30, 5, tzinfo=timezone(timedelta(hours=2)))
        path = archive_path_for("/var/log/app.log", SuffixExtension.DATE_UUID,
                                now=local, unique_id="ABCDEF")
        assert path == "/var/log/app.log.20250115T123005Z_abcdef"

    def test_same_second_names_differ(self):
        now = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
        first = archive_path_for("/var/log/app.log", SuffixExtension.DATE_UUID, now=now)
        second = archive_path_for("/var/log/app.log", SuffixExtension.DATE_UUID, now=now)
        assert first != second
        assert first.split("_")[0] == second.split("_")[0]


class TestSuffixHelpers:
    def test_strip_suffix(self):
        assert strip_suffix("/var/log/app.log.3") == "/var/log/app.log"
        assert strip_suffix("/var/log/app.log.20250115T120000Z_abc") == "/var/log/app.log"

    def test_suffix_of(self):
        assert suffix_of("/var/log/app.log.12") == "12"
        assert suffix_of("/var/log/noext") == ""

    def test_generation_of(self):
        assert generation_of("/var/log/app.log.4") == 4
        assert generation_of("/var/log/app.log.20250115T120000Z_abc") is None

    def test_with_generation(self):
        assert with_generation("/var/log/app.log.2", 3) == "/var/log/app.log.3"
