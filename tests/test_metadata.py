"""Tests for file metadata lookups."""

import os

import pytest

from logrotor.metadata import StatFileMetadata, WindowsFileMetadata, default_metadata


def test_stat_metadata(tmp_path):
    path = tmp_path / "a.log"
    path.write_bytes(b"12345")
    os.utime(path, ns=(1_700_000_000_000_000_000, 1_700_000_000_000_000_000))
    meta = StatFileMetadata()
    assert meta.size(str(path)) == 5
    assert meta.mtime_ns(str(path)) == 1_700_000_000_000_000_000


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        StatFileMetadata().size(str(tmp_path / "missing"))


@pytest.mark.parametrize("platform,expected", [
    ("win32", WindowsFileMetadata),
    ("linux", StatFileMetadata),
    ("darwin", StatFileMetadata),
])
def test_default_metadata_per_platform(platform, expected):
    assert type(default_metadata(platform)) is expected


class TestWindowsRetry:
    def test_retries_sharing_violation(self, tmp_path, monkeypatch):
        path = tmp_path / "busy.log"
        path.write_bytes(b"abc")
        calls = []
        real_size = StatFileMetadata.size

        def flaky_size(self, p):
            calls.append(p)
            if len(calls) < 3:
                raise PermissionError("in use by another process")
            return real_size(self, p)

        monkeypatch.setattr(StatFileMetadata, "size", flaky_size)
        assert WindowsFileMetadata(attempts=3, delay=0).size(str(path)) == 3
        assert len(calls) == 3

    def test_gives_up_after_attempts(self, tmp_path, monkeypatch):
        def always_busy(self, p):
            raise PermissionError("in use")

        monkeypatch.setattr(StatFileMetadata, "mtime_ns", always_busy)
        with pytest.raises(PermissionError):
            WindowsFileMetadata(attempts=2, delay=0).mtime_ns(str(tmp_path))
