"""Tests for the unsynced-write buffer."""

from logrotor.metrics import RotationMetrics
from logrotor.write_buffer import WriteBuffer


def _make_buffer(threshold=3, fail=False):
    calls = []

    def flush():
        calls.append(1)
        if fail:
            raise OSError("disk gone")

    metrics = RotationMetrics()
    return WriteBuffer(flush, threshold, metrics=metrics), calls, metrics


class TestThresholdFlush:
    def test_no_flush_below_threshold(self):
        buf, calls, _ = _make_buffer(threshold=3)
        for _ in range(2):
            buf.record_write()
            assert not buf.flush_if_needed()
        assert calls == []
        assert buf.unsynced_writes == 2

    def test_flush_at_threshold(self):
        buf, calls, metrics = _make_buffer(threshold=3)
        for _ in range(3):
            buf.record_write()
            buf.flush_if_needed()
        assert len(calls) == 1
        assert buf.unsynced_writes == 0
        assert metrics.snapshot()["flushes"] == 1

    def test_never_more_than_threshold_unsynced(self):
        buf, calls, _ = _make_buffer(threshold=4)
        for _ in range(17):
            buf.record_write()
            buf.flush_if_needed()
            assert buf.unsynced_writes < 4
        assert len(calls) == 4


class TestForcedFlush:
    def test_force_with_pending(self):
        buf, calls, _ = _make_buffer(threshold=100)
        buf.record_write()
        assert buf.flush_if_needed(force=True)
        assert len(calls) == 1
        assert buf.unsynced_writes == 0

    def test_force_without_pending_is_noop(self):
        buf, calls, _ = _make_buffer(threshold=100)
        assert not buf.flush_if_needed(force=True)
        assert calls == []


def test_failed_flush_is_counted_and_resets():
    buf, calls, metrics = _make_buffer(threshold=1, fail=True)
    buf.record_write()
    assert buf.flush_if_needed()
    assert buf.unsynced_writes == 0
    snap = metrics.snapshot()
    assert snap["flushes"] == 0
    assert snap["failures"] == {"flush": 1}
