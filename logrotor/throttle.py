"""Gate that limits how often the target file's size is stat-ed."""

import time

DEFAULT_CHECK_FREQUENCY = 50_000
DEFAULT_CHECK_INTERVAL = 60 * 8  # seconds


def should_check(call_count: int, elapsed: float, frequency: int, interval: float) -> bool:
    """Whether a size check is due, whichever threshold is reached first."""
    return call_count == 0 or call_count >= frequency or elapsed >= interval


class RotationThrottle:
    """Counts log calls and fires once per *frequency* calls or *interval* seconds.

    A throttle that has never fired is due on its first call, so an
    oversized file left over from a previous run is rotated promptly.
    Not thread-safe: owned by the sink's worker.
    """

    def __init__(self, frequency: int = DEFAULT_CHECK_FREQUENCY,
                 interval: float = DEFAULT_CHECK_INTERVAL, clock=None):
        self.frequency = frequency
        self.interval = interval
        self._clock = clock or time.monotonic
        self._call_count = 0
        self._last_check: float | None = None

    @property
    def call_count(self) -> int:
        return self._call_count

    @property
    def last_check(self) -> float | None:
        return self._last_check

    def elapsed(self) -> float:
        if self._last_check is None:
            return float("inf")
        return self._clock() - self._last_check

    def tick(self) -> bool:
        """Record one log call. Returns True (and resets) when a check is due."""
        self._call_count += 1
        if not should_check(self._call_count, self.elapsed(), self.frequency, self.interval):
            return False
        self.reset()
        return True

    def reset(self):
        self._call_count = 0
        self._last_check = self._clock()
