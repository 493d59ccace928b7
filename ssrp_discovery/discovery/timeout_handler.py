"""Deadline tracking for the discovery collection window."""

import time
from typing import Callable, Optional


class ScanDeadline:
    """Tracks the overall time budget of one scan.

    The clock is injectable so the window can be driven by tests.
    """

    def __init__(self, timeout: float, clock: Callable[[], float] = time.monotonic):
        """Initialize scan deadline.

        Args:
            timeout: Overall window in seconds.
            clock: Monotonic time source. Default: time.monotonic.
        """
        self.timeout = timeout
        self._clock = clock
        self._start_time: Optional[float] = None

    @property
    def elapsed(self) -> float:
        """Seconds elapsed since start."""
        if self._start_time is None:
            return 0.0
        return self._clock() - self._start_time

    @property
    def remaining(self) -> float:
        """Seconds remaining before the window closes."""
        return max(0.0, self.timeout - self.elapsed)

    @property
    def is_expired(self) -> bool:
        """Whether the window has closed."""
        return self.elapsed >= self.timeout

    def start(self) -> None:
        """Start the window."""
        self._start_time = self._clock()
