"""
Hourly call quota for paid AI requests.

Sliding one-hour window, shared by everything holding the same instance.
Calls arrive from worker threads, so the call list is guarded by a lock.
"""

import logging
import threading
import time
from typing import List

logger = logging.getLogger(__name__)


class HourlyQuota:
    """Sliding-window call counter."""

    def __init__(self, limit: int, window_seconds: int = 3600, clock=time.time):
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._calls: List[float] = []
        self._lock = threading.Lock()

    def _prune(self) -> None:
        window_start = self._clock() - self.window_seconds
        self._calls = [t for t in self._calls if t > window_start]

    def allow(self) -> bool:
        """Check whether another call fits in the current window."""
        with self._lock:
            self._prune()
            used = len(self._calls)
        if used >= self.limit:
            logger.warning(f"Hourly AI quota of {self.limit} reached")
            return False
        return True

    def record(self) -> None:
        """Count one call against the quota."""
        with self._lock:
            self._calls.append(self._clock())

    @property
    def remaining(self) -> int:
        with self._lock:
            self._prune()
            return max(0, self.limit - len(self._calls))
