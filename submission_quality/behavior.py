"""
Submission behaviour lookups for spam detection.

The detector only needs "how many submissions came from this IP in the
last hour". Persistent stores answer that asynchronously, so callers
pre-fetch the count into a StaticBehaviorContext before analysis.
"""

from datetime import timedelta
from typing import Protocol

RECENT_WINDOW = timedelta(hours=1)


class BehaviorContext(Protocol):
    """Recent-submission lookup by IP address."""

    def count_recent_submissions(self, ip_address: str, window: timedelta = RECENT_WINDOW) -> int:
        ...


class StaticBehaviorContext:
    """Behaviour context holding a count looked up ahead of time."""

    def __init__(self, recent_count: int = 0):
        self.recent_count = recent_count

    def count_recent_submissions(self, ip_address: str, window: timedelta = RECENT_WINDOW) -> int:
        return self.recent_count
