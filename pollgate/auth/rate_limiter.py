"""Fixed-window request rate limiter backed by in-process state."""

from __future__ import annotations

import math
import time
from threading import Lock
from typing import Callable

from pollgate.auth.models import RateLimitCounter


class FixedWindowRateLimiter:
    """Count requests per key inside fixed, non-overlapping time windows.

    A burst straddling a window boundary can pass up to twice the limit.
    Counters are never evicted; keep key cardinality bounded.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        """Initialize limiter storage."""
        self._clock = clock
        self._lock = Lock()
        self._counters: dict[str, RateLimitCounter] = {}

    def check(self, key: str, max_requests: int, window_seconds: float) -> bool:
        """Record a request for key and return whether it is allowed."""
        with self._lock:
            now = self._clock()
            counter = self._counters.get(key)
            if counter is None or now > counter.window_reset_at:
                self._counters[key] = RateLimitCounter(
                    count=1, window_reset_at=now + window_seconds
                )
                return True
            if counter.count < max_requests:
                counter.count += 1
                return True
            return False

    def counter(self, key: str) -> RateLimitCounter | None:
        """Return a copy of the current counter for key, if any."""
        with self._lock:
            current = self._counters.get(key)
            return current.model_copy() if current is not None else None

    def retry_after(self, key: str) -> int:
        """Whole seconds until the window for key resets; 0 for unknown keys."""
        current = self.counter(key)
        if current is None:
            return 0
        return max(0, math.ceil(current.window_reset_at - self._clock()))
