from __future__ import annotations

import threading
import time


class RateLimiter:
    """Thread-safe gate letting at most one caller through per tick interval.

    One instance is shared by every worker, so the fetch rate is bounded by
    the tick regardless of how many workers are running. Calling acquire()
    blocks the current thread until its turn comes."""

    def __init__(self, interval_secs: float) -> None:
        self._interval = max(0.0, float(interval_secs))
        self._lock = threading.Lock()
        self._next_allowed = 0.0

    def acquire(self) -> None:
        """Block until the next tick is available."""
        if self._interval <= 0:
            return
        with self._lock:
            now = time.monotonic()
            if now < self._next_allowed:
                time.sleep(self._next_allowed - now)
            self._next_allowed = max(self._next_allowed, now) + self._interval
