from __future__ import annotations

import time
from collections import deque
from threading import Lock
from typing import Deque, List

from .models import CrawlResult, CrawlStats


class MetricsCollector:
    """Thread-safe collector for crawl results.

    Records one CrawlResult per fetched job and produces aggregated
    CrawlStats over configurable sliding time windows."""

    def __init__(self, maxlen: int = 10000) -> None:
        self._lock = Lock()
        self._events: Deque[tuple[float, CrawlResult]] = deque(maxlen=maxlen)

    def record_result(self, result: CrawlResult) -> None:
        """Record a crawl result with the current timestamp."""
        with self._lock:
            self._events.append((time.time(), result))

    def snapshot(self, window_secs: int) -> CrawlStats:
        """Return aggregated statistics for results within the last window_secs seconds."""
        now = time.time()
        cutoff = now - window_secs
        with self._lock:
            events: List[CrawlResult] = [e for ts, e in self._events if ts >= cutoff]
        total = len(events)
        avg_latency_ms = (sum(e.latency_ms for e in events) / total) if total else 0.0

        return CrawlStats(
            window_secs=window_secs,
            pages_fetched=total,
            pages_succeeded=sum(1 for e in events if e.success),
            transport_errors=sum(1 for e in events if e.error_type == "TransportError"),
            malformed_pages=sum(1 for e in events if e.error_type == "MalformedPage"),
            records_upserted=sum(e.upserted for e in events),
            rows_skipped=sum(e.skipped for e in events),
            avg_latency_ms=avg_latency_ms,
            timestamp=now,
        )
