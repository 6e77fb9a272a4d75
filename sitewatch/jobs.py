from __future__ import annotations

import queue
from typing import Iterable, Optional

from .models import CrawlJob


class JobQueue:
    """Unbounded FIFO hand-off of crawl jobs from producers to workers.

    No deduplication and no priority: the same URL may be queued many times
    and is crawled each time.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[Optional[CrawlJob]] = queue.Queue()

    def put(self, job: CrawlJob) -> None:
        self._queue.put(job)

    def put_many(self, jobs: Iterable[CrawlJob]) -> int:
        count = 0
        for job in jobs:
            self._queue.put(job)
            count += 1
        return count

    def get(self) -> Optional[CrawlJob]:
        """Block until a job is available; None tells the consumer to exit."""
        return self._queue.get()

    def close(self, consumers: int) -> None:
        """Queue one exit marker per consumer behind the jobs already queued."""
        for _ in range(consumers):
            self._queue.put(None)

    def discard_pending(self) -> int:
        """Drop every job not yet picked up by a worker."""
        dropped = 0
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return dropped
            if item is None:
                self._queue.put(None)
                return dropped
            dropped += 1

    def pending(self) -> int:
        return self._queue.qsize()
