from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from .base import BaseCrawler
from .jobs import JobQueue

log = logging.getLogger(__name__)


class WorkerPool:
    """Runs a fixed number of worker threads draining one job queue.

    Each worker blocks on the queue and hands every job to the shared
    crawler; pacing comes from the crawler's rate limiter, which all workers
    share. stop() lets the workers finish every job queued before it.
    """

    def __init__(self, crawler: BaseCrawler, jobs: JobQueue, workers: int = 1) -> None:
        self._crawler = crawler
        self._jobs = jobs
        self._workers = max(1, int(workers))
        self._executor = ThreadPoolExecutor(max_workers=self._workers, thread_name_prefix="crawl-worker")

        self._lock = threading.Lock()
        self._running = False
        self._processed = 0

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._running = True
        for index in range(self._workers):
            self._executor.submit(self._worker_loop, index)
        log.debug(f"worker pool started workers={self._workers}")

    def stop(self, wait: bool = True) -> None:
        """Stop accepting work once the queue is drained; optionally wait for the workers."""
        with self._lock:
            if not self._running:
                return
            self._running = False
        self._jobs.close(self._workers)
        self._executor.shutdown(wait=wait, cancel_futures=False)

    def join(self) -> None:
        """Block until every worker has exited."""
        self._executor.shutdown(wait=True)

    def _worker_loop(self, index: int) -> None:
        while True:
            job = self._jobs.get()
            if job is None:
                break
            try:
                self._crawler.run(job)
            except Exception:  # noqa: BLE001
                log.exception(f"worker={index} job failed url={job.url}")
            with self._lock:
                self._processed += 1
        log.debug(f"worker={index} exit")

    @property
    def running(self) -> bool:
        return self._running

    @property
    def processed(self) -> int:
        return self._processed

    @property
    def workers(self) -> int:
        return self._workers
