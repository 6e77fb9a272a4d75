from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlsplit

from .base import BaseCrawler
from .config import WatchConfig, parse_interval
from .controller import WorkerPool
from .errors import InvalidCommand, SchedulerStateError
from .factory import CrawlerFactory
from .jobs import JobQueue
from .metrics import MetricsCollector
from .parser import PageProcessor
from .rate_limiter import RateLimiter
from .scheduler import Scheduler
from .storage import COLUMNS, ListingStore, SqliteListingStore, render_tsv, write_tsv

log = logging.getLogger(__name__)


@dataclass
class ScheduleState:
    url: str = ""
    interval_minutes: int = 0
    scheduler: Optional[Scheduler] = None
    pool: Optional[WorkerPool] = None
    jobs: Optional[JobQueue] = None

    @property
    def active(self) -> bool:
        return self.scheduler is not None


class CrawlSession:
    """Operator-facing controller owning the schedule state and the store.

    Each start() builds a fresh job queue, worker pool and scheduler. stop()
    cancels only the scheduler; the old pool keeps draining its queue in the
    background and is joined when the session closes.
    """

    def __init__(
        self,
        config: WatchConfig,
        store: Optional[ListingStore] = None,
        crawler: Optional[BaseCrawler] = None,
    ) -> None:
        self.config = config
        self.store = store if store is not None else SqliteListingStore(config.db_path)
        self.metrics = MetricsCollector()
        if crawler is None:
            factory = CrawlerFactory(
                PageProcessor(self.store, config.selectors),
                rate_limiter=RateLimiter(config.rate_interval_secs),
                metrics=self.metrics,
                timeout=config.fetch_timeout,
                user_agent=config.user_agent,
                impersonate=config.impersonate,
            )
            crawler = factory.create_crawler(config.fetcher)
        self.crawler = crawler

        self.state = ScheduleState(url=config.url, interval_minutes=config.interval_minutes)
        self._lock = threading.Lock()
        self._draining: List[WorkerPool] = []
        self._draining_queues: List[JobQueue] = []

    # --- commands ---
    def set_url(self, url: str) -> str:
        url = (url or "").strip()
        parts = urlsplit(url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise InvalidCommand(f"not an http(s) URL: {url!r}")
        self.state.url = url
        if self.state.active:
            log.info("url changed; takes effect on next start")
        return url

    def set_interval(self, value) -> int:
        minutes = parse_interval(value)
        self.state.interval_minutes = minutes
        if self.state.active:
            log.info("interval changed; takes effect on next start")
        return minutes

    def start(self) -> None:
        with self._lock:
            if self.state.active:
                raise SchedulerStateError("already started; stop first")
            if not self.state.url:
                raise InvalidCommand("no URL set; use set-url <url>")
            if not self.state.interval_minutes:
                raise InvalidCommand("no interval set; use set-interval <minutes>")

            jobs = JobQueue()
            pool = WorkerPool(self.crawler, jobs, workers=self.config.workers)
            scheduler = Scheduler(
                self.state.url,
                self.state.interval_minutes * 60,
                self.crawler.fetch_bytes,
                jobs,
                selectors=self.config.selectors,
            )
            pool.start()
            scheduler.start()
            self.state.jobs = jobs
            self.state.pool = pool
            self.state.scheduler = scheduler

    def stop(self) -> None:
        with self._lock:
            if not self.state.active:
                raise SchedulerStateError("not started")
            self.state.scheduler.stop()
            self.state.pool.stop(wait=False)
            self._draining.append(self.state.pool)
            self._draining_queues.append(self.state.jobs)
            self.state.scheduler = None
            self.state.pool = None
            self.state.jobs = None

    def query(self, text: str) -> str:
        if not text or not text.strip():
            raise InvalidCommand("usage: query <sql>")
        return render_tsv(self.store.query(text))

    def export(self, path: str) -> int:
        if not path:
            raise InvalidCommand("usage: export <path>")
        result = self.store.query(f"SELECT {', '.join(COLUMNS)} FROM cars ORDER BY id")
        with Path(path).open("w", encoding="utf-8", newline="") as f:
            count = write_tsv(result, f)
        log.info(f"export done path={path} rows={count}")
        return count

    def status(self) -> str:
        state = self.state
        stats = self.metrics.snapshot(self.config.metrics_window_secs)
        lines = [
            f"state      : {'active' if state.active else 'idle'}",
            f"url        : {state.url or '-'}",
            f"interval   : {state.interval_minutes or '-'} min",
            f"queued     : {state.jobs.pending() if state.jobs else 0}",
            f"cycles     : {state.scheduler.cycles if state.scheduler else 0}",
            f"last {stats.window_secs}s : pages={stats.pages_fetched} ok={stats.pages_succeeded} "
            f"transport_errors={stats.transport_errors} malformed={stats.malformed_pages} "
            f"upserted={stats.records_upserted} skipped={stats.rows_skipped} "
            f"avg_latency={stats.avg_latency_ms:.0f}ms",
        ]
        return "\n".join(lines)

    def close(self) -> None:
        """Stop any active crawl, drop unfetched jobs and wait for in-flight fetches."""
        if self.state.active:
            self.stop()
        for jobs in self._draining_queues:
            dropped = jobs.discard_pending()
            if dropped:
                log.info(f"dropped pending jobs count={dropped}")
        for pool in self._draining:
            pool.join()
        self._draining.clear()
        self._draining_queues.clear()
        self.store.close()
