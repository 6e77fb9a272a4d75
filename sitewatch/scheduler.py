from __future__ import annotations

import enum
import logging
import threading
from typing import Callable, Optional

from .errors import SchedulerStateError, SiteWatchError
from .jobs import JobQueue
from .parser import DEFAULT_SELECTORS, ListingSelectors, discover_jobs

log = logging.getLogger(__name__)


class SchedulerState(enum.Enum):
    IDLE = "idle"
    ACTIVE = "active"


class Scheduler:
    """Periodically re-discovers the listing's pages and queues one job per page.

    Runs in its own thread: one discovery pass right after start(), then one
    per interval until stop() sets the cancellation event. The page count is
    derived again on every pass, so a listing that grows or shrinks is
    followed automatically. Stopping never touches jobs already queued.
    """

    def __init__(
        self,
        root_url: str,
        interval_secs: float,
        fetch: Callable[[str], bytes],
        jobs: JobQueue,
        selectors: ListingSelectors = DEFAULT_SELECTORS,
    ) -> None:
        if interval_secs <= 0:
            raise ValueError("interval_secs must be > 0")
        self._root_url = root_url
        self._interval = interval_secs
        self._fetch = fetch
        self._jobs = jobs
        self._selectors = selectors

        self._lock = threading.Lock()
        self._state = SchedulerState.IDLE
        self._cancel = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._cycle = 0

    def start(self) -> None:
        """Begin the discovery loop in a daemon thread."""
        with self._lock:
            if self._state is SchedulerState.ACTIVE:
                raise SchedulerStateError("scheduler is already active")
            self._cancel = threading.Event()
            self._state = SchedulerState.ACTIVE
            self._thread = threading.Thread(
                target=self._loop, args=(self._cancel,), name="crawl-scheduler", daemon=True
            )
            self._thread.start()
        log.info(f"scheduler start url={self._root_url} interval={self._interval:g}s")

    def stop(self, timeout: Optional[float] = None) -> None:
        """Cancel the loop and wait for a discovery pass in progress to finish."""
        with self._lock:
            if self._state is SchedulerState.IDLE:
                raise SchedulerStateError("scheduler is not active")
            self._state = SchedulerState.IDLE
            self._cancel.set()
            thread = self._thread
            self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        log.info(f"scheduler stop url={self._root_url} cycles={self._cycle}")

    def _loop(self, cancel: threading.Event) -> None:
        self.refresh()
        while not cancel.wait(self._interval):
            self.refresh()

    def refresh(self) -> int:
        """Run one discovery pass; return the number of jobs queued."""
        self._cycle += 1
        cycle = self._cycle
        try:
            raw = self._fetch(self._root_url)
            jobs = discover_jobs(self._root_url, raw, cycle=cycle, selectors=self._selectors)
        except SiteWatchError as exc:
            log.warning(f"discovery failed cycle={cycle} url={self._root_url} {type(exc).__name__}: {exc}")
            return 0
        except Exception:  # noqa: BLE001
            log.exception(f"discovery crashed cycle={cycle} url={self._root_url}")
            return 0
        count = self._jobs.put_many(jobs)
        log.info(f"discovery done cycle={cycle} pages={count} url={self._root_url}")
        return count

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def cycles(self) -> int:
        return self._cycle
