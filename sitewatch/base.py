from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

from .errors import SiteWatchError
from .metrics import MetricsCollector
from .models import CrawlJob, CrawlResult
from .parser import PageProcessor

log = logging.getLogger(__name__)


class BaseCrawler(ABC):
    """Abstract base class defining the fetch-then-process pipeline for one job.

    run() never raises: every failure ends up in the returned CrawlResult
    (error_type holds the exception class name) and in the log, so one bad
    page cannot stop the worker that picked it up.
    """

    def __init__(self, processor: PageProcessor, metrics: Optional[MetricsCollector] = None) -> None:
        self._processor = processor
        self._metrics = metrics

    def run(self, job: CrawlJob) -> CrawlResult:
        start_ms = self._now_ms()
        status_code = None

        try:
            self.validate(job)
            response = self.fetch(job.url)
            status_code = getattr(response, "status_code", None)
            report = self._processor.process(response.content)
        except SiteWatchError as exc:
            status_code = getattr(exc, "status_code", status_code)
            log.warning(f"job dropped url={job.url} {type(exc).__name__}: {exc}")
            return self._finish(job, start_ms, status_code, error=exc)
        except Exception as exc:  # noqa: BLE001
            log.exception(f"job crashed url={job.url}")
            return self._finish(job, start_ms, status_code, error=exc)

        result = CrawlResult(
            url=job.url,
            success=True,
            status_code=status_code,
            latency_ms=self._now_ms() - start_ms,
            upserted=report.upserted,
            skipped=len(report.skipped),
            warnings=len(report.warnings),
            error_type=None,
        )
        log.info(
            f"page done url={job.url} upserted={result.upserted} skipped={result.skipped} "
            f"warnings={result.warnings} {result.latency_ms}ms"
        )
        if self._metrics:
            self._metrics.record_result(result)
        return result

    def fetch_bytes(self, url: str) -> bytes:
        """Fetch ``url`` and return the raw body; raises TransportError."""
        return self.fetch(url).content

    def validate(self, job: CrawlJob) -> None:
        if not job.url:
            raise ValueError("job.url is required")

    @abstractmethod
    def fetch(self, url: str) -> Any:
        """Return a response object exposing ``status_code`` and ``content``."""

    def _finish(self, job: CrawlJob, start_ms: int, status_code: Optional[int], error: Exception) -> CrawlResult:
        result = CrawlResult(
            url=job.url,
            success=False,
            status_code=status_code,
            latency_ms=self._now_ms() - start_ms,
            upserted=0,
            skipped=0,
            warnings=0,
            error_type=type(error).__name__,
        )
        if self._metrics:
            self._metrics.record_result(result)
        return result

    @staticmethod
    def _now_ms() -> int:
        return int(time.time() * 1000)
