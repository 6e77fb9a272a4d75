from __future__ import annotations

from typing import Dict, Optional

from .base import BaseCrawler
from .crawlers import DEFAULT_USER_AGENT, CurlCrawler, RequestsCrawler
from .metrics import MetricsCollector
from .parser import PageProcessor
from .rate_limiter import RateLimiter


class CrawlerFactory:
    """Factory for creating page crawlers by fetcher name.

    Instances are cached per name: crawlers hold no per-job state, and
    sharing one instance keeps a single rate limiter in front of every fetch.
    """

    def __init__(
        self,
        processor: PageProcessor,
        rate_limiter: RateLimiter,
        metrics: Optional[MetricsCollector] = None,
        timeout: Optional[float] = 20.0,
        user_agent: str = DEFAULT_USER_AGENT,
        impersonate: str = "chrome120",
    ) -> None:
        self._processor = processor
        self._rate_limiter = rate_limiter
        self._metrics = metrics
        self._timeout = timeout
        self._user_agent = user_agent
        self._impersonate = impersonate
        self._cache: Dict[str, BaseCrawler] = {}

    def create_crawler(self, fetcher: str) -> BaseCrawler:
        if fetcher in self._cache:
            return self._cache[fetcher]

        if fetcher == "requests":
            crawler: BaseCrawler = RequestsCrawler(
                self._processor,
                rate_limiter=self._rate_limiter,
                timeout=self._timeout,
                user_agent=self._user_agent,
                metrics=self._metrics,
            )
        elif fetcher == "curl":
            crawler = CurlCrawler(
                self._processor,
                rate_limiter=self._rate_limiter,
                timeout=self._timeout,
                impersonate=self._impersonate,
                metrics=self._metrics,
            )
        else:
            raise ValueError(f"Unknown fetcher: {fetcher}")

        self._cache[fetcher] = crawler
        return crawler
