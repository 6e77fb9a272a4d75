from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from curl_cffi import requests as curl_requests

from .base import BaseCrawler
from .errors import TransportError
from .metrics import MetricsCollector
from .parser import PageProcessor
from .rate_limiter import RateLimiter

log = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/127.0.0.0 Safari/537.36"
)


def _check_status(url: str, response: Any) -> Any:
    status_code = getattr(response, "status_code", None)
    if status_code is not None and int(status_code) >= 400:
        raise TransportError(url, f"HTTP_{status_code}", status_code=status_code)
    return response


class RequestsCrawler(BaseCrawler):
    """Plain HTTP crawler built on requests."""

    def __init__(
        self,
        processor: PageProcessor,
        rate_limiter: RateLimiter,
        timeout: Optional[float] = 20.0,
        user_agent: str = DEFAULT_USER_AGENT,
        *args,
        **kwargs,
    ) -> None:
        super().__init__(processor, *args, **kwargs)
        self._rate_limiter = rate_limiter
        self._timeout = timeout
        self._headers: Dict[str, str] = {
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        }

    def fetch(self, url: str) -> Any:
        self._rate_limiter.acquire()
        log.debug(f"http get start url={url}")
        try:
            response = requests.get(url, headers=self._headers, timeout=self._timeout)
        except requests.RequestException as exc:
            raise TransportError(url, type(exc).__name__) from exc
        log.debug(f"http get done url={url} status={response.status_code}")
        return _check_status(url, response)


class CurlCrawler(BaseCrawler):
    """Crawler impersonating a desktop browser's TLS fingerprint through curl_cffi.

    A new session per fetch; sessions are not shared between worker threads.
    """

    def __init__(
        self,
        processor: PageProcessor,
        rate_limiter: RateLimiter,
        timeout: Optional[float] = 20.0,
        impersonate: str = "chrome120",
        *args,
        **kwargs,
    ) -> None:
        super().__init__(processor, *args, **kwargs)
        self._rate_limiter = rate_limiter
        self._timeout = timeout
        self._impersonate = impersonate

    def fetch(self, url: str) -> Any:
        self._rate_limiter.acquire()
        log.debug(f"curl get start url={url} impersonate={self._impersonate}")
        session = curl_requests.Session()
        try:
            response = session.get(url, impersonate=self._impersonate, timeout=self._timeout)
        except Exception as exc:  # noqa: BLE001
            raise TransportError(url, type(exc).__name__) from exc
        finally:
            session.close()
        log.debug(f"curl get done url={url} status={response.status_code}")
        return _check_status(url, response)
