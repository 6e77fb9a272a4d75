from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .crawlers import DEFAULT_USER_AGENT
from .errors import InvalidCommand
from .parser import ListingSelectors

FETCHERS = ("requests", "curl")


@dataclass
class WatchConfig:
    url: str = ""
    interval_minutes: int = 0
    rate_interval_secs: float = 0.2
    workers: int = 1
    fetch_timeout: Optional[float] = 20.0
    fetcher: str = "requests"
    impersonate: str = "chrome120"
    user_agent: str = DEFAULT_USER_AGENT
    db_path: str = ":memory:"
    metrics_window_secs: int = 300
    log_level: str = "INFO"
    selectors: ListingSelectors = field(default_factory=ListingSelectors)

    def validate(self) -> None:
        """Check every field and coerce numeric strings from JSON to numbers."""
        if self.fetcher not in FETCHERS:
            raise ValueError(f"fetcher must be one of {FETCHERS}, got {self.fetcher!r}")
        self.workers = _coerce("workers", self.workers, int)
        if self.workers < 1:
            raise ValueError("workers must be >= 1")
        self.rate_interval_secs = _coerce("rate_interval_secs", self.rate_interval_secs, float)
        if self.rate_interval_secs < 0:
            raise ValueError("rate_interval_secs must be >= 0")
        if self.fetch_timeout is not None:
            self.fetch_timeout = _coerce("fetch_timeout", self.fetch_timeout, float)
            if self.fetch_timeout <= 0:
                raise ValueError("fetch_timeout must be > 0")
        self.metrics_window_secs = _coerce("metrics_window_secs", self.metrics_window_secs, int)
        if self.interval_minutes not in (0, None, ""):
            self.interval_minutes = parse_interval(self.interval_minutes)
        else:
            self.interval_minutes = 0


def _coerce(name: str, value: Any, kind: type) -> Any:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        return kind(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


def parse_interval(value: Any) -> int:
    """Refresh interval in whole minutes; zero and negative values are rejected."""
    try:
        minutes = int(str(value).strip())
    except ValueError as exc:
        raise InvalidCommand(f"interval must be a whole number of minutes, got {value!r}") from exc
    if minutes <= 0:
        raise InvalidCommand(f"interval must be at least 1 minute, got {minutes}")
    return minutes


def load_config(path: Optional[str] = None, **overrides: Any) -> WatchConfig:
    """Build a WatchConfig from an optional JSON file plus keyword overrides.

    Overrides whose value is None are ignored so argparse defaults do not
    mask values from the file.
    """
    data: Dict[str, Any] = {}
    if path:
        with Path(path).open("r", encoding="utf-8") as f:
            data = json.load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: top-level JSON value must be an object")
    data.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(WatchConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(unknown)}")
    if isinstance(data.get("selectors"), dict):
        data["selectors"] = ListingSelectors(**data["selectors"])

    config = WatchConfig(**data)
    config.validate()
    return config
