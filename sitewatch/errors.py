from __future__ import annotations

from typing import Optional


class SiteWatchError(Exception):
    """Base class for every failure raised by the crawler."""


class TransportError(SiteWatchError):
    """Fetching a URL failed (connection error, timeout or HTTP error status)."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"fetch failed url={url} reason={reason}")
        self.url = url
        self.reason = reason
        self.status_code = status_code


class MalformedPage(SiteWatchError):
    """Raw page bytes could not be turned into a node tree."""


class RowError(SiteWatchError):
    """A listing row could not be mapped and was dropped."""


class MissingKey(RowError):
    """The row's id text holds no usable integer."""


class MissingPrice(RowError):
    """The row's price text holds no usable integer."""


class FieldExtractionWarning(SiteWatchError):
    """A detail slot could not be parsed; the record keeps the zero value.

    Collected on the mapped listing instead of being raised.
    """

    def __init__(self, slot: str, text: str) -> None:
        super().__init__(f"could not parse {slot} from {text!r}")
        self.slot = slot
        self.text = text


class StoreError(SiteWatchError):
    """The listing store rejected an upsert or a query."""


class SchedulerStateError(SiteWatchError):
    """A start/stop command does not match the scheduler's current state."""


class InvalidCommand(SiteWatchError):
    """Operator input was rejected."""
