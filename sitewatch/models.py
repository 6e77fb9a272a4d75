from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional


class DetailSlot(IntEnum):
    """Position of each value inside a listing's comma-separated detail line."""

    ENGINE = 0
    YEAR_MONTH = 1
    ENGINE_SIZE = 2
    POWER_KW = 3
    POWER_HP = 4
    KILOMETERS = 5


@dataclass(frozen=True)
class ListingRecord:
    id: int
    title: str
    price: int
    engine: str = ""
    year: int = 0
    month: int = 0
    engine_size_cc: int = 0
    power_kw: int = 0
    power_hp: int = 0
    kilometers: int = 0

    def to_db_row(self) -> tuple:
        """Values in the column order of the cars table."""
        return (
            self.id,
            self.title,
            self.price,
            self.engine,
            self.year,
            self.month,
            self.engine_size_cc,
            self.power_kw,
            self.power_hp,
            self.kilometers,
        )


@dataclass(frozen=True)
class CrawlJob:
    url: str
    cycle: int = 0


@dataclass(frozen=True)
class CrawlResult:
    url: str
    success: bool
    status_code: Optional[int]
    latency_ms: int
    upserted: int
    skipped: int
    warnings: int
    error_type: Optional[str]


@dataclass
class PageReport:
    upserted: int = 0
    skipped: List[Exception] = field(default_factory=list)
    warnings: List[Exception] = field(default_factory=list)


@dataclass(frozen=True)
class CrawlStats:
    window_secs: int
    pages_fetched: int
    pages_succeeded: int
    transport_errors: int
    malformed_pages: int
    records_upserted: int
    rows_skipped: int
    avg_latency_ms: float
    timestamp: float
