"""Listing page parsing.

Selector-driven so a different listing layout only needs a new
ListingSelectors. Defaults match the site the crawler was written for:

    .list-view                   listing container
      .talalati-sor              one listing row
        .talalatisor-hirkod      listing code (id)
        h3                       title
        .vetelar                 price (last one wins)
        .talalatisor-info.adatok span   "engine, 2015/03, 1598 cm3, 77 kW, 105 LE, 123 456 km"
    .pagination .last            number of the last page

Id and title come from the first matching node of the row; a row
carries one of each, so later matches are not read.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from .errors import MalformedPage, RowError, StoreError
from .mapper import map_listing
from .models import CrawlJob, PageReport
from .storage import ListingStore

log = logging.getLogger(__name__)

_PAGE_NUMBER = re.compile(r"[0-9]+")

# Upper bound on pages queued per discovery pass.
MAX_PAGES = 10000


@dataclass(frozen=True)
class ListingSelectors:
    container: str = ".list-view"
    row: str = ".talalati-sor"
    listing_id: str = ".talalatisor-hirkod"
    title: str = "h3"
    price: str = ".vetelar"
    details: str = ".talalatisor-info.adatok"
    detail_text: str = "span"
    pagination: str = ".pagination"
    last_page: str = ".last"


DEFAULT_SELECTORS = ListingSelectors()


def parse_document(raw: bytes) -> BeautifulSoup:
    """Parse raw page bytes with lxml; raise MalformedPage when nothing usable comes out."""
    if not raw or not raw.strip():
        raise MalformedPage("empty document")
    try:
        doc = BeautifulSoup(raw, "lxml")
    except Exception as exc:  # noqa: BLE001
        raise MalformedPage(f"parse failed: {exc}") from exc
    if doc.find(True) is None:
        raise MalformedPage("document has no elements")
    return doc


def _text(node: Optional[Tag]) -> str:
    return node.get_text() if node is not None else ""


class PageProcessor:
    """Turns one listing page into upserts, one row at a time."""

    def __init__(self, store: ListingStore, selectors: ListingSelectors = DEFAULT_SELECTORS) -> None:
        self._store = store
        self._sel = selectors

    def process(self, raw: bytes) -> PageReport:
        doc = parse_document(raw)
        report = PageReport()
        for container in doc.select(self._sel.container):
            for row in container.select(self._sel.row):
                self._process_row(row, report)
        return report

    def _process_row(self, row: Tag, report: PageReport) -> None:
        id_text = _text(row.select_one(self._sel.listing_id))
        title_text = _text(row.select_one(self._sel.title))
        prices = row.select(self._sel.price)
        price_text = _text(prices[-1]) if prices else ""
        infos = row.select(self._sel.details)
        detail_text = ""
        if infos:
            detail_text = "".join(span.get_text() for span in infos[-1].select(self._sel.detail_text))

        try:
            mapped = map_listing(id_text, title_text, price_text, detail_text)
        except RowError as exc:
            log.warning(f"row skipped {type(exc).__name__}: {exc}")
            report.skipped.append(exc)
            return
        report.warnings.extend(mapped.warnings)
        try:
            self._store.upsert(mapped.record)
        except StoreError as exc:
            log.error(f"upsert failed id={mapped.record.id} error={exc}")
            report.skipped.append(exc)
            return
        report.upserted += 1


def page_count(doc: BeautifulSoup, selectors: ListingSelectors = DEFAULT_SELECTORS) -> int:
    """Total number of listing pages announced by the pagination control."""
    pagination = doc.select(selectors.pagination)
    if not pagination:
        return 1
    last = next((node for block in pagination for node in block.select(selectors.last_page)), None)
    text = _text(last).strip()
    if not _PAGE_NUMBER.fullmatch(text):
        log.warning(f"unreadable last page text={text!r}, assuming 1 page")
        return 1
    total = int(text)
    if total > MAX_PAGES:
        log.warning(f"last page {total} above limit, capping at {MAX_PAGES}")
        return MAX_PAGES
    return max(total, 1)


def discover_jobs(
    root_url: str,
    raw: bytes,
    cycle: int = 0,
    selectors: ListingSelectors = DEFAULT_SELECTORS,
) -> List[CrawlJob]:
    """Jobs for every page of the listing whose first page is ``raw``.

    The root URL comes first, followed by ``<root>/page2`` .. ``<root>/pageN``.
    """
    total = page_count(parse_document(raw), selectors)
    jobs = [CrawlJob(url=root_url, cycle=cycle)]
    base = root_url.rstrip("/")
    for number in range(2, total + 1):
        jobs.append(CrawlJob(url=f"{base}/page{number}", cycle=cycle))
    return jobs
