from __future__ import annotations

import csv
import io
import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, TextIO, Tuple

from .errors import StoreError
from .models import ListingRecord

log = logging.getLogger(__name__)

COLUMNS: Tuple[str, ...] = (
    "id",
    "name",
    "price",
    "engine",
    "year",
    "month",
    "enginesize",
    "powerKW",
    "powerHP",
    "kilometers",
)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS cars (
    id INTEGER PRIMARY KEY,
    name TEXT,
    price INTEGER,
    engine TEXT,
    year INTEGER,
    month INTEGER,
    enginesize INTEGER,
    powerKW INTEGER,
    powerHP INTEGER,
    kilometers INTEGER
)
"""

UPSERT_SQL = """
INSERT INTO cars (id, name, price, engine, year, month, enginesize, powerKW, powerHP, kilometers)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
ON CONFLICT(id) DO UPDATE SET
    name=excluded.name,
    price=excluded.price,
    engine=excluded.engine,
    year=excluded.year,
    month=excluded.month,
    enginesize=excluded.enginesize,
    powerKW=excluded.powerKW,
    powerHP=excluded.powerHP,
    kilometers=excluded.kilometers
"""


@dataclass(frozen=True)
class QueryResult:
    columns: List[str]
    rows: List[Tuple[Any, ...]] = field(default_factory=list)


class ListingStore(ABC):
    """Abstract base class for listing persistence.

    Implementations must make upsert() safe to call from several worker
    threads at once.
    """

    @abstractmethod
    def upsert(self, record: ListingRecord) -> None:
        """Insert the record, or overwrite every non-key field of the existing row."""

    @abstractmethod
    def query(self, text: str) -> QueryResult:
        """Run a raw read query and return its column names and rows."""

    @abstractmethod
    def close(self) -> None:
        """Release resources."""


class SqliteListingStore(ListingStore):
    """Listings kept in one SQLite connection shared by all threads.

    Statements are serialized with a lock; every upsert is a single
    INSERT ... ON CONFLICT statement so the check and the write for one key
    cannot interleave with another thread.
    """

    def __init__(self, path: str = ":memory:") -> None:
        self._path = path
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(
                path,
                timeout=30.0,
                check_same_thread=False,
                isolation_level=None,
            )
            self._conn.execute(SCHEMA_SQL)
        except sqlite3.Error as exc:
            raise StoreError(f"cannot open database path={path} error={exc}") from exc
        log.debug(f"db init path={path}")

    def upsert(self, record: ListingRecord) -> None:
        try:
            with self._lock:
                self._conn.execute(UPSERT_SQL, record.to_db_row())
        except (sqlite3.Error, OverflowError) as exc:
            raise StoreError(f"upsert id={record.id} error={exc}") from exc

    def query(self, text: str) -> QueryResult:
        try:
            with self._lock:
                cursor = self._conn.execute(text)
                rows = cursor.fetchall()
                description = cursor.description or ()
        except sqlite3.Error as exc:
            raise StoreError(f"query failed error={exc}") from exc
        return QueryResult(columns=[col[0] for col in description], rows=rows)

    def count(self) -> int:
        return self.query("SELECT COUNT(*) FROM cars").rows[0][0]

    def close(self) -> None:
        with self._lock:
            self._conn.close()


def write_tsv(result: QueryResult, out: TextIO) -> int:
    """Write a header row and every result row as tab-separated values."""
    writer = csv.writer(out, delimiter="\t", lineterminator="\n")
    writer.writerow(result.columns)
    for row in result.rows:
        writer.writerow(["" if value is None else value for value in row])
    return len(result.rows)


def render_tsv(result: QueryResult) -> str:
    buf = io.StringIO()
    write_tsv(result, buf)
    return buf.getvalue()
