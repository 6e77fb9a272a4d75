"""Text-to-number helpers for listing fragments.

Listing fragments mix numbers with unit suffixes and thousands
separators ("1 234 km", "150 LE"). Numbers are recovered by joining
every run of digits, which tolerates that noise but is not a general
number parser: "1.6" becomes 16.
"""
from __future__ import annotations

import re
from typing import NamedTuple

_DIGITS = re.compile(r"\d+", re.ASCII)

# Largest value the SQLite INTEGER column can hold.
MAX_INT = 2 ** 63 - 1


class YearMonth(NamedTuple):
    year: int
    month: int
    has_month: bool


def extract_int(text: str) -> int:
    """Concatenate every digit run in ``text`` and parse the result.

    Raises ValueError when ``text`` has no digits or the number does not fit
    in a signed 64-bit integer.
    """
    joined = "".join(_DIGITS.findall(text or ""))
    if not joined:
        raise ValueError(f"no digits in {text!r}")
    value = int(joined)
    if value > MAX_INT:
        raise ValueError(f"number out of range in {text!r}")
    return value


def extract_year_month(text: str) -> YearMonth:
    """Parse ``"2015/03"`` style dates; the month part is optional.

    A bad year raises ValueError, a bad month is reported as absent.
    """
    parts = (text or "").split("/")
    year = int(parts[0].strip())
    if len(parts) != 2:
        return YearMonth(year, 0, False)
    try:
        month = int(parts[1].strip())
    except ValueError:
        return YearMonth(year, 0, False)
    return YearMonth(year, month, True)
