from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from .errors import FieldExtractionWarning, MissingKey, MissingPrice
from .extract import extract_int, extract_year_month
from .models import DetailSlot, ListingRecord

log = logging.getLogger(__name__)

# Record attribute filled by each numeric slot.
_NUMERIC_SLOTS: Dict[DetailSlot, str] = {
    DetailSlot.ENGINE_SIZE: "engine_size_cc",
    DetailSlot.POWER_KW: "power_kw",
    DetailSlot.POWER_HP: "power_hp",
    DetailSlot.KILOMETERS: "kilometers",
}


@dataclass(frozen=True)
class MappedListing:
    record: ListingRecord
    warnings: List[FieldExtractionWarning] = field(default_factory=list)


def map_listing(id_text: str, title_text: str, price_text: str, detail_fragment: str) -> MappedListing:
    """Build one ListingRecord from the sub-fields of a listing row.

    The detail fragment is read by position (see DetailSlot); positions past
    the last slot are ignored and missing ones stay at zero. Only the id and
    the price are mandatory.
    """
    try:
        listing_id = extract_int(id_text)
    except ValueError as exc:
        raise MissingKey(f"unparseable id {id_text!r}") from exc
    try:
        price = extract_int(price_text)
    except ValueError as exc:
        raise MissingPrice(f"unparseable price {price_text!r} id={listing_id}") from exc

    details: Dict[str, object] = {}
    warnings: List[FieldExtractionWarning] = []
    pieces = detail_fragment.split(",") if detail_fragment else []
    for idx, piece in enumerate(pieces[: len(DetailSlot)]):
        slot = DetailSlot(idx)
        text = piece.strip()
        if slot is DetailSlot.ENGINE:
            details["engine"] = text
        elif slot is DetailSlot.YEAR_MONTH:
            try:
                year, month, _ = extract_year_month(text)
            except ValueError:
                warnings.append(FieldExtractionWarning("year", text))
                continue
            details["year"] = year
            details["month"] = month
        else:
            attr = _NUMERIC_SLOTS[slot]
            try:
                details[attr] = extract_int(text)
            except ValueError:
                warnings.append(FieldExtractionWarning(attr, text))

    record = ListingRecord(id=listing_id, title=title_text.strip(), price=price, **details)
    for warning in warnings:
        log.warning(f"field warning id={listing_id} {warning}")
    return MappedListing(record=record, warnings=warnings)
