"""Tests for positional listing mapping."""

import unittest

from sitewatch.errors import FieldExtractionWarning, MissingKey, MissingPrice
from sitewatch.mapper import map_listing
from sitewatch.models import ListingRecord

DETAILS = "Benzin, 2015/03, 1 598 cm³, 77 kW, 105 LE, 123 456 km"


class TestMapListing(unittest.TestCase):
    """Verify the fixed slot order and the mandatory fields."""

    def test_full_row(self):
        """Every slot lands in its attribute."""
        mapped = map_listing("Kód: 1234567", " VW Golf \n", "3 450 000 Ft", DETAILS)
        self.assertEqual(
            mapped.record,
            ListingRecord(
                id=1234567,
                title="VW Golf",
                price=3450000,
                engine="Benzin",
                year=2015,
                month=3,
                engine_size_cc=1598,
                power_kw=77,
                power_hp=105,
                kilometers=123456,
            ),
        )
        self.assertEqual(mapped.warnings, [])

    def test_same_input_same_record(self):
        """Mapping a fragment twice gives equal records."""
        first = map_listing("1", "A", "10", DETAILS)
        second = map_listing("1", "A", "10", DETAILS)
        self.assertEqual(first.record, second.record)

    def test_missing_id_raises(self):
        """An id without digits drops the row."""
        with self.assertRaises(MissingKey):
            map_listing("Kód: n/a", "A", "10", DETAILS)

    def test_missing_price_raises(self):
        """A price without digits drops the row."""
        with self.assertRaises(MissingPrice):
            map_listing("1", "A", "Érdeklődjön", DETAILS)

    def test_fewer_slots_leave_zeros(self):
        """Missing trailing positions keep their zero values."""
        record = map_listing("1", "A", "10", "Dízel, 2010").record
        self.assertEqual(record.engine, "Dízel")
        self.assertEqual(record.year, 2010)
        self.assertEqual(record.month, 0)
        self.assertEqual(record.engine_size_cc, 0)
        self.assertEqual(record.kilometers, 0)

    def test_extra_slots_ignored(self):
        """Positions past kilometers are dropped."""
        record = map_listing("1", "A", "10", DETAILS + ", 5 ajtós, kézi").record
        self.assertEqual(record.kilometers, 123456)

    def test_empty_detail_fragment(self):
        """No detail text gives an all-zero detail block."""
        mapped = map_listing("1", "A", "10", "")
        self.assertEqual(mapped.record, ListingRecord(id=1, title="A", price=10))
        self.assertEqual(mapped.warnings, [])

    def test_bad_numeric_slot_warns(self):
        """An unparseable slot keeps zero and is reported, the record survives."""
        mapped = map_listing("1", "A", "10", "Benzin, 2015/03, n.a., 77 kW, 105 LE, 1 km")
        self.assertEqual(mapped.record.engine_size_cc, 0)
        self.assertEqual(mapped.record.power_kw, 77)
        self.assertEqual(len(mapped.warnings), 1)
        self.assertIsInstance(mapped.warnings[0], FieldExtractionWarning)
        self.assertEqual(mapped.warnings[0].slot, "engine_size_cc")

    def test_bad_year_warns(self):
        """An unreadable year leaves year and month at zero."""
        mapped = map_listing("1", "A", "10", "Benzin, új, 1 598 cm³")
        self.assertEqual((mapped.record.year, mapped.record.month), (0, 0))
        self.assertEqual(mapped.record.engine_size_cc, 1598)
        self.assertEqual([w.slot for w in mapped.warnings], ["year"])

    def test_slot_order_is_positional(self):
        """Values are assigned by position, not by their unit."""
        record = map_listing("1", "A", "10", "Benzin, 2015, 105 LE, 77 kW").record
        self.assertEqual(record.engine_size_cc, 105)
        self.assertEqual(record.power_kw, 77)


if __name__ == "__main__":
    unittest.main()
