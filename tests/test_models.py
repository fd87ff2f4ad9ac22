"""
Model tests - documents, frozen booking identity, day schedule counts.
"""
import pytest
from datetime import date
from pydantic import ValidationError

from dockslot.models import Booking, DaySchedule, Documents, SlotState


class TestDocuments:
    def test_missing_mandatory(self):
        """Should list missing mandatory documents."""
        assert Documents().missing_mandatory() == ["coa", "invoice"]
        assert Documents(coa="coa.pdf").missing_mandatory() == ["invoice"]

    def test_empty_reference_counts_as_missing(self):
        """Should treat empty or false references as missing."""
        assert Documents(coa="", invoice=False).missing_mandatory() == ["coa", "invoice"]

    def test_extra_kinds_kept(self):
        """Should keep document kinds beyond the mandatory ones."""
        docs = Documents(coa=True, invoice=True, packing_list="pl.pdf")
        assert docs.is_present("packing_list") is True
        assert docs.missing_mandatory() == []


class TestBooking:
    def test_slot_commitment_frozen(self):
        """Should freeze slot fields and leave status mutable."""
        booking = Booking(
            id="BKG-1", warehouse_id="INTGHYD00763", date=date(2026, 2, 16),
            slot="09:00 - 12:00", vendor_name="Alpha Pharma", vendor_id="VND-1001",
            vehicle_number="TS09 UB 1234",
        )
        with pytest.raises(ValidationError):
            booking.slot = "13:00 - 16:00"
        booking.status = "Booked"
        assert booking.status == "Booked"


class TestDaySchedule:
    def test_counts(self):
        """Should derive total, booked and available counts."""
        day = DaySchedule(
            warehouse_id="INTGHYD00763",
            date=date(2026, 2, 16),
            slot_details={"09:00 - 12:00": SlotState.BOOKED, "13:00 - 16:00": SlotState.AVAILABLE},
        )
        assert (day.total, day.booked, day.available) == (2, 1, 1)
        assert day.has_capacity() is True
        assert day.available_slots() == ["13:00 - 16:00"]
