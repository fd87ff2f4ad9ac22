"""
Slot label parsing and generation tests.
"""
import pytest
from datetime import date, datetime, time, timedelta, timezone

from dockslot.errors import MalformedSchedule
from dockslot.utils.slots import (
    build_slot_labels,
    parse_date,
    parse_slot_label,
    parse_timestamp,
    slot_start_minutes,
    slot_window,
)


class TestParseSlotLabel:
    def test_standard_label(self):
        """Should split a label into start and end times."""
        assert parse_slot_label("09:00 - 12:00") == (time(9, 0), time(12, 0))

    def test_tolerates_tight_spacing(self):
        """Should accept a label without spaces around the dash."""
        assert parse_slot_label("13:00-16:00") == (time(13, 0), time(16, 0))

    def test_rejects_garbage(self):
        """Should reject text that is not a time window."""
        with pytest.raises(MalformedSchedule):
            parse_slot_label("morning")

    def test_rejects_invalid_hour(self):
        """Should reject hours past 23."""
        with pytest.raises(MalformedSchedule):
            parse_slot_label("25:00 - 26:00")

    def test_rejects_overnight(self):
        """Should reject a slot ending on the next day."""
        with pytest.raises(MalformedSchedule):
            parse_slot_label("22:00 - 02:00")

    def test_start_minutes(self):
        """Should give the slot start as minutes after midnight."""
        assert slot_start_minutes("13:30 - 16:00") == 13 * 60 + 30


class TestSlotWindow:
    def test_window_on_day(self):
        """Should place the slot on its calendar day."""
        start, end = slot_window("2026-02-16", "09:00 - 12:00")
        assert start == datetime(2026, 2, 16, 9, 0)
        assert end == datetime(2026, 2, 16, 12, 0)

    def test_bad_date(self):
        """Should reject a non-ISO date."""
        with pytest.raises(MalformedSchedule):
            slot_window("16/02/2026", "09:00 - 12:00")


class TestParseDate:
    def test_iso_string(self):
        """Should parse an ISO date string."""
        assert parse_date("2026-02-16") == date(2026, 2, 16)

    def test_datetime_truncated(self):
        """Should drop the time part of a datetime."""
        assert parse_date(datetime(2026, 2, 16, 10, 30)) == date(2026, 2, 16)


class TestParseTimestamp:
    def test_datetime_passes_through(self):
        """Should return a datetime unchanged."""
        ts = datetime(2026, 2, 16, 9, 10)
        assert parse_timestamp(ts) is ts

    def test_naive_iso_string(self):
        """Should parse a naive ISO date-time string."""
        assert parse_timestamp("2026-02-16T09:45:00") == datetime(2026, 2, 16, 9, 45)

    def test_iso_string_with_offset(self):
        """Should keep the UTC offset of an ISO string."""
        ts = parse_timestamp("2026-02-16T09:10:00+05:30")
        assert ts.utcoffset() == timedelta(hours=5, minutes=30)
        assert ts == datetime(2026, 2, 16, 3, 40, tzinfo=timezone.utc)

    def test_garbage_rejected(self):
        """Should raise MalformedSchedule for text that is not a timestamp."""
        with pytest.raises(MalformedSchedule, match="Invalid timestamp"):
            parse_timestamp("half past nine")

    def test_wrong_type_rejected(self):
        """Should raise MalformedSchedule for a non-string, non-datetime value."""
        with pytest.raises(MalformedSchedule):
            parse_timestamp(930)


class TestBuildSlotLabels:
    def test_consecutive_hours(self):
        """Should generate back-to-back hourly slots."""
        assert build_slot_labels(3, "09:00", 60) == [
            "09:00 - 10:00",
            "10:00 - 11:00",
            "11:00 - 12:00",
        ]

    def test_buffer_between_slots(self):
        """Should leave the turnaround buffer between slots."""
        labels = build_slot_labels(2, "07:00", 120, buffer_minutes=30)
        assert labels == ["07:00 - 09:00", "09:30 - 11:30"]

    def test_overflowing_day_rejected(self):
        """Should reject slots that run past midnight."""
        with pytest.raises(MalformedSchedule):
            build_slot_labels(20, "09:00", 60)

    def test_zero_count_rejected(self):
        """Should reject a zero slot count."""
        with pytest.raises(MalformedSchedule):
            build_slot_labels(0)
