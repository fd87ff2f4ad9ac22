"""
Availability lookahead tests.
"""
import pytest
from datetime import date, timedelta

from dockslot.services.availability import first_available_day, has_availability_within_days
from dockslot.utils.holidays import iter_open_days
from conftest import SLOTS, TODAY, WAREHOUSE_ID


@pytest.fixture
def fifteen_days(store):
    """
    One slot on each open day of the 15 days after TODAY. Everything is
    taken except on the 15th day (Tue Mar 3).
    """
    last = TODAY + timedelta(days=15)
    for day in iter_open_days(TODAY + timedelta(days=1), 15):
        store.define_day_schedule(WAREHOUSE_ID, day, [SLOTS[0]])
        if day != last:
            store.allocate(WAREHOUSE_ID, day, SLOTS[0], f"BKG-{day.isoformat()}")
    return store


class TestLookahead:
    def test_fourteen_day_window_is_full(self, fifteen_days):
        """Should report no capacity when every day of the window is taken."""
        assert has_availability_within_days(fifteen_days, WAREHOUSE_ID, TODAY, 14) is False

    def test_fifteenth_day_found(self, fifteen_days):
        """Should find the free day once the window reaches it."""
        assert has_availability_within_days(fifteen_days, WAREHOUSE_ID, TODAY, 15) is True
        assert first_available_day(fifteen_days, WAREHOUSE_ID, TODAY, 15) == date(2026, 3, 3)

    def test_from_date_itself_not_scanned(self, store):
        """Should start scanning the day after from_date."""
        store.define_day_schedule(WAREHOUSE_ID, TODAY, SLOTS)
        assert first_available_day(store, WAREHOUSE_ID, TODAY, 14) is None

    def test_undefined_days_count_as_unavailable(self, store):
        """Should treat days without a schedule as unavailable."""
        assert has_availability_within_days(store, WAREHOUSE_ID, TODAY) is False

    def test_first_free_day_wins(self, store):
        """Should return the earliest day with a free slot."""
        store.define_day_schedule(WAREHOUSE_ID, TODAY + timedelta(days=4), SLOTS)
        store.define_day_schedule(WAREHOUSE_ID, TODAY + timedelta(days=2), SLOTS)
        assert first_available_day(store, WAREHOUSE_ID, "2026-02-16") == date(2026, 2, 18)
