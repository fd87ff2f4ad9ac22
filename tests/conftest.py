"""
Test configuration and fixtures.
Everything runs in memory against a fixed Monday with a controllable clock.
"""
import pytest
from datetime import date, datetime, timedelta, timezone

from dockslot.config import Settings
from dockslot.services.booking_ledger import BookingLedger
from dockslot.services.delay_exceptions import ExceptionDesk
from dockslot.services.schedule_store import ScheduleStore
from dockslot.services.warehouse_directory import WarehouseDirectory

TODAY = date(2026, 2, 16)  # Monday
SUNDAY = date(2026, 2, 15)
WAREHOUSE_ID = "INTGHYD00763"
OTHER_WAREHOUSE_ID = "INKABLR00255"
SLOTS = ["09:00 - 12:00", "13:00 - 16:00", "16:00 - 19:00"]


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    # 08:30 in Hyderabad
    return FakeClock(datetime(2026, 2, 16, 3, 0, tzinfo=timezone.utc))


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def directory():
    return WarehouseDirectory()


@pytest.fixture
def store(directory):
    return ScheduleStore(directory, today=lambda: TODAY, lock_timeout=1.0)


@pytest.fixture
def ledger(store, settings, clock):
    return BookingLedger(store, settings=settings, clock=clock)


@pytest.fixture
def desk(ledger, store, settings, clock):
    return ExceptionDesk(ledger, store, settings=settings, clock=clock)


@pytest.fixture
def scheduled_store(store):
    """Store with the three default slots defined for TODAY at WAREHOUSE_ID."""
    store.define_day_schedule(WAREHOUSE_ID, TODAY, SLOTS)
    return store


@pytest.fixture
def make_request():
    """Factory for booking request payloads; override any field by keyword."""
    def _make(**overrides) -> dict:
        data = {
            "warehouse_id": WAREHOUSE_ID,
            "date": TODAY.isoformat(),
            "slot": SLOTS[0],
            "vendor_name": "Alpha Pharma",
            "vendor_id": "VND-1001",
            "vehicle_number": "TS09 UB 1234",
            "driver_contact": "9876543210",
            "items": "Paracetamol Bulk",
            "boxes": 45,
            "documents": {"coa": True, "invoice": "invoice-4411.pdf", "lr": True},
        }
        data.update(overrides)
        return data
    return _make
