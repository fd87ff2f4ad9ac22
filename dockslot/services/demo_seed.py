"""
Demo data seeding.

Builds a lively network through the same public APIs any caller uses:
define_day_schedule for capacity, create_booking and the lifecycle
operations for bookings. Nothing here touches store or ledger internals.

- Every warehouse gets the default slots on each open day of the horizon
- ~40% of slots are booked by a random vendor; of those roughly
  40% stay pending, 40% are approved, 20% are rejected
- The demo warehouse plays a fixed scenario today: one truck already
  gone, one on the dock, one request waiting for approval
"""
import logging
import random
from datetime import date, datetime, time
from typing import Optional

from dockslot.config import Settings, get_settings
from dockslot.models.booking import BookingStatus
from dockslot.services.booking_ledger import BookingLedger
from dockslot.services.schedule_store import ScheduleStore
from dockslot.utils.holidays import is_closed_day, iter_open_days

logger = logging.getLogger(__name__)

DEMO_WAREHOUSE_ID = "INTGHYD00763"  # Hyderabad

VENDORS = [
    {"name": "Alpha Pharma", "id": "VND-1001"},
    {"name": "Beta Logistics", "id": "VND-1002"},
    {"name": "Gamma Supply", "id": "VND-1003"},
    {"name": "Delta Meds", "id": "VND-1004"},
    {"name": "Vendor Partner", "id": "VND-PARTNER"},
]

ITEMS = ["Paracetamol Bulk", "Syringes", "Antibiotics", "Saline Bottles", "Cotton Bales"]

DRIVER_CONTACTS = ["9876543210", "8877665544", "9123456780", "7766554433"]

BOOK_PROBABILITY = 0.4

# Slot -> what happens to it at the demo warehouse today
DEMO_SCENARIO = [
    {
        "slot": "09:00 - 12:00",
        "status": BookingStatus.VEHICLE_EXITED,
        "vendor_id": "VND-1001",
        "items": "Paracetamol Bulk",
        "boxes": 45,
        "contact": "9876543210",
        "vehicle_number": "TS09 UB 1234",
        "entry": time(9, 15),
        "exit": time(11, 30),
    },
    {
        "slot": "13:00 - 16:00",
        "status": BookingStatus.VEHICLE_REACHED,
        "vendor_id": "VND-PARTNER",
        "items": "Cotton Bales",
        "boxes": 120,
        "contact": "9123456780",
        "vehicle_number": "TS08 UA 5678",
        "entry": time(13, 10),
        "exit": None,
    },
    {
        "slot": "16:00 - 19:00",
        "status": BookingStatus.PENDING,
        "vendor_id": "VND-1002",
        "items": "Syringes",
        "boxes": 30,
        "contact": "8877665544",
        "vehicle_number": "AP16 TV 9988",
        "entry": None,
        "exit": None,
    },
]

ALL_DOCUMENTS = {"coa": True, "invoice": True, "lr": True}


def _vendor(vendor_id: str) -> dict:
    for vendor in VENDORS:
        if vendor["id"] == vendor_id:
            return vendor
    return {"name": "Unknown Vendor", "id": vendor_id}


class DemoSeeder:
    def __init__(
        self,
        store: ScheduleStore,
        ledger: BookingLedger,
        rng: Optional[random.Random] = None,
        today: Optional[date] = None,
        settings: Optional[Settings] = None,
    ):
        self._store = store
        self._ledger = ledger
        self._rng = rng or random.Random()
        self._today = today or date.today()
        self._settings = settings or get_settings()

    def _vehicle_number(self) -> str:
        return f"TS0{self._rng.randrange(9)} UB {self._rng.randint(1000, 9999)}"

    def seed(self) -> int:
        """Seed every warehouse. Returns the number of bookings created."""
        created = 0
        labels = self._settings.default_time_slots
        for warehouse in self._store.directory.list_warehouses():
            for day in iter_open_days(self._today, self._settings.seed_horizon_days):
                self._store.define_day_schedule(warehouse.id, day, labels)

            if warehouse.id == DEMO_WAREHOUSE_ID and not is_closed_day(self._today):
                created += self._play_demo_scenario(warehouse.id)

            for day in iter_open_days(self._today, self._settings.seed_horizon_days):
                for label in labels:
                    if not self._store.is_available(warehouse.id, day, label):
                        continue
                    if self._rng.random() < BOOK_PROBABILITY:
                        self._random_booking(warehouse.id, day, label)
                        created += 1

        logger.info("Demo seed complete: %d bookings", created)
        return created

    def _random_booking(self, warehouse_id: str, day: date, label: str) -> None:
        vendor = self._rng.choice(VENDORS)
        booking = self._ledger.create_booking({
            "warehouse_id": warehouse_id,
            "date": day,
            "slot": label,
            "vendor_name": vendor["name"],
            "vendor_id": vendor["id"],
            "vehicle_number": self._vehicle_number(),
            "driver_contact": self._rng.choice(DRIVER_CONTACTS),
            "items": self._rng.choice(ITEMS),
            "boxes": self._rng.randint(50, 500),
            "documents": ALL_DOCUMENTS,
        })
        if booking.status != BookingStatus.PENDING:
            return
        roll = self._rng.random()
        if roll < 0.4:
            return
        if roll < 0.8:
            self._ledger.approve(booking.id)
        else:
            self._ledger.reject(booking.id)

    def _play_demo_scenario(self, warehouse_id: str) -> int:
        created = 0
        for step in DEMO_SCENARIO:
            if not self._store.is_available(warehouse_id, self._today, step["slot"]):
                continue
            vendor = _vendor(step["vendor_id"])
            booking = self._ledger.create_booking({
                "warehouse_id": warehouse_id,
                "date": self._today,
                "slot": step["slot"],
                "vendor_name": vendor["name"],
                "vendor_id": vendor["id"],
                "vehicle_number": step["vehicle_number"],
                "driver_contact": step["contact"],
                "items": step["items"],
                "boxes": step["boxes"],
                "documents": ALL_DOCUMENTS,
            })
            created += 1

            if step["status"] == BookingStatus.PENDING:
                continue
            if booking.status == BookingStatus.PENDING:
                self._ledger.approve(booking.id)
            if step["entry"] is not None:
                self._ledger.mark_entered(booking.id, datetime.combine(self._today, step["entry"]))
            if step["exit"] is not None:
                self._ledger.mark_exited(booking.id, datetime.combine(self._today, step["exit"]))
        return created
