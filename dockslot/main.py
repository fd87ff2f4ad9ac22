"""
DockSlot - inbound dock slot booking and monitoring for warehouse networks.
Service container: one explicitly constructed instance per process.
"""
import logging
import random
from datetime import date, datetime, timezone
from functools import lru_cache
from typing import Callable, Optional

from dockslot.config import Settings, get_settings
from dockslot.services.booking_ledger import BookingLedger
from dockslot.services.capacity_report import (
    NetworkOverview,
    OccupancyCell,
    network_overview,
    occupancy_grid,
)
from dockslot.services.delay_exceptions import ExceptionDesk
from dockslot.services.demo_seed import DemoSeeder
from dockslot.services.schedule_store import ScheduleStore
from dockslot.services.warehouse_directory import WarehouseDirectory
from dockslot.utils.timezone import get_zoneinfo

logger = logging.getLogger("dockslot")


class DockSlotService:
    """Owns the directory, schedule store, ledger and exception desk."""

    def __init__(
        self,
        settings: Settings,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.directory = WarehouseDirectory()
        self.store = ScheduleStore(
            self.directory,
            today=self.today,
            lock_timeout=settings.slot_lock_timeout_seconds,
        )
        self.ledger = BookingLedger(self.store, settings=settings, clock=self.clock)
        self.exceptions = ExceptionDesk(self.ledger, self.store, settings=settings, clock=self.clock)

    def today(self) -> date:
        """Calendar date at the warehouses right now."""
        return self.clock().astimezone(get_zoneinfo(self.settings.warehouse_timezone)).date()

    def seed_demo_data(self, rng: Optional[random.Random] = None) -> int:
        seeder = DemoSeeder(self.store, self.ledger, rng=rng, today=self.today(), settings=self.settings)
        return seeder.seed()

    def overview(self, warehouse_id: Optional[str] = None) -> NetworkOverview:
        return network_overview(self.ledger, self.exceptions, warehouse_id)

    def occupancy(self, warehouse_ids: Optional[list[str]] = None, days: int = 7) -> dict[str, list[OccupancyCell]]:
        ids = warehouse_ids or [wh.id for wh in self.directory.list_warehouses()]
        return occupancy_grid(self.store, self.ledger, ids, self.today(), days)


def build_service(
    settings: Optional[Settings] = None,
    seed: bool = False,
    clock: Optional[Callable[[], datetime]] = None,
    rng: Optional[random.Random] = None,
) -> DockSlotService:
    """Construct a service. Pass settings and clock explicitly in tests."""
    settings = settings or get_settings()
    service = DockSlotService(settings, clock=clock)
    logger.info("DockSlot starting up (env=%s)", settings.app_env)
    if seed:
        service.seed_demo_data(rng=rng)
    return service


@lru_cache()
def get_service() -> DockSlotService:
    """Process-wide service instance."""
    return build_service()
