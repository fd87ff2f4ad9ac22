"""
Capacity reporting - occupancy grid and network overview for admins.

Occupancy counts only active bookings: rejected and cancelled bookings
stay in the day's booking history but are not load on the dock.
"""
import datetime as dt
import logging
from datetime import timedelta
from typing import Iterable, Optional, Union

from pydantic import BaseModel

from dockslot.models.booking import BookingStatus, ScheduleStatus
from dockslot.services.booking_ledger import BookingLedger
from dockslot.services.delay_exceptions import ExceptionDesk
from dockslot.services.schedule_store import ScheduleStore
from dockslot.utils.holidays import is_closed_day
from dockslot.utils.slots import parse_date

logger = logging.getLogger(__name__)

# Occupancy levels for the grid colouring
LEVEL_CLOSED = "closed"
LEVEL_FULL = "full"
LEVEL_BUSY = "busy"
LEVEL_OPEN = "open"
BUSY_ABOVE_PCT = 50.0


class OccupancyCell(BaseModel):
    date: dt.date
    closed: bool = False
    booked: int = 0
    total: int = 0
    percentage: float = 0.0
    level: str = LEVEL_OPEN


class NetworkOverview(BaseModel):
    total_bookings: int = 0
    pending_approvals: int = 0
    booked: int = 0
    on_dock: int = 0
    completed: int = 0
    cancelled: int = 0
    rejected: int = 0
    entry_delayed: int = 0
    exit_delayed: int = 0
    open_exceptions: int = 0


def occupancy_level(booked: int, total: int) -> str:
    """full at 100%+, busy above 50%, open otherwise."""
    if total <= 0:
        return LEVEL_FULL
    pct = booked / total * 100
    if pct >= 100:
        return LEVEL_FULL
    if pct > BUSY_ABOVE_PCT:
        return LEVEL_BUSY
    return LEVEL_OPEN


def occupancy_grid(
    store: ScheduleStore,
    ledger: BookingLedger,
    warehouse_ids: Iterable[str],
    start_date: Union[str, dt.date],
    days: int = 7,
) -> dict[str, list[OccupancyCell]]:
    """
    Per warehouse, one cell per day from start_date. Sundays appear as
    closed cells; days without a defined schedule are left out.
    """
    start = parse_date(start_date)
    grid: dict[str, list[OccupancyCell]] = {}
    for warehouse_id in warehouse_ids:
        cells = []
        for offset in range(days):
            current = start + timedelta(days=offset)
            if is_closed_day(current):
                cells.append(OccupancyCell(date=current, closed=True, level=LEVEL_CLOSED))
                continue
            day = store.find_day_schedule(warehouse_id, current)
            if day is None:
                continue
            booked = len(ledger.active_booking_ids(warehouse_id, current))
            cells.append(OccupancyCell(
                date=current,
                booked=booked,
                total=day.total,
                percentage=round(booked / day.total * 100, 1) if day.total else 0.0,
                level=occupancy_level(booked, day.total),
            ))
        grid[warehouse_id] = cells
    logger.debug("Occupancy grid built: %d warehouses x %d days", len(grid), days)
    return grid


def network_overview(
    ledger: BookingLedger,
    desk: Optional[ExceptionDesk] = None,
    warehouse_id: Optional[str] = None,
) -> NetworkOverview:
    """Headline counts across the network, or for one warehouse."""
    bookings = ledger.list_by_warehouse(warehouse_id) if warehouse_id else ledger.list_bookings()

    by_status: dict[str, int] = {}
    entry_delayed = exit_delayed = 0
    for b in bookings:
        by_status[b.status] = by_status.get(b.status, 0) + 1
        if b.schedule_status == ScheduleStatus.ENTRY_DELAYED:
            entry_delayed += 1
        elif b.schedule_status == ScheduleStatus.EXIT_DELAYED:
            exit_delayed += 1

    open_exceptions = 0
    if desk is not None:
        open_exceptions = len([
            r for r in desk.list_open()
            if warehouse_id is None or r.warehouse_id == warehouse_id
        ])

    return NetworkOverview(
        total_bookings=len(bookings),
        pending_approvals=by_status.get(BookingStatus.PENDING, 0),
        booked=by_status.get(BookingStatus.BOOKED, 0),
        on_dock=by_status.get(BookingStatus.VEHICLE_REACHED, 0),
        completed=by_status.get(BookingStatus.VEHICLE_EXITED, 0),
        cancelled=by_status.get(BookingStatus.CANCELLED, 0),
        rejected=by_status.get(BookingStatus.REJECTED, 0),
        entry_delayed=entry_delayed,
        exit_delayed=exit_delayed,
        open_exceptions=open_exceptions,
    )
