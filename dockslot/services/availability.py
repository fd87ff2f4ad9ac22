"""
Availability policy - read-only capacity lookahead.

Decides whether a delayed vendor can self-serve a new slot or has to
escalate to a manual exception. The answer is advisory to the caller;
the ledger never enforces it.
"""
from datetime import date, timedelta
from typing import Optional, Union

from dockslot.services.schedule_store import ScheduleStore
from dockslot.utils.slots import parse_date

AVAILABILITY_WINDOW_DAYS = 14


def first_available_day(
    store: ScheduleStore,
    warehouse_id: str,
    from_date: Union[str, date],
    window_days: int = AVAILABILITY_WINDOW_DAYS,
) -> Optional[date]:
    """
    Scan from_date + 1 .. from_date + window_days (inclusive) and return the
    first day whose defined schedule still has a free slot.
    """
    start = parse_date(from_date)
    for offset in range(1, window_days + 1):
        current = start + timedelta(days=offset)
        day = store.find_day_schedule(warehouse_id, current)
        if day is not None and day.booked < day.total:
            return current
    return None


def has_availability_within_days(
    store: ScheduleStore,
    warehouse_id: str,
    from_date: Union[str, date],
    window_days: int = AVAILABILITY_WINDOW_DAYS,
) -> bool:
    return first_available_day(store, warehouse_id, from_date, window_days) is not None
