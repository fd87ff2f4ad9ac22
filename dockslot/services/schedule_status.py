"""
Schedule status - lateness of a booking's actual entry/exit against its slot.

Pure function; no ledger state is read or written.

Rules (delay threshold defaults to 30 minutes, whole minutes, floored):
1. Entry more than threshold after slot start  -> Entry delayed
   (exit is not evaluated once entry is late)
2. Exit more than threshold after slot end     -> Exit delayed
3. Otherwise                                   -> On time
"""
import logging
from datetime import date, datetime
from typing import Optional, Union

from dockslot.errors import MalformedSchedule
from dockslot.models.booking import ScheduleStatus
from dockslot.utils.slots import parse_timestamp, slot_window
from dockslot.utils.timezone import to_local_naive

logger = logging.getLogger(__name__)

DELAY_THRESHOLD_MINUTES = 30


def _minutes_late(actual: datetime, scheduled: datetime) -> int:
    return int((actual - scheduled).total_seconds() // 60)


def classify(
    slot_date: Union[str, date, None],
    slot_label: Optional[str],
    entry_time: Union[str, datetime, None] = None,
    exit_time: Union[str, datetime, None] = None,
    threshold_minutes: int = DELAY_THRESHOLD_MINUTES,
    timezone_str: Optional[str] = None,
    strict: bool = False,
) -> str:
    """
    Classify a booking as On time, Entry delayed or Exit delayed.

    Timestamps may be datetimes or ISO 8601 strings. Malformed slot, date
    or timestamp input falls back to On time (logged) unless
    strict is set, in which case MalformedSchedule propagates.
    """
    if not slot_date or not slot_label:
        if strict:
            raise MalformedSchedule("Slot date and label are required")
        return ScheduleStatus.ON_TIME

    try:
        scheduled_start, scheduled_end = slot_window(slot_date, slot_label)
        entry = parse_timestamp(entry_time) if entry_time is not None else None
        exit_ = parse_timestamp(exit_time) if exit_time is not None else None
    except MalformedSchedule as e:
        if strict:
            raise
        logger.warning(
            "Schedule status fallback to On time: %s", e.message,
            extra={"slot_date": slot_date, "slot_label": slot_label,
                   "error_code": e.error_code},
        )
        return ScheduleStatus.ON_TIME

    if entry is not None:
        if _minutes_late(to_local_naive(entry, timezone_str), scheduled_start) > threshold_minutes:
            return ScheduleStatus.ENTRY_DELAYED

    if exit_ is not None:
        if _minutes_late(to_local_naive(exit_, timezone_str), scheduled_end) > threshold_minutes:
            return ScheduleStatus.EXIT_DELAYED

    return ScheduleStatus.ON_TIME
