"""
Domain models - import all models here so services share one definition.
"""
from dockslot.models.warehouse import Warehouse
from dockslot.models.schedule import DaySchedule, SlotState
from dockslot.models.booking import (
    Booking,
    BookingStatus,
    Documents,
    HistoryEntry,
    ScheduleStatus,
    UnloadingStatus,
)

__all__ = [
    "Warehouse",
    "DaySchedule",
    "SlotState",
    "Booking",
    "BookingStatus",
    "Documents",
    "HistoryEntry",
    "ScheduleStatus",
    "UnloadingStatus",
]
