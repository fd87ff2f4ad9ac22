"""
Schedule store - per warehouse, per date dock slot capacity.

Owns the only contended resource in the system: each day's slot map.
Every read-modify-write runs under the warehouse-day lock so that an
availability check and the allocation that follows it are atomic.

Callers receive copies of DaySchedule; the stored objects never leave
this module.
"""
import logging
from datetime import date, timedelta
from typing import Callable, Iterable, Optional, Union

from dockslot.errors import (
    InvalidScheduleDate,
    InvalidSlot,
    MalformedSchedule,
    NotFound,
    ScheduleConflict,
    SlotUnavailable,
)
from dockslot.models.schedule import DaySchedule, SlotState
from dockslot.schemas.schedule_import import ScheduleRow
from dockslot.services.warehouse_directory import WarehouseDirectory
from dockslot.utils.holidays import is_closed_day
from dockslot.utils.locks import LOCK_WAIT_SECONDS, DayLockRegistry
from dockslot.utils.slots import build_slot_labels, parse_date, parse_slot_label

logger = logging.getLogger(__name__)

# Slot generation for count-only import rows
IMPORT_DAY_START = "09:00"
IMPORT_SLOT_MINUTES = 60


class ScheduleStore:
    def __init__(
        self,
        directory: WarehouseDirectory,
        today: Optional[Callable[[], date]] = None,
        lock_timeout: float = LOCK_WAIT_SECONDS,
    ):
        self._directory = directory
        self._today = today or date.today
        self._locks = DayLockRegistry(wait=lock_timeout)
        self._days: dict[str, dict[date, DaySchedule]] = {}

    @property
    def directory(self) -> WarehouseDirectory:
        return self._directory

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _lock(self, warehouse_id: str, slot_date: date):
        return self._locks.hold(warehouse_id, slot_date)

    def _get(self, warehouse_id: str, slot_date: date) -> Optional[DaySchedule]:
        return self._days.get(warehouse_id, {}).get(slot_date)

    def _check_bookable_day(self, warehouse_id: str, slot_date: date) -> None:
        self._directory.get_warehouse(warehouse_id)
        if is_closed_day(slot_date):
            logger.warning(
                "Refused schedule on closed day %s", slot_date,
                extra={"warehouse_id": warehouse_id, "slot_date": slot_date,
                       "error_code": InvalidScheduleDate.error_code},
            )
            raise InvalidScheduleDate(f"{slot_date.isoformat()} is a Sunday; docks are closed")

    @staticmethod
    def _normalize_labels(slot_labels: Iterable[str]) -> list[str]:
        labels = list(dict.fromkeys(label.strip() for label in slot_labels))
        if not labels:
            raise MalformedSchedule("A day schedule needs at least one slot")
        for label in labels:
            parse_slot_label(label)
        return labels

    @staticmethod
    def _dropped_booked_labels(existing: Optional[DaySchedule], labels: list[str]) -> list[str]:
        if existing is None:
            return []
        keep = set(labels)
        return [label for label in existing.booked_slots() if label not in keep]

    # ------------------------------------------------------------------
    # Capacity definition
    # ------------------------------------------------------------------

    def define_day_schedule(
        self,
        warehouse_id: str,
        slot_date: Union[str, date],
        slot_labels: Iterable[str],
    ) -> DaySchedule:
        """
        Create or replace a day's slot set.

        Labels already present keep their occupancy, new labels start
        Available, omitted labels disappear. Dropping a Booked label is
        refused with ScheduleConflict.
        """
        slot_date = parse_date(slot_date)
        self._check_bookable_day(warehouse_id, slot_date)
        labels = self._normalize_labels(slot_labels)

        with self._lock(warehouse_id, slot_date):
            existing = self._get(warehouse_id, slot_date)
            dropped = self._dropped_booked_labels(existing, labels)
            if dropped:
                logger.warning(
                    "Refused schedule edit dropping booked slots %s", dropped,
                    extra={"warehouse_id": warehouse_id, "slot_date": slot_date,
                           "error_code": ScheduleConflict.error_code},
                )
                raise ScheduleConflict(
                    f"Cannot remove booked slot(s) {', '.join(dropped)} on {slot_date.isoformat()}"
                )

            previous = existing.slot_details if existing else {}
            day = DaySchedule(
                warehouse_id=warehouse_id,
                date=slot_date,
                slot_details={label: previous.get(label, SlotState.AVAILABLE) for label in labels},
                booking_ids=list(existing.booking_ids) if existing else [],
            )
            self._days.setdefault(warehouse_id, {})[slot_date] = day

        logger.info(
            "Day schedule %s: %d slots", "updated" if existing else "defined", day.total,
            extra={"warehouse_id": warehouse_id, "slot_date": slot_date},
        )
        return day.model_copy(deep=True)

    def remove_day_schedule(self, warehouse_id: str, slot_date: Union[str, date]) -> None:
        """Delete a day's capacity. Refused while any slot on it is Booked."""
        slot_date = parse_date(slot_date)
        with self._lock(warehouse_id, slot_date):
            day = self._get(warehouse_id, slot_date)
            if day is None:
                raise NotFound("Day schedule", f"{warehouse_id}/{slot_date.isoformat()}")
            if day.booked:
                raise ScheduleConflict(
                    f"{day.booked} slot(s) still booked on {slot_date.isoformat()} at {warehouse_id}"
                )
            del self._days[warehouse_id][slot_date]

        logger.info(
            "Day schedule removed",
            extra={"warehouse_id": warehouse_id, "slot_date": slot_date},
        )

    def apply_schedule_rows(self, rows: Iterable[Union[ScheduleRow, dict]]) -> list[DaySchedule]:
        """
        Apply parsed schedule-import rows.

        All rows are validated before any is applied: an unknown warehouse,
        a Sunday, a malformed label or a dropped booked slot rejects the
        whole batch.
        """
        plan = []
        for raw in rows:
            row = raw if isinstance(raw, ScheduleRow) else ScheduleRow.model_validate(raw)
            self._check_bookable_day(row.warehouse_id, row.date)
            if row.slot_labels is not None:
                labels = self._normalize_labels(row.slot_labels)
            else:
                labels = build_slot_labels(row.total_slots, IMPORT_DAY_START, IMPORT_SLOT_MINUTES)
            dropped = self._dropped_booked_labels(self._get(row.warehouse_id, row.date), labels)
            if dropped:
                raise ScheduleConflict(
                    f"Row {row.warehouse_id}/{row.date.isoformat()} drops booked slot(s) {', '.join(dropped)}"
                )
            plan.append((row.warehouse_id, row.date, labels))

        applied = [self.define_day_schedule(wh, day, labels) for wh, day, labels in plan]
        logger.info("Schedule import applied: %d rows", len(applied))
        return applied

    # ------------------------------------------------------------------
    # Allocation
    # ------------------------------------------------------------------

    def allocate(
        self,
        warehouse_id: str,
        slot_date: Union[str, date],
        slot_label: str,
        booking_id: str,
    ) -> DaySchedule:
        """Mark an Available slot Booked for booking_id."""
        slot_date = parse_date(slot_date)
        with self._lock(warehouse_id, slot_date):
            day = self._get(warehouse_id, slot_date)
            if day is None:
                raise InvalidSlot(
                    f"No schedule for {warehouse_id} on {slot_date.isoformat()} (closed or not defined)"
                )
            state = day.slot_details.get(slot_label)
            if state is None:
                raise SlotUnavailable(f"Slot '{slot_label}' does not exist on {slot_date.isoformat()}")
            if state != SlotState.AVAILABLE:
                raise SlotUnavailable(f"Slot '{slot_label}' on {slot_date.isoformat()} is already booked")

            day.slot_details[slot_label] = SlotState.BOOKED
            day.booking_ids.append(booking_id)
            return day.model_copy(deep=True)

    def release(self, warehouse_id: str, slot_date: Union[str, date], slot_label: str) -> None:
        """Set a slot back to Available. Idempotent; booking_ids keep their history."""
        slot_date = parse_date(slot_date)
        with self._lock(warehouse_id, slot_date):
            day = self._get(warehouse_id, slot_date)
            if day is None:
                raise NotFound("Day schedule", f"{warehouse_id}/{slot_date.isoformat()}")
            if slot_label not in day.slot_details:
                raise NotFound("Slot", f"{warehouse_id}/{slot_date.isoformat()}/{slot_label}")
            day.slot_details[slot_label] = SlotState.AVAILABLE

    def prune_locks(self, before: Union[str, date, None] = None) -> int:
        """Release day locks for dates before `before` (default: today)."""
        cutoff = parse_date(before) if before is not None else self._today()
        return self._locks.prune_before(cutoff)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_available(self, warehouse_id: str, slot_date: Union[str, date], slot_label: str) -> bool:
        day = self._get(warehouse_id, parse_date(slot_date))
        return day is not None and day.slot_details.get(slot_label) == SlotState.AVAILABLE

    def has_day(self, warehouse_id: str, slot_date: Union[str, date]) -> bool:
        return self._get(warehouse_id, parse_date(slot_date)) is not None

    def get_day_schedule(self, warehouse_id: str, slot_date: Union[str, date]) -> DaySchedule:
        slot_date = parse_date(slot_date)
        day = self._get(warehouse_id, slot_date)
        if day is None:
            raise NotFound("Day schedule", f"{warehouse_id}/{slot_date.isoformat()}")
        return day.model_copy(deep=True)

    def find_day_schedule(self, warehouse_id: str, slot_date: Union[str, date]) -> Optional[DaySchedule]:
        day = self._get(warehouse_id, parse_date(slot_date))
        return day.model_copy(deep=True) if day else None

    def list_day_schedules(self, warehouse_id: str) -> list[DaySchedule]:
        days = self._days.get(warehouse_id, {})
        return [days[d].model_copy(deep=True) for d in sorted(days)]

    def list_available_dates(
        self,
        warehouse_id: str,
        within_days: int,
        from_date: Optional[Union[str, date]] = None,
    ) -> list[date]:
        """
        Dates in from_date .. from_date + within_days - 1 with at least one
        Available slot. Sundays and undefined days never qualify.
        """
        start = parse_date(from_date) if from_date is not None else self._today()
        days = self._days.get(warehouse_id, {})
        result = []
        for offset in range(within_days):
            current = start + timedelta(days=offset)
            day = days.get(current)
            if day is not None and not is_closed_day(current) and day.has_capacity():
                result.append(current)
        return result
