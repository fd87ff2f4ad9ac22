"""
Booking ledger - creates bookings and moves them through their lifecycle.

Keeps the schedule store consistent with booking state:
- creation allocates the slot (nothing is allocated if validation fails)
- cancellation releases it
- rejection releases it only when release_slot_on_reject is set

Bookings are never deleted. Every successful transition appends exactly
one history entry stamped with the action time; entry/exit timestamps
may be backdated and are stored separately.

Lock order is ledger guard -> warehouse-day lock, never the reverse.
"""
import logging
import threading
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional, Union

from dockslot.config import Settings, get_settings
from dockslot.errors import (
    DockSlotError,
    InvalidTimestampOrder,
    MissingMandatoryDocuments,
    NotFound,
    TooEarly,
)
from dockslot.models.booking import (
    Booking,
    BookingStatus,
    HistoryEntry,
    UnloadingStatus,
)
from dockslot.schemas.booking_request import BookingRequest
from dockslot.services.lifecycle import BookingAction, next_status
from dockslot.services.schedule_status import classify
from dockslot.services.schedule_store import ScheduleStore
from dockslot.utils.slots import parse_date, parse_timestamp, slot_start_minutes, slot_window
from dockslot.utils.timezone import to_local_naive

logger = logging.getLogger(__name__)

# Statuses hidden from the live dock monitoring view
NOT_ON_DOCK_SCHEDULE = (BookingStatus.PENDING, BookingStatus.REJECTED, BookingStatus.CANCELLED)

# Statuses excluded from capacity occupancy counts
INACTIVE_STATUSES = (BookingStatus.REJECTED, BookingStatus.CANCELLED)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BookingLedger:
    def __init__(
        self,
        store: ScheduleStore,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._store = store
        self._settings = settings or get_settings()
        self._clock = clock or _utcnow
        self._bookings: dict[str, Booking] = {}
        self._guard = threading.RLock()

    @property
    def settings(self) -> Settings:
        return self._settings

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _new_id(self) -> str:
        while True:
            booking_id = f"BKG-{uuid.uuid4().hex[:10].upper()}"
            if booking_id not in self._bookings:
                return booking_id

    def _require(self, booking_id: str) -> Booking:
        booking = self._bookings.get(booking_id)
        if booking is None:
            raise NotFound("Booking", booking_id)
        return booking

    def _local(self, ts: datetime) -> datetime:
        return to_local_naive(ts, self._settings.warehouse_timezone)

    def _refuse(self, exc: DockSlotError, booking_id: Optional[str] = None, **extra) -> DockSlotError:
        logger.warning(
            "Booking operation refused: %s", exc.message,
            extra={"booking_id": booking_id, "error_code": exc.error_code, **extra},
        )
        return exc

    def _next_status(self, booking: Booking, action: str) -> str:
        try:
            return next_status(booking.status, action)
        except DockSlotError as e:
            raise self._refuse(e, booking.id, status=booking.status)

    def _record(self, booking: Booking, status: str, remarks: Optional[str] = None) -> None:
        booking.status = status
        booking.history.append(HistoryEntry(status=status, timestamp=self._clock(), remarks=remarks))
        logger.info(
            "Booking %s -> %s", booking.id, status,
            extra={"booking_id": booking.id, "warehouse_id": booking.warehouse_id,
                   "slot_date": booking.date, "slot_label": booking.slot, "status": status},
        )

    def _classify(self, booking: Booking) -> str:
        return classify(
            booking.date,
            booking.slot,
            booking.entry_time,
            booking.exit_time,
            threshold_minutes=self._settings.delay_threshold_minutes,
            timezone_str=self._settings.warehouse_timezone,
            strict=self._settings.strict_schedule_status,
        )

    def _holds_slot(self, booking: Booking) -> bool:
        if booking.status == BookingStatus.CANCELLED:
            return False
        if booking.status == BookingStatus.REJECTED:
            return not self._settings.release_slot_on_reject
        return True

    def _snapshot(self, bookings) -> list[Booking]:
        return [b.model_copy(deep=True) for b in bookings]

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_booking(self, request: Union[BookingRequest, dict]) -> Booking:
        """
        Validate documents, allocate the slot and record a new booking.

        Raises MissingMandatoryDocuments, NotFound (unknown warehouse),
        InvalidSlot (no schedule that day) or SlotUnavailable. On any
        failure the schedule store is left untouched.
        """
        if not isinstance(request, BookingRequest):
            request = BookingRequest.model_validate(request)

        missing = request.documents.missing_mandatory()
        if missing:
            raise self._refuse(MissingMandatoryDocuments(missing), warehouse_id=request.warehouse_id)

        self._store.directory.get_warehouse(request.warehouse_id)

        with self._guard:
            booking_id = self._new_id()
            status = self._settings.booking_initial_status
            booking = Booking(
                id=booking_id,
                warehouse_id=request.warehouse_id,
                date=request.date,
                slot=request.slot,
                vendor_name=request.vendor_name,
                vendor_id=request.vendor_id,
                vehicle_number=request.vehicle_number,
                driver_contact=request.driver_contact,
                items=request.items,
                boxes=request.boxes,
                documents=request.documents.model_copy(deep=True),
                status=status,
                created_at=self._clock(),
            )

            try:
                self._store.allocate(request.warehouse_id, request.date, request.slot, booking_id)
            except DockSlotError as e:
                raise self._refuse(
                    e, warehouse_id=request.warehouse_id,
                    slot_date=request.date, slot_label=request.slot,
                )

            self._bookings[booking_id] = booking
            self._record(booking, status)
            return booking.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Approval
    # ------------------------------------------------------------------

    def approve(self, booking_id: str, remarks: Optional[str] = None) -> Booking:
        with self._guard:
            booking = self._require(booking_id)
            target = self._next_status(booking, BookingAction.APPROVE)
            self._record(booking, target, remarks)
            return booking.model_copy(deep=True)

    def reject(self, booking_id: str, remarks: Optional[str] = None) -> Booking:
        """Reject a pending booking. The slot stays occupied unless release_slot_on_reject."""
        with self._guard:
            booking = self._require(booking_id)
            target = self._next_status(booking, BookingAction.REJECT)
            if self._settings.release_slot_on_reject:
                self._store.release(booking.warehouse_id, booking.date, booking.slot)
            self._record(booking, target, remarks)
            return booking.model_copy(deep=True)

    def cancel(self, booking_id: str, remarks: Optional[str] = None) -> Booking:
        with self._guard:
            booking = self._require(booking_id)
            target = self._next_status(booking, BookingAction.CANCEL)
            self._store.release(booking.warehouse_id, booking.date, booking.slot)
            self._record(booking, target, remarks)
            return booking.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Dock operations
    # ------------------------------------------------------------------

    def entry_opens_at(self, booking_id: str) -> datetime:
        """Earliest warehouse-local time the vehicle may be marked entered."""
        booking = self._require(booking_id)
        scheduled_start, _ = slot_window(booking.date, booking.slot)
        return scheduled_start - timedelta(minutes=self._settings.entry_grace_minutes)

    def mark_entered(self, booking_id: str, entry_time: Union[str, datetime]) -> Booking:
        """
        Record vehicle arrival. Allowed from Booked only, and no earlier
        than entry_grace_minutes before the slot starts. entry_time may be
        an ISO 8601 string; MalformedSchedule if it cannot be parsed.
        """
        entry_time = parse_timestamp(entry_time)
        with self._guard:
            booking = self._require(booking_id)
            target = self._next_status(booking, BookingAction.ENTER)

            allowed_from = self.entry_opens_at(booking_id)
            if self._local(entry_time) < allowed_from:
                raise self._refuse(TooEarly(allowed_from), booking_id, slot_label=booking.slot)

            booking.entry_time = entry_time
            booking.unloading_status = UnloadingStatus.IN_PROGRESS
            booking.schedule_status = self._classify(booking)
            self._record(booking, target)
            return booking.model_copy(deep=True)

    def mark_exited(self, booking_id: str, exit_time: Union[str, datetime]) -> Booking:
        """Record vehicle departure. Allowed from Vehicle Reached only."""
        exit_time = parse_timestamp(exit_time)
        with self._guard:
            booking = self._require(booking_id)
            target = self._next_status(booking, BookingAction.EXIT)

            if self._local(exit_time) < self._local(booking.entry_time):
                raise self._refuse(
                    InvalidTimestampOrder(
                        f"Exit {exit_time.isoformat()} precedes entry {booking.entry_time.isoformat()}"
                    ),
                    booking_id,
                )

            booking.exit_time = exit_time
            booking.unloading_status = UnloadingStatus.COMPLETED
            booking.schedule_status = self._classify(booking)
            self._record(booking, target)
            return booking.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_booking(self, booking_id: str) -> Booking:
        return self._require(booking_id).model_copy(deep=True)

    def list_bookings(self) -> list[Booking]:
        with self._guard:
            return self._snapshot(self._bookings.values())

    def list_by_vendor(self, vendor_id: str) -> list[Booking]:
        with self._guard:
            return self._snapshot(b for b in self._bookings.values() if b.vendor_id == vendor_id)

    def list_by_warehouse(self, warehouse_id: str) -> list[Booking]:
        with self._guard:
            return self._snapshot(b for b in self._bookings.values() if b.warehouse_id == warehouse_id)

    def list_by_date_range(self, start: Union[str, date], end: Union[str, date]) -> list[Booking]:
        """Bookings whose slot day falls within start..end inclusive."""
        start, end = parse_date(start), parse_date(end)
        with self._guard:
            return self._snapshot(b for b in self._bookings.values() if start <= b.date <= end)

    def list_by_status(self, status: str) -> list[Booking]:
        with self._guard:
            return self._snapshot(b for b in self._bookings.values() if b.status == status)

    def slot_holder_ids(self, warehouse_id: str, slot_date: Union[str, date]) -> list[str]:
        """Bookings on a warehouse day that still occupy their slot."""
        slot_date = parse_date(slot_date)
        with self._guard:
            return [
                b.id for b in self._bookings.values()
                if b.warehouse_id == warehouse_id and b.date == slot_date and self._holds_slot(b)
            ]

    def active_booking_ids(self, warehouse_id: str, slot_date: Union[str, date]) -> list[str]:
        """Bookings on a warehouse day counted as occupancy in capacity views."""
        slot_date = parse_date(slot_date)
        with self._guard:
            return [
                b.id for b in self._bookings.values()
                if b.warehouse_id == warehouse_id and b.date == slot_date
                and b.status not in INACTIVE_STATUSES
            ]

    def live_operations(
        self,
        warehouse_id: str,
        start: Optional[Union[str, date]] = None,
        end: Optional[Union[str, date]] = None,
        vendor: Optional[str] = None,
        vehicle: Optional[str] = None,
        schedule_status: Optional[str] = None,
    ) -> list[Booking]:
        """
        Dock monitoring view for one warehouse, ordered by slot start.

        Date range applies only when both ends are given. Vendor matches a
        case-insensitive substring of vendor name or id; vehicle a
        case-insensitive substring of the vehicle number.
        """
        start_date = parse_date(start) if start and end else None
        end_date = parse_date(end) if start and end else None
        vendor_q = vendor.lower() if vendor else None
        vehicle_q = vehicle.lower() if vehicle else None

        def matches(b: Booking) -> bool:
            if b.warehouse_id != warehouse_id or b.status in NOT_ON_DOCK_SCHEDULE:
                return False
            if start_date and not (start_date <= b.date <= end_date):
                return False
            if vendor_q and vendor_q not in b.vendor_name.lower() and vendor_q not in b.vendor_id.lower():
                return False
            if vehicle_q and vehicle_q not in b.vehicle_number.lower():
                return False
            if schedule_status and b.schedule_status != schedule_status:
                return False
            return True

        with self._guard:
            selected = [b for b in self._bookings.values() if matches(b)]
        selected.sort(key=lambda b: (b.date, slot_start_minutes(b.slot)))
        return self._snapshot(selected)
