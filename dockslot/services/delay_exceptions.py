"""
Delay reporting and exception approvals.

Layered on top of the booking ledger without adding booking statuses.
When a vendor reports a delay the availability lookahead decides the
branch:
- capacity exists within the window  -> reschedule (cancel and rebook)
- no capacity within the window       -> an exception request is opened
  and waits in the operations approval queue

Exception requests keep their own audit trail; approvers must give remarks.
"""
import datetime as dt
import logging
import threading
from typing import Callable, Optional, Union

from pydantic import BaseModel, Field

from dockslot.config import Settings, get_settings
from dockslot.errors import (
    InvalidScheduleDate,
    InvalidTransition,
    MissingRemarks,
    NotFound,
)
from dockslot.models.booking import Booking, BookingStatus, HistoryEntry
from dockslot.services.availability import first_available_day
from dockslot.services.booking_ledger import BookingLedger
from dockslot.services.schedule_store import ScheduleStore
from dockslot.utils.slots import parse_date

logger = logging.getLogger(__name__)

DELAY_REPORTABLE = (BookingStatus.PENDING, BookingStatus.BOOKED)

DELAY_REASONS = [
    "Vehicle Breakdown",
    "Driver Unwell/Fatigue",
    "Festival/Holiday Delay",
    "Route Blocking/Traffic",
]


class ExceptionStatus:
    REQUESTED = "Requested"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class DelayOutcome:
    RESCHEDULE = "reschedule"
    EXCEPTION_REQUIRED = "exception_required"


class ExceptionRequest(BaseModel):
    booking_id: str
    warehouse_id: str
    original_date: dt.date
    revised_date: dt.date
    reason: str
    type: str
    status: str = ExceptionStatus.REQUESTED
    requested_at: dt.datetime
    remarks: Optional[str] = None
    trail: list[HistoryEntry] = Field(default_factory=list)


class DelayDecision:
    """Result of a delay report."""

    def __init__(
        self,
        outcome: str,
        next_available: Optional[dt.date] = None,
        request: Optional[ExceptionRequest] = None,
    ):
        self.outcome = outcome
        self.next_available = next_available
        self.request = request

    @property
    def requires_exception(self) -> bool:
        return self.outcome == DelayOutcome.EXCEPTION_REQUIRED

    def __repr__(self) -> str:
        return f"<DelayDecision {self.outcome} next_available={self.next_available}>"


class ExceptionDesk:
    def __init__(
        self,
        ledger: BookingLedger,
        store: ScheduleStore,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], dt.datetime]] = None,
    ):
        self._ledger = ledger
        self._store = store
        self._settings = settings or get_settings()
        self._clock = clock or (lambda: dt.datetime.now(dt.timezone.utc))
        self._requests: dict[str, list[ExceptionRequest]] = {}
        self._guard = threading.RLock()

    def _eligible_booking(self, booking_id: str, action: str) -> Booking:
        booking = self._ledger.get_booking(booking_id)
        if booking.status not in DELAY_REPORTABLE:
            raise InvalidTransition(booking.status, action)
        return booking

    @staticmethod
    def _check_reason(reason: str) -> None:
        if reason not in DELAY_REASONS:
            raise ValueError(f"Unknown delay reason '{reason}'; expected one of: {', '.join(DELAY_REASONS)}")

    def _open_request(self, booking_id: str) -> Optional[ExceptionRequest]:
        for request in reversed(self._requests.get(booking_id, [])):
            if request.status == ExceptionStatus.REQUESTED:
                return request
        return None

    def report_delay(
        self,
        booking_id: str,
        reason: str,
        revised_date: Union[str, dt.date],
        from_date: Optional[Union[str, dt.date]] = None,
    ) -> DelayDecision:
        """
        Decide how a reported delay is handled. Scans the availability
        window after from_date (default: the booking's slot day).
        """
        self._check_reason(reason)
        booking = self._eligible_booking(booking_id, "report delay")
        revised = parse_date(revised_date)
        if revised < booking.date:
            raise InvalidScheduleDate(
                f"Revised date {revised.isoformat()} precedes booked date {booking.date.isoformat()}"
            )

        scan_from = parse_date(from_date) if from_date is not None else booking.date
        next_day = first_available_day(
            self._store, booking.warehouse_id, scan_from, self._settings.availability_window_days,
        )
        if next_day is not None:
            logger.info(
                "Delay on %s can be rescheduled; next free day %s", booking_id, next_day,
                extra={"booking_id": booking_id, "warehouse_id": booking.warehouse_id},
            )
            return DelayDecision(DelayOutcome.RESCHEDULE, next_available=next_day)

        request = self.request_exception(booking_id, reason, revised)
        return DelayDecision(DelayOutcome.EXCEPTION_REQUIRED, request=request)

    def request_exception(
        self,
        booking_id: str,
        reason: str,
        revised_date: Union[str, dt.date],
    ) -> ExceptionRequest:
        self._check_reason(reason)
        booking = self._eligible_booking(booking_id, "request exception")
        with self._guard:
            if self._open_request(booking_id) is not None:
                raise InvalidTransition(
                    booking.status, "request exception",
                    f"Booking {booking_id} already has an open exception request",
                )
            now = self._clock()
            request = ExceptionRequest(
                booking_id=booking_id,
                warehouse_id=booking.warehouse_id,
                original_date=booking.date,
                revised_date=parse_date(revised_date),
                reason=reason,
                type=f"Delayed > {self._settings.availability_window_days} Days (No Slots)",
                requested_at=now,
                trail=[HistoryEntry(status=ExceptionStatus.REQUESTED, timestamp=now, remarks=reason)],
            )
            self._requests.setdefault(booking_id, []).append(request)

        logger.info(
            "Exception requested for %s: %s", booking_id, reason,
            extra={"booking_id": booking_id, "warehouse_id": booking.warehouse_id,
                   "status": ExceptionStatus.REQUESTED},
        )
        return request.model_copy(deep=True)

    def process_exception(self, booking_id: str, action: str, remarks: str) -> ExceptionRequest:
        """Approve or reject the open request for a booking. Remarks are mandatory.

        The booking must still be Approval Pending or Booked; requests on a
        booking that has since been cancelled or completed cannot be decided.
        """
        if not remarks or not remarks.strip():
            raise MissingRemarks("Remarks are mandatory for approval/rejection")
        outcomes = {"approve": ExceptionStatus.APPROVED, "reject": ExceptionStatus.REJECTED}
        if action not in outcomes:
            raise ValueError(f"Unknown exception action '{action}'")
        self._eligible_booking(booking_id, "process exception")

        with self._guard:
            request = self._open_request(booking_id)
            if request is None:
                raise NotFound("Open exception request", booking_id)
            request.status = outcomes[action]
            request.remarks = remarks.strip()
            request.trail.append(HistoryEntry(
                status=request.status, timestamp=self._clock(), remarks=request.remarks,
            ))

        logger.info(
            "Exception %s for %s", request.status.lower(), booking_id,
            extra={"booking_id": booking_id, "status": request.status},
        )
        return request.model_copy(deep=True)

    def get_request(self, booking_id: str) -> ExceptionRequest:
        """Latest exception request for a booking."""
        requests = self._requests.get(booking_id)
        if not requests:
            raise NotFound("Exception request", booking_id)
        return requests[-1].model_copy(deep=True)

    def list_open(self) -> list[ExceptionRequest]:
        """The approval queue, oldest request first. Closed bookings drop out."""
        with self._guard:
            open_requests = [
                r for requests in self._requests.values() for r in requests
                if r.status == ExceptionStatus.REQUESTED
            ]
        open_requests = [
            r for r in open_requests
            if self._ledger.get_booking(r.booking_id).status in DELAY_REPORTABLE
        ]
        open_requests.sort(key=lambda r: r.requested_at)
        return [r.model_copy(deep=True) for r in open_requests]
