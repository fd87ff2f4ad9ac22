"""
Typed failures raised by the slot and booking ledger.

Every error carries an error_code naming its kind so callers (and the
structured logger) can branch on it without string matching.
"""
from datetime import datetime
from typing import Optional


class DockSlotError(Exception):
    """Base class for all recoverable, caller-visible ledger failures."""

    error_code = "dockslot_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.error_code)
        self.message = message or self.error_code

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.error_code}: {self.message}>"


class InvalidScheduleDate(DockSlotError):
    """Date is a closed day (Sunday) or outside the bookable calendar."""

    error_code = "invalid_schedule_date"


class SlotUnavailable(DockSlotError):
    """Slot is already booked or does not exist for that day."""

    error_code = "slot_unavailable"


class InvalidSlot(SlotUnavailable):
    """No day schedule exists for the requested warehouse and date."""

    error_code = "invalid_slot"


class MissingMandatoryDocuments(DockSlotError):
    error_code = "missing_mandatory_documents"

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"Mandatory documents missing: {', '.join(self.missing)}")


class InvalidTransition(DockSlotError):
    error_code = "invalid_transition"

    def __init__(self, current_status: str, action: str, message: str = ""):
        self.current_status = current_status
        self.action = action
        super().__init__(
            message or f"Cannot {action} a booking in '{current_status}' status"
        )


class TooEarly(DockSlotError):
    error_code = "too_early"

    def __init__(self, allowed_from: datetime):
        self.allowed_from = allowed_from
        super().__init__(f"Entry allowed from {allowed_from.strftime('%Y-%m-%d %H:%M')}")


class InvalidTimestampOrder(DockSlotError):
    """Exit timestamp precedes the recorded entry timestamp."""

    error_code = "invalid_timestamp_order"


class NotFound(DockSlotError):
    error_code = "not_found"

    def __init__(self, kind: str, key: Optional[str] = None):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key}" if key else f"{kind} not found")


class MalformedSchedule(DockSlotError):
    """Slot label or date could not be parsed."""

    error_code = "malformed_schedule"


class ScheduleConflict(DockSlotError):
    """Schedule edit or removal would orphan an occupied slot."""

    error_code = "schedule_conflict"


class LockTimeoutError(DockSlotError):
    """Raised when a warehouse-day lock cannot be acquired within the timeout."""

    error_code = "lock_timeout"


class MissingRemarks(DockSlotError):
    """Approval or rejection of an exception without the mandatory remarks."""

    error_code = "missing_remarks"
