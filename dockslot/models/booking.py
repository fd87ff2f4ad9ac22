"""
Booking model - one vendor's reservation of one dock slot, with the
operational timestamps and the append-only status history.
"""
import datetime as dt
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class BookingStatus:
    """Booking status constants - use these instead of strings."""
    PENDING = "Approval Pending"
    BOOKED = "Booked"
    REJECTED = "Rejected"
    CANCELLED = "Cancelled"
    VEHICLE_REACHED = "Vehicle Reached"
    VEHICLE_EXITED = "Vehicle Exited"

    @classmethod
    def all(cls) -> list[str]:
        return [
            cls.PENDING, cls.BOOKED, cls.REJECTED,
            cls.CANCELLED, cls.VEHICLE_REACHED, cls.VEHICLE_EXITED,
        ]

    @classmethod
    def terminal(cls) -> list[str]:
        return [cls.REJECTED, cls.CANCELLED, cls.VEHICLE_EXITED]


class UnloadingStatus:
    PENDING = "Pending"
    IN_PROGRESS = "In-Progress"
    COMPLETED = "Completed"


class ScheduleStatus:
    ON_TIME = "On time"
    ENTRY_DELAYED = "Entry delayed"
    EXIT_DELAYED = "Exit delayed"


MANDATORY_DOCUMENTS = ("coa", "invoice")

# Opaque attachment reference: presence flag or a filename-like tag
DocumentRef = Union[bool, str, None]


class Documents(BaseModel):
    """Attached documents by kind. Content is never inspected."""
    model_config = ConfigDict(extra="allow")

    coa: DocumentRef = None
    invoice: DocumentRef = None
    lr: DocumentRef = None

    def is_present(self, kind: str) -> bool:
        return bool(getattr(self, kind, None))

    def missing_mandatory(self) -> list[str]:
        return [kind for kind in MANDATORY_DOCUMENTS if not self.is_present(kind)]


class HistoryEntry(BaseModel):
    status: str
    timestamp: dt.datetime
    remarks: Optional[str] = None


class Booking(BaseModel):
    # Identity and slot commitment (fixed for the booking's lifetime)
    id: str = Field(frozen=True)
    warehouse_id: str = Field(frozen=True)
    date: dt.date = Field(frozen=True)
    slot: str = Field(frozen=True)

    # Shipment details
    vendor_name: str
    vendor_id: str
    vehicle_number: str
    driver_contact: str = ""
    items: str = ""
    boxes: int = 0
    documents: Documents = Field(default_factory=Documents)

    # Operational state
    status: str = BookingStatus.PENDING
    entry_time: Optional[dt.datetime] = None
    exit_time: Optional[dt.datetime] = None
    unloading_status: str = UnloadingStatus.PENDING
    schedule_status: str = ScheduleStatus.ON_TIME
    history: list[HistoryEntry] = Field(default_factory=list)

    created_at: dt.datetime = Field(default_factory=lambda: dt.datetime.now(dt.timezone.utc))

    @property
    def is_terminal(self) -> bool:
        return self.status in BookingStatus.terminal()

    def __repr__(self) -> str:
        return f"<Booking {self.id} {self.warehouse_id} {self.date} {self.slot} status={self.status}>"
