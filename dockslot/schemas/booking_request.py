"""
Booking request - the input format the booking portal hands to the ledger.
Documents are opaque: only presence (or a filename-like tag) matters.
"""
import datetime as dt

from pydantic import BaseModel, Field

from dockslot.models.booking import Documents


class BookingRequest(BaseModel):
    warehouse_id: str = Field(..., description="Warehouse code, e.g. INTGHYD00763")
    date: dt.date = Field(..., description="Slot day as ISO 8601 YYYY-MM-DD")
    slot: str = Field(..., description="Slot label 'HH:MM - HH:MM'")
    vendor_name: str
    vendor_id: str
    vehicle_number: str
    driver_contact: str = ""
    items: str = ""
    boxes: int = Field(default=0, ge=0)
    documents: Documents = Field(default_factory=Documents)
