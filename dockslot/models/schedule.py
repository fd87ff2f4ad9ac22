"""
Day schedule model - bookable dock capacity of one warehouse on one date.
"""
import datetime as dt

from pydantic import BaseModel, Field


class SlotState:
    """Occupancy of a single slot label."""
    AVAILABLE = "Available"
    BOOKED = "Booked"


class DaySchedule(BaseModel):
    warehouse_id: str = Field(frozen=True)
    date: dt.date = Field(frozen=True)

    # Slot label -> Available | Booked, in definition order
    slot_details: dict[str, str] = Field(default_factory=dict)

    # Every booking ever allocated on this day, in booking order.
    # Released slots keep their booking id here for audit history.
    booking_ids: list[str] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.slot_details)

    @property
    def booked(self) -> int:
        return sum(1 for state in self.slot_details.values() if state == SlotState.BOOKED)

    @property
    def available(self) -> int:
        return self.total - self.booked

    def has_capacity(self) -> bool:
        return self.booked < self.total

    def available_slots(self) -> list[str]:
        return [label for label, state in self.slot_details.items() if state == SlotState.AVAILABLE]

    def booked_slots(self) -> list[str]:
        return [label for label, state in self.slot_details.items() if state == SlotState.BOOKED]

    def __repr__(self) -> str:
        return f"<DaySchedule {self.warehouse_id} {self.date} {self.booked}/{self.total}>"
