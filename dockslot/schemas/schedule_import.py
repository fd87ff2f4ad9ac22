"""
Schedule import rows - one warehouse day per row, already parsed from the
uploaded sheet. A row carries either explicit slot labels or a slot count.
"""
import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class ScheduleRow(BaseModel):
    warehouse_id: str
    date: dt.date
    slot_labels: Optional[list[str]] = None
    total_slots: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _one_capacity_source(self) -> "ScheduleRow":
        if (self.slot_labels is None) == (self.total_slots is None):
            raise ValueError("Provide exactly one of slot_labels or total_slots")
        if self.slot_labels is not None and not self.slot_labels:
            raise ValueError("slot_labels must not be empty")
        return self
