"""
Timezone utilities for dock scheduling.

Slot labels are warehouse wall-clock times. Timestamps arriving with an
offset are converted into the warehouse zone and compared as naive
local datetimes; naive timestamps are taken as already local.
"""
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "Asia/Kolkata"


def get_zoneinfo(timezone_str: Optional[str] = None) -> ZoneInfo:
    """Get ZoneInfo object, defaulting to the network's home zone."""
    return ZoneInfo(timezone_str or DEFAULT_TIMEZONE)


def to_local_naive(ts: datetime, timezone_str: Optional[str] = None) -> datetime:
    """Convert an aware timestamp to naive warehouse-local time."""
    if ts.tzinfo is None:
        return ts
    return ts.astimezone(get_zoneinfo(timezone_str)).replace(tzinfo=None)
