"""
Closed-day rules for dock scheduling.

Sunday is a network-wide closed day: no warehouse ever has bookable
capacity on it. The rule is domain-level, not a per-warehouse setting.
"""
from datetime import date, timedelta
from typing import Iterator

# weekday(): 0=Monday, 6=Sunday
CLOSED_WEEKDAYS = frozenset({6})


def is_closed_day(check_date: date) -> bool:
    """Check if docks are closed on a date."""
    return check_date.weekday() in CLOSED_WEEKDAYS


def next_open_day(check_date: date) -> date:
    """Return check_date itself if open, else the next open day."""
    current = check_date
    while is_closed_day(current):
        current += timedelta(days=1)
    return current


def iter_open_days(start_date: date, days: int) -> Iterator[date]:
    """
    Yield the open days among start_date .. start_date + days - 1.
    Closed days are skipped but still count towards the span.
    """
    for offset in range(days):
        current = start_date + timedelta(days=offset)
        if not is_closed_day(current):
            yield current
