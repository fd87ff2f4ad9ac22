"""
Slot label parsing and generation.

A slot label is a 24-hour "HH:MM - HH:MM" window inside one calendar
day. Overnight windows are not supported.
"""
import re
from datetime import date, datetime, time
from typing import Union

from dockslot.errors import MalformedSchedule

SLOT_LABEL_RE = re.compile(r"^\s*(\d{2}):(\d{2})\s*-\s*(\d{2}):(\d{2})\s*$")


def _parse_time(hours: str, minutes: str, label: str) -> time:
    try:
        return time(int(hours), int(minutes))
    except ValueError:
        raise MalformedSchedule(f"Invalid time in slot label '{label}'")


def parse_slot_label(label: str) -> tuple[time, time]:
    """Parse "HH:MM - HH:MM" into (start, end)."""
    match = SLOT_LABEL_RE.match(label or "")
    if not match:
        raise MalformedSchedule(f"Slot label '{label}' is not in 'HH:MM - HH:MM' form")
    start = _parse_time(match.group(1), match.group(2), label)
    end = _parse_time(match.group(3), match.group(4), label)
    if end <= start:
        raise MalformedSchedule(f"Slot label '{label}' must end after it starts")
    return start, end


def format_slot_label(start: time, end: time) -> str:
    return f"{start.strftime('%H:%M')} - {end.strftime('%H:%M')}"


def parse_date(value: Union[str, date]) -> date:
    """Accept a date or an ISO "YYYY-MM-DD" string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise MalformedSchedule(f"Invalid calendar date '{value}'")


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """Accept a datetime or an ISO 8601 date-time string, with or without offset."""
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise MalformedSchedule(f"Invalid timestamp '{value}'")


def slot_window(slot_date: Union[str, date], label: str) -> tuple[datetime, datetime]:
    """Scheduled (start, end) datetimes of a slot on its day."""
    day = parse_date(slot_date)
    start, end = parse_slot_label(label)
    return datetime.combine(day, start), datetime.combine(day, end)


def slot_start_minutes(label: str) -> int:
    """Minutes after midnight at which a slot starts; used for ordering."""
    start, _ = parse_slot_label(label)
    return start.hour * 60 + start.minute


def build_slot_labels(
    count: int,
    day_start: str = "09:00",
    slot_minutes: int = 60,
    buffer_minutes: int = 0,
) -> list[str]:
    """
    Generate `count` consecutive slot labels from day_start.
    Each slot lasts slot_minutes, followed by buffer_minutes of dock turnaround.
    """
    if count <= 0:
        raise MalformedSchedule("Slot count must be positive")
    if slot_minutes <= 0 or buffer_minutes < 0:
        raise MalformedSchedule("Slot length must be positive and buffer non-negative")

    start_time, _ = parse_slot_label(f"{day_start} - 23:59")
    current = start_time.hour * 60 + start_time.minute
    labels = []
    for _ in range(count):
        end = current + slot_minutes
        if end > 24 * 60 - 1:
            raise MalformedSchedule(f"{count} slots of {slot_minutes} min do not fit after {day_start}")
        labels.append(format_slot_label(
            time(current // 60, current % 60),
            time(end // 60, end % 60),
        ))
        current = end + buffer_minutes
    return labels
