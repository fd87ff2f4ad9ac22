"""
Structured JSON logging with correlation IDs.

One JSON object per line: timestamp, level, correlation_id, module, message,
plus any booking/slot fields passed through `extra=`. A correlation ID ties
together every line of one operation batch (a seed run, a schedule import).
"""
import json
import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import date, datetime, timezone
from typing import Iterator, Optional

correlation_id_ctx: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

# Domain fields lifted from `extra=` onto the JSON line
EXTRA_FIELDS = (
    "booking_id",
    "warehouse_id",
    "slot_date",
    "slot_label",
    "status",
    "error_code",
)


def get_correlation_id() -> Optional[str]:
    return correlation_id_ctx.get()


def set_correlation_id(cid: str) -> None:
    correlation_id_ctx.set(cid)


def generate_correlation_id() -> str:
    """UUID4 hex, 32 chars."""
    return uuid.uuid4().hex


@contextmanager
def correlation_scope(cid: Optional[str] = None) -> Iterator[str]:
    """Run a block under its own correlation ID, restoring the previous one after."""
    token = correlation_id_ctx.set(cid or generate_correlation_id())
    try:
        yield correlation_id_ctx.get()
    finally:
        correlation_id_ctx.reset(token)


def _json_default(value):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


class StructuredJsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "correlation_id": get_correlation_id(),
            "module": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, getattr(record, key))
            for key in EXTRA_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=_json_default)


def configure_structured_logging(log_level: str = "INFO") -> None:
    """Install the JSON formatter on the root logger. Call once at startup."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredJsonFormatter())
    root.addHandler(handler)
