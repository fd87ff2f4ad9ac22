"""
Structured logging tests.
"""
import json
import logging
from datetime import date

from dockslot.utils.logging import (
    StructuredJsonFormatter,
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)


def make_record(**extra):
    record = logging.LogRecord(
        name="dockslot.services.booking_ledger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Booking %s -> %s",
        args=("BKG-1", "Booked"),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestCorrelationId:
    def test_generate_is_hex(self):
        """Should generate a 32-character hex id."""
        cid = generate_correlation_id()
        assert len(cid) == 32
        int(cid, 16)

    def test_set_and_get(self):
        """Should return the id that was set."""
        set_correlation_id("abc123")
        assert get_correlation_id() == "abc123"


class TestStructuredJsonFormatter:
    def test_core_fields(self):
        """Should write level, module, message and correlation id."""
        set_correlation_id("run-1")
        entry = json.loads(StructuredJsonFormatter().format(make_record()))
        assert entry["level"] == "INFO"
        assert entry["module"] == "dockslot.services.booking_ledger"
        assert entry["message"] == "Booking BKG-1 -> Booked"
        assert entry["correlation_id"] == "run-1"

    def test_domain_extras_copied(self):
        """Should copy booking extras and skip empty ones."""
        record = make_record(booking_id="BKG-1", warehouse_id="INTGHYD00763", error_code=None)
        entry = json.loads(StructuredJsonFormatter().format(record))
        assert entry["booking_id"] == "BKG-1"
        assert entry["warehouse_id"] == "INTGHYD00763"
        assert "error_code" not in entry

    def test_dates_serialised(self):
        """Should write dates as ISO strings."""
        entry = json.loads(StructuredJsonFormatter().format(make_record(slot_date=date(2026, 2, 16))))
        assert entry["slot_date"] == "2026-02-16"


class TestCorrelationScope:
    def test_scope_restores_previous_id(self):
        """Should restore the outer id after the scope ends."""
        set_correlation_id("outer")
        with correlation_scope("inner") as cid:
            assert cid == "inner"
            assert get_correlation_id() == "inner"
        assert get_correlation_id() == "outer"

    def test_scope_generates_id(self):
        """Should generate an id when none is given."""
        with correlation_scope() as cid:
            assert len(cid) == 32
