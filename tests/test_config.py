"""
Settings validation tests.
"""
import pytest
from pydantic import ValidationError

from dockslot.config import Settings


class TestSettings:
    def test_defaults(self):
        """Should load the documented defaults."""
        settings = Settings(_env_file=None)
        assert settings.warehouse_timezone == "Asia/Kolkata"
        assert settings.booking_initial_status == "Approval Pending"
        assert settings.release_slot_on_reject is False
        assert settings.entry_grace_minutes == 30
        assert settings.availability_window_days == 14
        assert settings.default_time_slots == ["09:00 - 12:00", "13:00 - 16:00", "16:00 - 19:00"]

    def test_env_override(self, monkeypatch):
        """Should read overrides from DOCKSLOT_ environment variables."""
        monkeypatch.setenv("DOCKSLOT_RELEASE_SLOT_ON_REJECT", "true")
        monkeypatch.setenv("DOCKSLOT_AVAILABILITY_WINDOW_DAYS", "21")
        settings = Settings(_env_file=None)
        assert settings.release_slot_on_reject is True
        assert settings.availability_window_days == 21

    def test_unknown_initial_status(self):
        """Should reject an initial status outside the allowed two."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, booking_initial_status="Vehicle Reached")

    @pytest.mark.parametrize("field", ["entry_grace_minutes", "delay_threshold_minutes", "availability_window_days"])
    def test_non_positive_rejected(self, field):
        """Should reject zero for minute and day settings."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: 0})
