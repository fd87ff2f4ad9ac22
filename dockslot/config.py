"""
Application configuration using pydantic-settings.
All config is validated at startup - fail fast if anything is invalid.
"""
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ALLOWED_INITIAL_STATUSES = ("Approval Pending", "Booked")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DOCKSLOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    log_level: str = "INFO"

    # Slot labels are wall-clock times in this zone
    warehouse_timezone: str = "Asia/Kolkata"

    # Booking policy
    booking_initial_status: str = "Approval Pending"  # Approval Pending, Booked
    release_slot_on_reject: bool = False  # False keeps rejected slots occupied for audit

    # Dock timing rules
    entry_grace_minutes: int = 30
    delay_threshold_minutes: int = 30
    strict_schedule_status: bool = False

    # Availability lookahead used by the delay/exception flow
    availability_window_days: int = 14

    # Seeding
    default_time_slots: list[str] = Field(
        default_factory=lambda: ["09:00 - 12:00", "13:00 - 16:00", "16:00 - 19:00"]
    )
    seed_horizon_days: int = 30

    # Per warehouse-day lock
    slot_lock_timeout_seconds: float = 5.0

    @field_validator("booking_initial_status")
    @classmethod
    def _check_initial_status(cls, value: str) -> str:
        if value not in ALLOWED_INITIAL_STATUSES:
            raise ValueError(
                f"booking_initial_status must be one of {', '.join(ALLOWED_INITIAL_STATUSES)}"
            )
        return value

    @field_validator(
        "entry_grace_minutes",
        "delay_threshold_minutes",
        "availability_window_days",
        "seed_horizon_days",
    )
    @classmethod
    def _check_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive number")
        return value


@lru_cache()
def get_settings() -> Settings:
    return Settings()
