"""Application configuration."""
from datetime import date, time
from typing import List, Tuple

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./court_reservations.db"

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Facility
    FACILITY_NAME: str = "PB Tennis Court"
    FACILITY_TIMEZONE: str = "Europe/Vilnius"
    WEEKDAY_OPEN: time = time(8, 0)
    WEEKDAY_CLOSE: time = time(22, 0)
    WEEKEND_OPEN: time = time(8, 0)
    WEEKEND_CLOSE: time = time(22, 0)

    # Booking rules
    SLOT_MINUTES: int = 30
    MAX_SLOTS_PER_BOOKING: int = 4

    # Email
    EMAIL_ENABLED: bool = False
    EMAIL_API_BASE_URL: str = "https://api.resend.com"
    EMAIL_API_KEY: str = ""
    EMAIL_FROM_ADDRESS: str = "PB Tennis Court <noreply@example.com>"
    EMAIL_TIMEOUT_SECONDS: float = 30.0
    EMAIL_MAX_RETRIES: int = 3

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def max_booking_minutes(self) -> int:
        return self.SLOT_MINUTES * self.MAX_SLOTS_PER_BOOKING

    def operating_hours_for(self, target_date: date) -> Tuple[time, time]:
        """Return the (open, close) pair for the weekday class of a date."""
        if target_date.weekday() >= 5:
            return self.WEEKEND_OPEN, self.WEEKEND_CLOSE
        return self.WEEKDAY_OPEN, self.WEEKDAY_CLOSE


settings = Settings()
