"""Application settings and configuration management."""
from decimal import Decimal
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class BookingAPISettings(BaseSettings):
    """Booking/property API configuration."""

    base_url: str = "http://localhost:5000/api"
    auth_token: Optional[str] = None  # Bearer token; usually supplied per session instead
    request_timeout: int = 30
    max_retries: int = 3

    model_config = SettingsConfigDict(env_prefix="BOOKING_API_")


class PricingSettings(BaseSettings):
    """Default fee rates used when a property does not supply explicit fees."""

    cleaning_fee_rate: Decimal = Decimal("0.10")  # Of the nightly rate
    service_fee_rate: Decimal = Decimal("0.10")  # Of the subtotal

    model_config = SettingsConfigDict(env_prefix="PRICING_")


class CalendarSettings(BaseSettings):
    """Selectable date window for the stay picker."""

    booking_horizon_days: Optional[int] = 365  # None = open-ended
    allow_past_dates: bool = False

    model_config = SettingsConfigDict(env_prefix="CALENDAR_")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class Settings(BaseSettings):
    """Main application settings."""

    # Sub-settings
    booking_api: BookingAPISettings = BookingAPISettings()
    pricing: PricingSettings = PricingSettings()
    calendar: CalendarSettings = CalendarSettings()
    logging: LoggingSettings = LoggingSettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def booking_api_base_url(self) -> str:
        """Booking API base URL without trailing slash."""
        return self.booking_api.base_url.rstrip("/")


# Global settings instance
settings = Settings()
