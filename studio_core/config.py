"""
Centralized configuration with environment variable overrides.

Defaults for timezone handling, slot generation, booking statuses and
pricing labels live here. Nothing is hardcoded in resolver or pricing logic.
"""

import logging
import os
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _csv_tuple(env_var: str, default: str) -> tuple[str, ...]:
    """Parse a comma-separated env var into a tuple of lowercase tokens."""
    raw = os.getenv(env_var, default)
    return tuple(part.strip().lower() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class AvailabilityConfig:
    """Availability resolution and slot generation settings."""

    default_timezone: str = os.getenv("DEFAULT_TIMEZONE", "UTC")
    slot_step_minutes: int = _safe_int("SLOT_STEP_MINUTES", "30")
    default_slot_minutes: int = _safe_int("DEFAULT_SLOT_MINUTES", "60")


@dataclass(frozen=True)
class BookingConfig:
    """Which existing bookings take a resource out of availability."""

    blocking_statuses: tuple[str, ...] = _csv_tuple(
        "BLOCKING_BOOKING_STATUSES", "confirmed,payment_pending"
    )


@dataclass(frozen=True)
class PricingConfig:
    """Labels attached to quotes. Amounts are never converted."""

    currency: str = os.getenv("CURRENCY", "LKR")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    availability: AvailabilityConfig = field(default_factory=AvailabilityConfig)
    booking: BookingConfig = field(default_factory=BookingConfig)
    pricing: PricingConfig = field(default_factory=PricingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "studio-booking-core")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    try:
        ZoneInfo(config.availability.default_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(
            f"DEFAULT_TIMEZONE is not a known timezone: {config.availability.default_timezone!r}"
        ) from None

    for name, value in [
        ("SLOT_STEP_MINUTES", config.availability.slot_step_minutes),
        ("DEFAULT_SLOT_MINUTES", config.availability.default_slot_minutes),
    ]:
        if value < 1:
            raise ValueError(f"{name} must be >= 1, got {value}")

    if not config.booking.blocking_statuses:
        raise ValueError("BLOCKING_BOOKING_STATUSES must list at least one status")

    if not config.pricing.currency.strip():
        raise ValueError("CURRENCY must not be empty")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.app_name)
    return config


# Singleton instance
settings = load_config()
