"""Shared test fixtures and helpers."""

from datetime import date, datetime, time, timezone
from typing import Optional

import pytest

from studio_core.schemas.availability_schema import (
    ExistingBooking,
    OneOffRule,
    RateCard,
    RecurringRule,
    Resource,
    ResourceKind,
)
from studio_core.schemas.booking_schema import BookingRequest

EVERY_DAY = frozenset(range(7))
WEEKDAYS = frozenset({1, 2, 3, 4, 5})

# 2025-03-03 is a Monday
MONDAY = date(2025, 3, 3)


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    """Shorthand for an aware UTC datetime."""
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def make_recurring(
    days: frozenset[int] = EVERY_DAY,
    start: str = "09:00",
    end: str = "17:00",
    tz: str = "UTC",
    valid_from: Optional[date] = None,
    valid_until: Optional[date] = None,
) -> RecurringRule:
    return RecurringRule(
        days_of_week=days,
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
        timezone=tz,
        valid_from=valid_from,
        valid_until=valid_until,
    )


def make_one_off(start: datetime, end: datetime, tz: str = "UTC") -> OneOffRule:
    return OneOffRule(start=start, end=end, timezone=tz)


def make_resource(
    resource_id: str = "studio-1",
    rules: tuple = (),
    kind: ResourceKind = ResourceKind.STUDIO,
    category: Optional[str] = None,
    rate_card: Optional[RateCard] = None,
    name: Optional[str] = None,
) -> Resource:
    return Resource(
        id=resource_id,
        kind=kind,
        availability_rules=rules,
        category=category,
        rate_card=rate_card,
        name=name,
    )


def make_equipment(
    resource_id: str,
    category: str,
    rules: tuple = (),
    day: int = 100,
    week: Optional[int] = None,
    month: Optional[int] = None,
) -> Resource:
    return make_resource(
        resource_id=resource_id,
        rules=rules,
        kind=ResourceKind.EQUIPMENT,
        category=category,
        rate_card=RateCard(price_per_day=day, price_per_week=week, price_per_month=month),
    )


def make_booking(
    booking_id: str,
    resource_id: str,
    start: datetime,
    end: datetime,
    status: str = "confirmed",
) -> ExistingBooking:
    return ExistingBooking(id=booking_id, resource_id=resource_id, start=start, end=end, status=status)


def make_request(
    start: datetime,
    end: datetime,
    categories: tuple[str, ...] = (),
    resources: tuple[str, ...] = (),
    **kwargs,
) -> BookingRequest:
    return BookingRequest(
        start=start,
        end=end,
        required_categories=categories,
        requested_resources=resources,
        **kwargs,
    )


@pytest.fixture
def weekday_studio():
    """Studio open 09:00-17:00 UTC, Monday to Friday."""
    return make_resource("studio-1", rules=(make_recurring(WEEKDAYS),))


@pytest.fixture
def microphone_pool():
    """Two microphones open every day and one headphone pair with no rules."""
    return [
        make_equipment("mic-1", "microphone", rules=(make_recurring(),)),
        make_equipment("mic-2", "microphone", rules=(make_recurring(),)),
        make_equipment("hp-1", "headphones"),
    ]


@pytest.fixture
def monday_session():
    """Monday 10:00-12:00 UTC."""
    return make_request(utc(2025, 3, 3, 10), utc(2025, 3, 3, 12), categories=("microphone",))
