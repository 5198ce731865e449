"""
Availability resolver: rules in, concrete free intervals out.

Expands a resource's one-off and recurring rules over a query window,
converts recurring wall-clock times to UTC in each rule's own timezone,
clips everything to the window and merges the result into a minimal,
chronologically ordered interval list.

Usage:
    intervals = resolve(studio, window_start, window_end)
    free = resolve_free(studio, window_start, window_end, bookings)
    if is_available(studio, start, end, bookings):
        ...
"""

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

from studio_core.availability.civil_time import (
    get_zone,
    is_ambiguous,
    is_nonexistent,
    local_day_bounds,
    to_instant,
)
from studio_core.availability.intervals import clip, covers, merge_intervals, subtract_intervals
from studio_core.config import settings
from studio_core.errors import InvalidDurationError, InvalidRequestError
from studio_core.schemas.availability_schema import (
    ExistingBooking,
    OneOffRule,
    RecurringRule,
    ResolvedInterval,
    Resource,
)
from studio_core.utils import backend_weekday, daterange, to_utc

logger = logging.getLogger(__name__)


def _check_window(window_start: datetime, window_end: datetime) -> tuple[datetime, datetime]:
    start, end = to_utc(window_start), to_utc(window_end)
    if start >= end:
        raise InvalidRequestError(f"Query window must start before it ends: {start} >= {end}")
    return start, end


def _expand_one_off(
    rule: OneOffRule, resource_id: str, window_start: datetime, window_end: datetime
) -> list[ResolvedInterval]:
    interval = clip(resource_id, rule.start, rule.end, window_start, window_end)
    return [interval] if interval else []


def _expand_recurring(
    rule: RecurringRule, resource_id: str, window_start: datetime, window_end: datetime
) -> list[ResolvedInterval]:
    if rule.is_contradictory():
        logger.debug(
            "Skipping contradictory rule on %s: valid_until %s < valid_from %s",
            resource_id, rule.valid_until, rule.valid_from,
        )
        return []

    zone = get_zone(rule.timezone)
    first_day = window_start.astimezone(zone).date()
    last_day = window_end.astimezone(zone).date()

    intervals = []
    for day in daterange(first_day, last_day):
        if backend_weekday(day) not in rule.days_of_week or not rule.is_valid_on(day):
            continue
        if logger.isEnabledFor(logging.DEBUG):
            for at in (rule.start_time, rule.end_time):
                if is_nonexistent(day, at, zone) or is_ambiguous(day, at, zone):
                    logger.debug(
                        "DST transition on %s %s in %s for %s", day, at, rule.timezone, resource_id
                    )
        start = to_instant(day, rule.start_time, zone)
        end = to_instant(day, rule.end_time, zone)
        interval = clip(resource_id, start, end, window_start, window_end)
        if interval:
            intervals.append(interval)
    return intervals


def expand_rule(
    rule: Union[OneOffRule, RecurringRule],
    resource_id: str,
    window_start: datetime,
    window_end: datetime,
) -> list[ResolvedInterval]:
    """Concrete, clipped but unmerged intervals for a single rule."""
    if isinstance(rule, OneOffRule):
        return _expand_one_off(rule, resource_id, window_start, window_end)
    if isinstance(rule, RecurringRule):
        return _expand_recurring(rule, resource_id, window_start, window_end)
    raise TypeError(f"Unsupported availability rule: {type(rule).__name__}")


def resolve(
    resource: Resource, window_start: datetime, window_end: datetime
) -> list[ResolvedInterval]:
    """Free intervals for a resource inside [window_start, window_end]."""
    start, end = _check_window(window_start, window_end)
    emitted: list[ResolvedInterval] = []
    for rule in resource.availability_rules:
        emitted.extend(expand_rule(rule, resource.id, start, end))
    merged = merge_intervals(emitted)
    logger.debug(
        "Resolved %s: %d rule(s) -> %d interval(s)",
        resource.id, len(resource.availability_rules), len(merged),
    )
    return merged


def _blocking_intervals(
    resource_id: str,
    bookings: Iterable[ExistingBooking],
    exclude_booking_id: Optional[str] = None,
) -> list[ResolvedInterval]:
    statuses = settings.booking.blocking_statuses
    return [
        ResolvedInterval(resource_id=resource_id, start=b.start, end=b.end)
        for b in bookings
        if b.resource_id == resource_id and b.blocks(statuses) and b.id != exclude_booking_id
    ]


def resolve_free(
    resource: Resource,
    window_start: datetime,
    window_end: datetime,
    bookings: Iterable[ExistingBooking] = (),
    *,
    exclude_booking_id: Optional[str] = None,
) -> list[ResolvedInterval]:
    """Resolved availability minus the resource's blocking bookings."""
    available = resolve(resource, window_start, window_end)
    busy = _blocking_intervals(resource.id, bookings, exclude_booking_id)
    if not busy:
        return available
    return subtract_intervals(available, busy)


def is_available(
    resource: Resource,
    start: datetime,
    end: datetime,
    bookings: Iterable[ExistingBooking] = (),
    *,
    exclude_booking_id: Optional[str] = None,
) -> bool:
    """True if one free interval contains the whole of [start, end]."""
    free = resolve_free(resource, start, end, bookings, exclude_booking_id=exclude_booking_id)
    return covers(free, to_utc(start), to_utc(end))


def can_reschedule(
    resource: Resource,
    booking_id: str,
    new_start: datetime,
    new_end: datetime,
    bookings: Iterable[ExistingBooking],
) -> bool:
    """Check whether an existing booking could move to [new_start, new_end]."""
    bookings = list(bookings)
    if not any(b.id == booking_id and b.resource_id == resource.id for b in bookings):
        logger.debug("Booking %s not found for %s", booking_id, resource.id)
        return False
    return is_available(resource, new_start, new_end, bookings, exclude_booking_id=booking_id)


def get_available_slots(
    resource: Resource,
    day: date,
    duration_minutes: Optional[int] = None,
    *,
    step_minutes: Optional[int] = None,
    timezone: Optional[str] = None,
    bookings: Iterable[ExistingBooking] = (),
) -> list[ResolvedInterval]:
    """
    Bookable slots of a fixed length on a local calendar day.

    Candidate slots start at each free interval's start and advance by
    step_minutes while the whole slot still fits inside that interval.
    """
    if duration_minutes is None:
        duration_minutes = settings.availability.default_slot_minutes
    if step_minutes is None:
        step_minutes = settings.availability.slot_step_minutes
    if duration_minutes < 1:
        raise InvalidDurationError(f"Slot duration must be positive, got {duration_minutes}")
    if step_minutes < 1:
        raise InvalidDurationError(f"Slot step must be positive, got {step_minutes}")

    zone = get_zone(timezone or settings.availability.default_timezone)
    day_start, day_end = local_day_bounds(day, zone)
    length = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=step_minutes)

    slots = []
    for free in resolve_free(resource, day_start, day_end, bookings):
        current = free.start
        while current + length <= free.end:
            slots.append(ResolvedInterval(resource_id=resource.id, start=current, end=current + length))
            current += step
    return slots
