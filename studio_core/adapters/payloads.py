"""
Mapping from backend JSON payloads onto the core models.

The backend speaks camelCase Mongo documents (``_id``, ``rentalPricePerDay``,
``availability[].isRecurring`` ...). These helpers translate one document at
a time; validation errors from the models propagate unchanged.
"""

import logging
from datetime import datetime, time
from typing import Any, Optional

from pydantic import TypeAdapter

from studio_core.availability.civil_time import get_zone
from studio_core.config import settings
from studio_core.schemas.availability_schema import (
    ExistingBooking,
    OneOffRule,
    RateCard,
    RecurringRule,
    Resource,
)
from studio_core.schemas.booking_schema import BookingRequest

logger = logging.getLogger(__name__)

_DATETIME = TypeAdapter(datetime)

RATE_FIELDS = {
    "price_per_day": ("rentalPricePerDay", "pricePerDay"),
    "price_per_week": ("rentalPricePerWeek", "pricePerWeek"),
    "price_per_month": ("rentalPricePerMonth", "pricePerMonth"),
}

# Equipment lines in a booking stop blocking once handed back
RELEASED_EQUIPMENT_STATUSES = {"returned"}


def _first(payload: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


def _ref_id(value: Any) -> Optional[str]:
    """Resolve a Mongo reference that may be populated (a dict) or a bare id."""
    if value is None:
        return None
    if isinstance(value, dict):
        value = _first(value, "_id", "id")
    return str(value) if value is not None else None


def _wall_time(value: Any, timezone: str) -> Any:
    """Wall-clock time of a datetime payload value in ``timezone``.

    "HH:MM" strings and time objects pass through for the model to parse.
    """
    if isinstance(value, time):
        return value
    if isinstance(value, str) and "T" not in value and len(value) <= 8:
        return value
    instant = _DATETIME.validate_python(value)
    if instant.tzinfo is None:
        return instant.time()
    return instant.astimezone(get_zone(timezone)).time().replace(tzinfo=None)


def has_rate_card(payload: dict[str, Any]) -> bool:
    return any(_first(payload, *keys) is not None for keys in RATE_FIELDS.values())


def rate_card_from_payload(payload: dict[str, Any]) -> RateCard:
    """Build a RateCard from ``rentalPricePer*`` (or ``pricePer*``) fields."""
    return RateCard(**{field: _first(payload, *keys) for field, keys in RATE_FIELDS.items()})


def rule_from_payload(payload: dict[str, Any], default_timezone: Optional[str] = None):
    """Build a OneOffRule or RecurringRule from one ``availability`` entry."""
    timezone = payload.get("timezone") or default_timezone or settings.availability.default_timezone
    recurring = payload.get("isRecurring")
    if recurring is None:
        recurring = bool(payload.get("daysOfWeek"))

    if not recurring:
        return OneOffRule(start=payload["start"], end=payload["end"], timezone=timezone)

    start_time = _first(payload, "startTime", "start")
    end_time = _first(payload, "endTime", "end")
    return RecurringRule(
        days_of_week=frozenset(payload.get("daysOfWeek") or ()),
        start_time=_wall_time(start_time, timezone),
        end_time=_wall_time(end_time, timezone),
        timezone=timezone,
        valid_from=_first(payload, "validFrom"),
        valid_until=_first(payload, "validUntil"),
    )


def resource_from_payload(payload: dict[str, Any], kind: Optional[str] = None) -> Resource:
    """
    Build a Resource from a studio, equipment or service document.

    Equipment flagged ``isAvailable: false`` is out of service and gets no
    availability rules.
    """
    resource_id = _ref_id(_first(payload, "_id", "id"))
    if resource_id is None:
        raise KeyError("Resource payload has no '_id' or 'id'")

    kind = kind or payload.get("kind") or ("equipment" if has_rate_card(payload) else "studio")
    rules: tuple = ()
    if payload.get("isAvailable", True) is not False:
        raw_rules = _first(payload, "availability", "availabilityRules") or []
        default_timezone = payload.get("timezone")
        rules = tuple(rule_from_payload(raw, default_timezone) for raw in raw_rules)
    else:
        logger.debug("Resource %s is marked unavailable", resource_id)

    return Resource(
        id=resource_id,
        kind=kind,
        availability_rules=rules,
        category=payload.get("category"),
        name=payload.get("name"),
        rate_card=rate_card_from_payload(payload) if has_rate_card(payload) else None,
    )


def bookings_from_payload(payload: dict[str, Any]) -> list[ExistingBooking]:
    """
    Expand one booking document into the holds it places.

    The booked studio is held for the whole booking, and so is every
    equipment line that has not been returned.
    """
    booking_id = _ref_id(_first(payload, "_id", "bookingId", "id"))
    status = payload.get("status", "confirmed")
    holds = []

    studio_id = _ref_id(payload.get("studio"))
    if studio_id is not None:
        holds.append(ExistingBooking(
            id=booking_id, resource_id=studio_id,
            start=payload["start"], end=payload["end"], status=status,
        ))

    for line in payload.get("equipment") or []:
        equipment_id = _ref_id(line.get("equipmentId"))
        if equipment_id is None:
            continue
        if str(line.get("status", "")).lower() in RELEASED_EQUIPMENT_STATUSES:
            continue
        holds.append(ExistingBooking(
            id=booking_id, resource_id=equipment_id,
            start=payload["start"], end=payload["end"], status=status,
        ))
    return holds


def request_from_payload(payload: dict[str, Any]) -> BookingRequest:
    """Build a BookingRequest from the booking wizard's selection payload."""
    resource_ids: list[str] = []
    quantities: dict[str, int] = {}
    for item in payload.get("equipment") or []:
        item_id = _ref_id(_first(item, "_id", "id", "equipmentId"))
        if item_id is None:
            continue
        resource_ids.append(item_id)
        quantities[item_id] = int(item.get("quantity", 1))

    return BookingRequest(
        start=_first(payload, "start", "startDate"),
        end=_first(payload, "end", "endDate"),
        required_categories=tuple(payload.get("requiredCategories") or ()),
        requested_resources=tuple(resource_ids),
        resource_quantities=quantities,
        category_quantities=dict(payload.get("categoryQuantities") or {}),
    )
