"""
Booking quote pipeline.

Runs the full flow for one booking request: derive the equipment the
selected services depend on, detect conflicts, price every requested
resource for the rental duration, add service charges and total it all.
Each run gets its own quote id for log correlation.
"""

from decimal import Decimal
from typing import Iterable

from studio_core.catalog.services import get_optional_categories, get_required_categories
from studio_core.config import settings
from studio_core.conflicts.detector import (
    check_availability,
    check_optional_categories,
    check_requested_resources,
)
from studio_core.logging_context import get_quote_logger, quote_scope
from studio_core.pricing.engine import aggregate_quote, price_resource
from studio_core.schemas.availability_schema import ExistingBooking, Resource
from studio_core.schemas.booking_schema import BookingRequest
from studio_core.schemas.pricing_schema import BookingQuote, PriceQuote, ServiceCharge
from studio_core.utils import unique

logger = get_quote_logger(__name__)


def build_booking_quote(
    request: BookingRequest,
    resource_pool: Iterable[Resource],
    services: Iterable[ServiceCharge] = (),
    bookings: Iterable[ExistingBooking] = (),
) -> BookingQuote:
    """
    Build the priced, conflict-annotated quote for a booking request.

    Every record logged while the quote is built carries its quote id,
    which is also returned on the quote.

    Raises:
        IncompleteRateCardError: a requested resource has no rate card.
    """
    with quote_scope() as quote_id:
        return _build_quote(quote_id, request, resource_pool, services, bookings)


def _build_quote(
    quote_id: str,
    request: BookingRequest,
    resource_pool: Iterable[Resource],
    services: Iterable[ServiceCharge],
    bookings: Iterable[ExistingBooking],
) -> BookingQuote:
    pool = list(resource_pool)
    services = list(services)
    bookings = list(bookings)

    service_keys = [s.category or s.name for s in services]
    required = unique([*request.required_categories, *get_required_categories(service_keys)])
    optional = [c for c in get_optional_categories(service_keys) if c not in required]
    scoped = request.model_copy(update={"required_categories": tuple(required)})

    conflicts = [
        *check_availability(scoped, pool, bookings),
        *check_requested_resources(request, pool, bookings),
        *check_optional_categories(optional, request, pool, bookings),
    ]

    by_id = {resource.id: resource for resource in pool}
    days = request.duration_days
    equipment: list[PriceQuote] = []
    for resource_id in unique(request.requested_resources):
        resource = by_id.get(resource_id)
        if resource is None:
            continue
        equipment.append(price_resource(resource, days, request.quantity_for_resource(resource_id)))

    equipment_total = aggregate_quote(equipment)
    service_total = sum((s.price for s in services), Decimal("0"))
    grand_total = equipment_total + service_total

    logger.info(
        "[%s] Quote for %s - %s: %d item(s), %d service(s), %d conflict(s), total %s %s",
        quote_id, request.start, request.end, len(equipment), len(services), len(conflicts),
        grand_total, settings.pricing.currency,
    )
    return BookingQuote(
        quote_id=quote_id,
        start=request.start,
        end=request.end,
        duration_days=days,
        currency=settings.pricing.currency,
        equipment=tuple(equipment),
        services=tuple(services),
        conflicts=tuple(conflicts),
        equipment_total=equipment_total,
        service_total=service_total,
        grand_total=grand_total,
    )
