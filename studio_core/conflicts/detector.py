"""
Conflict detection for a requested booking window.

For each required equipment or service category, counts the pool resources
of that category that are free for the whole window and reports any
shortfall. Reports are advisory: nothing is reserved, so a clean result
means "theoretically free", not "held".

Usage:
    conflicts = check_availability(request, pool, bookings)
    if any(c.severity == ConflictSeverity.ERROR for c in conflicts):
        ...
"""

import logging
from typing import Iterable

from studio_core.availability.resolver import is_available
from studio_core.schemas.availability_schema import ExistingBooking, Resource
from studio_core.schemas.booking_schema import BookingRequest, ConflictReport, ConflictSeverity
from studio_core.utils import unique

logger = logging.getLogger(__name__)


def count_available(
    category: str,
    request: BookingRequest,
    resource_pool: Iterable[Resource],
    bookings: Iterable[ExistingBooking] = (),
) -> int:
    """Number of pool resources of ``category`` free for the whole request window."""
    bookings = list(bookings)
    return sum(
        1
        for resource in resource_pool
        if resource.has_category(category)
        and is_available(resource, request.start, request.end, bookings)
    )


def check_availability(
    request: BookingRequest,
    resource_pool: Iterable[Resource],
    bookings: Iterable[ExistingBooking] = (),
) -> list[ConflictReport]:
    """
    Report every required category that cannot be satisfied.

    A category unknown to the pool is reported exactly like one whose
    resources are all busy.
    """
    pool = list(resource_pool)
    bookings = list(bookings)
    reports: list[ConflictReport] = []

    for category in unique(request.required_categories):
        available = count_available(category, request, pool, bookings)
        needed = request.quantity_for_category(category)
        if available == 0:
            reports.append(ConflictReport(
                category=category,
                severity=ConflictSeverity.ERROR,
                message=f"No {category} available for this time slot",
            ))
        elif available < needed:
            reports.append(ConflictReport(
                category=category,
                severity=ConflictSeverity.ERROR,
                message=f"Only {available} of {needed} {category} available for this time slot",
            ))
        logger.debug("Category '%s': %d available, %d needed", category, available, needed)

    if reports:
        logger.info(
            "%d conflict(s) for %s - %s", len(reports), request.start, request.end
        )
    return reports


def check_optional_categories(
    categories: Iterable[str],
    request: BookingRequest,
    resource_pool: Iterable[Resource],
    bookings: Iterable[ExistingBooking] = (),
) -> list[ConflictReport]:
    """Warn about nice-to-have categories with nothing free."""
    pool = list(resource_pool)
    bookings = list(bookings)
    return [
        ConflictReport(
            category=category,
            severity=ConflictSeverity.WARNING,
            message=f"No {category} available for this time slot (optional)",
        )
        for category in unique(categories)
        if count_available(category, request, pool, bookings) == 0
    ]


def check_requested_resources(
    request: BookingRequest,
    resource_pool: Iterable[Resource],
    bookings: Iterable[ExistingBooking] = (),
) -> list[ConflictReport]:
    """Report specifically requested resources that are unknown or busy."""
    by_id = {resource.id: resource for resource in resource_pool}
    bookings = list(bookings)
    reports = []
    for resource_id in unique(request.requested_resources):
        resource = by_id.get(resource_id)
        if resource is None:
            reports.append(ConflictReport(
                category=resource_id,
                severity=ConflictSeverity.WARNING,
                message=f"Resource {resource_id} is not in the catalog",
            ))
            continue
        if not is_available(resource, request.start, request.end, bookings):
            reports.append(ConflictReport(
                category=resource.category or resource.kind.value,
                severity=ConflictSeverity.ERROR,
                message=f"{resource.display_name} is not available for this time slot",
            ))
    return reports
