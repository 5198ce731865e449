from studio_core.availability.intervals import merge_intervals, subtract_intervals
from studio_core.availability.resolver import (
    can_reschedule,
    get_available_slots,
    is_available,
    resolve,
    resolve_free,
)

__all__ = [
    "resolve",
    "resolve_free",
    "is_available",
    "can_reschedule",
    "get_available_slots",
    "merge_intervals",
    "subtract_intervals",
]
