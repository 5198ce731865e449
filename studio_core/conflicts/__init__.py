from studio_core.conflicts.detector import (
    check_availability,
    check_optional_categories,
    check_requested_resources,
    count_available,
)

__all__ = [
    "check_availability",
    "check_optional_categories",
    "check_requested_resources",
    "count_available",
]
