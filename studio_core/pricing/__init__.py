from studio_core.pricing.engine import aggregate_quote, price_rental, price_resource, select_tier
from studio_core.pricing.quote import build_booking_quote

__all__ = [
    "select_tier",
    "price_rental",
    "price_resource",
    "aggregate_quote",
    "build_booking_quote",
]
