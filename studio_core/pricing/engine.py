"""
Tiered rental pricing.

Picks a single tier per rental, largest first: monthly when the rental is
at least a month and a monthly rate exists, weekly when it is at least a
week and a weekly rate exists, otherwise daily. This is a greedy heuristic,
not an optimal packing: 8 days with daily and weekly rates is priced as
2 weeks, not 1 week plus 1 day, and 29 days with only daily and monthly
rates is priced as 29 daily units.
"""

import logging
import math
from decimal import Decimal
from typing import Iterable, Optional

from studio_core.errors import IncompleteRateCardError, InvalidDurationError, InvalidRequestError
from studio_core.schemas.availability_schema import RateCard, Resource
from studio_core.schemas.pricing_schema import PriceQuote, RateTier

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30


def _is_set(rate: Optional[Decimal]) -> bool:
    # The backend stores unset tier rates as 0
    return rate is not None and rate > 0


def select_tier(rate_card: RateCard, total_days: int) -> tuple[RateTier, int, Decimal]:
    """Return (tier, units, unit_rate) for a rental of ``total_days``."""
    if isinstance(total_days, bool) or not isinstance(total_days, int) or total_days < 1:
        raise InvalidDurationError(
            f"Rental duration must be a positive whole number of days, got {total_days!r}"
        )

    if total_days >= DAYS_PER_MONTH and _is_set(rate_card.price_per_month):
        return RateTier.MONTH, math.ceil(total_days / DAYS_PER_MONTH), rate_card.price_per_month
    if total_days >= DAYS_PER_WEEK and _is_set(rate_card.price_per_week):
        return RateTier.WEEK, math.ceil(total_days / DAYS_PER_WEEK), rate_card.price_per_week
    return RateTier.DAY, total_days, rate_card.price_per_day


def price_rental(
    rate_card: RateCard,
    total_days: int,
    quantity: int = 1,
    *,
    resource_id: str = "",
) -> PriceQuote:
    """Price ``quantity`` units of one item rented for ``total_days``."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidRequestError(f"Quantity must be a positive whole number, got {quantity!r}")

    tier, units, unit_rate = select_tier(rate_card, total_days)
    total = unit_rate * units * quantity
    logger.debug(
        "Priced %s: %d day(s) -> %d x %s @ %s x%d = %s",
        resource_id or "<item>", total_days, units, tier.value, unit_rate, quantity, total,
    )
    return PriceQuote(
        resource_id=resource_id,
        tier_used=tier,
        units_used=units,
        unit_rate=unit_rate,
        quantity=quantity,
        total=total,
    )


def price_resource(resource: Resource, total_days: int, quantity: int = 1) -> PriceQuote:
    """Price a catalog resource using its own rate card."""
    if resource.rate_card is None:
        raise IncompleteRateCardError(f"Resource {resource.id} has no rate card")
    return price_rental(resource.rate_card, total_days, quantity, resource_id=resource.id)


def aggregate_quote(quotes: Iterable[PriceQuote]) -> Decimal:
    """Grand total of several quotes. No currency conversion."""
    return sum((quote.total for quote in quotes), Decimal("0"))
