"""Pricing models: tiers, per-resource quotes and the combined booking quote."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from studio_core.schemas.booking_schema import ConflictReport, ConflictSeverity


class RateTier(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class PriceQuote(BaseModel):
    """Rental cost of one resource at a single tier."""

    model_config = ConfigDict(frozen=True)

    resource_id: str
    tier_used: RateTier
    units_used: int = Field(ge=1)
    unit_rate: Decimal
    quantity: int = Field(default=1, ge=1)
    total: Decimal


class ServiceCharge(BaseModel):
    """A flat-priced service added to a booking (recording, mixing, ...)."""

    model_config = ConfigDict(frozen=True)

    name: str
    category: Optional[str] = None
    price: Decimal = Field(ge=0)


class BookingQuote(BaseModel):
    """Everything the booking summary renders: prices plus advisory conflicts."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime
    duration_days: int
    quote_id: Optional[str] = None
    currency: str
    equipment: tuple[PriceQuote, ...] = ()
    services: tuple[ServiceCharge, ...] = ()
    conflicts: tuple[ConflictReport, ...] = ()
    equipment_total: Decimal = Decimal("0")
    service_total: Decimal = Decimal("0")
    grand_total: Decimal = Decimal("0")

    @property
    def bookable(self) -> bool:
        return not any(c.severity == ConflictSeverity.ERROR for c in self.conflicts)
