"""Availability rules, resources, rate cards and resolved intervals."""

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from studio_core.errors import IncompleteRateCardError, InvalidRequestError, InvalidRuleError
from studio_core.utils import is_known_timezone, normalize_category, to_utc


class ResourceKind(str, Enum):
    STUDIO = "studio"
    EQUIPMENT = "equipment"
    SERVICE = "service"


class OneOffRule(BaseModel):
    """Availability for a single absolute time range."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["one_off"] = "one_off"
    start: datetime
    end: datetime
    timezone: str = "UTC"

    @field_validator("start", "end")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return to_utc(value)

    @model_validator(mode="after")
    def _check_rule(self) -> "OneOffRule":
        if self.start >= self.end:
            raise InvalidRuleError(
                f"One-off rule must start before it ends: {self.start} >= {self.end}"
            )
        if not is_known_timezone(self.timezone):
            raise InvalidRuleError(f"Unknown timezone: {self.timezone!r}")
        return self


class RecurringRule(BaseModel):
    """
    Weekly availability evaluated in the rule's own timezone.

    days_of_week uses 0 = Sunday ... 6 = Saturday. valid_from and
    valid_until are inclusive local dates; either may be omitted.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["recurring"] = "recurring"
    days_of_week: frozenset[int]
    start_time: time
    end_time: time
    timezone: str = "UTC"
    valid_from: Optional[date] = None
    valid_until: Optional[date] = None

    @model_validator(mode="after")
    def _check_rule(self) -> "RecurringRule":
        bad_days = sorted(d for d in self.days_of_week if not 0 <= d <= 6)
        if bad_days:
            raise InvalidRuleError(f"days_of_week must be within 0..6, got {bad_days}")
        if self.start_time >= self.end_time:
            raise InvalidRuleError(
                "Recurring rule must start before it ends: "
                f"{self.start_time.isoformat()} >= {self.end_time.isoformat()}"
            )
        if not is_known_timezone(self.timezone):
            raise InvalidRuleError(f"Unknown timezone: {self.timezone!r}")
        return self

    def is_contradictory(self) -> bool:
        return (
            self.valid_from is not None
            and self.valid_until is not None
            and self.valid_until < self.valid_from
        )

    def is_valid_on(self, day: date) -> bool:
        if self.valid_from is not None and day < self.valid_from:
            return False
        if self.valid_until is not None and day > self.valid_until:
            return False
        return True


AvailabilityRule = Annotated[Union[OneOffRule, RecurringRule], Field(discriminator="kind")]


class RateCard(BaseModel):
    """Rental rates per tier. The daily rate is mandatory."""

    model_config = ConfigDict(frozen=True)

    price_per_day: Optional[Decimal] = Field(default=None, ge=0)
    price_per_week: Optional[Decimal] = Field(default=None, ge=0)
    price_per_month: Optional[Decimal] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _require_daily_rate(self) -> "RateCard":
        if self.price_per_day is None:
            raise IncompleteRateCardError("Rate card is missing price_per_day")
        return self


class Resource(BaseModel):
    """A bookable studio, piece of equipment or service slot."""

    model_config = ConfigDict(frozen=True)

    id: str
    kind: ResourceKind
    availability_rules: tuple[AvailabilityRule, ...] = ()
    category: Optional[str] = None
    name: Optional[str] = None
    rate_card: Optional[RateCard] = None

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def has_category(self, category: str) -> bool:
        if self.category is None:
            return False
        return normalize_category(self.category) == normalize_category(category)


class ResolvedInterval(BaseModel):
    """A concrete free interval for one resource, in UTC."""

    model_config = ConfigDict(frozen=True)

    resource_id: str
    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return to_utc(value)


class ExistingBooking(BaseModel):
    """A booking already held against a resource."""

    model_config = ConfigDict(frozen=True)

    id: str
    resource_id: str
    start: datetime
    end: datetime
    status: str = "confirmed"

    @field_validator("start", "end")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return to_utc(value)

    @field_validator("status")
    @classmethod
    def _normalize_status(cls, value: str) -> str:
        return value.strip().lower()

    @model_validator(mode="after")
    def _check_window(self) -> "ExistingBooking":
        if self.start >= self.end:
            raise InvalidRequestError(
                f"Booking {self.id} must start before it ends: {self.start} >= {self.end}"
            )
        return self

    def blocks(self, statuses: tuple[str, ...]) -> bool:
        return self.status in statuses
