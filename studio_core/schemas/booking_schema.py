"""Booking request and conflict report models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from studio_core.errors import InvalidRequestError
from studio_core.utils import normalize_category, rental_days, to_utc, unique


class BookingRequest(BaseModel):
    """
    A candidate booking window and the resources it needs.

    category_quantities maps a required category to the number of distinct
    resources needed; resource_quantities maps a requested resource id to
    the number of units rented. Both default to 1 when a key is absent.
    Category names are stored stripped and lowercased, matching
    Resource.has_category.
    """

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime
    required_categories: tuple[str, ...] = ()
    requested_resources: tuple[str, ...] = ()
    resource_quantities: dict[str, int] = Field(default_factory=dict)
    category_quantities: dict[str, int] = Field(default_factory=dict)

    @field_validator("start", "end")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return to_utc(value)

    @field_validator("required_categories")
    @classmethod
    def _normalize_categories(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(unique(normalize_category(c) for c in value))

    @field_validator("category_quantities")
    @classmethod
    def _normalize_quantity_keys(cls, value: dict[str, int]) -> dict[str, int]:
        normalized: dict[str, int] = {}
        for category, quantity in value.items():
            if quantity < 1:
                raise InvalidRequestError(f"Quantity for '{category}' must be >= 1, got {quantity}")
            key = normalize_category(category)
            normalized[key] = max(quantity, normalized.get(key, quantity))
        return normalized

    @model_validator(mode="after")
    def _check_request(self) -> "BookingRequest":
        if self.start >= self.end:
            raise InvalidRequestError(
                f"Booking request must start before it ends: {self.start} >= {self.end}"
            )
        for key, quantity in self.resource_quantities.items():
            if quantity < 1:
                raise InvalidRequestError(f"Quantity for '{key}' must be >= 1, got {quantity}")
        return self

    @property
    def duration_days(self) -> int:
        return rental_days(self.start, self.end)

    def quantity_for_resource(self, resource_id: str) -> int:
        return self.resource_quantities.get(resource_id, 1)

    def quantity_for_category(self, category: str) -> int:
        return self.category_quantities.get(normalize_category(category), 1)


class ConflictSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class ConflictReport(BaseModel):
    """Advisory shortfall between what a booking needs and what is free."""

    model_config = ConfigDict(frozen=True)

    category: str
    severity: ConflictSeverity
    message: str
