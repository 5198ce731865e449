"""Exception taxonomy for structural input errors.

None of these subclass ValueError: pydantic only wraps ValueError and
AssertionError raised in validators, so these reach the caller unchanged.
"Nothing available" is never an exception; it is an empty list or an
error-severity ConflictReport.
"""


class BookingCoreError(Exception):
    """Base class for all errors raised by studio_core."""


class InvalidRuleError(BookingCoreError):
    """Raised when an availability rule is malformed (e.g. start >= end)."""


class InvalidDurationError(BookingCoreError):
    """Raised when a rental duration, slot length or slot step is not positive."""


class IncompleteRateCardError(BookingCoreError):
    """Raised when a rate card lacks the mandatory daily rate."""


class InvalidRequestError(BookingCoreError):
    """Raised for inverted query windows, inverted bookings and bad quantities."""
