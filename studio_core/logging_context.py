"""Quote ID logging context for correlating the records of one quote.

Building a booking quote touches the resolver, the conflict detector and
the pricing engine. ``quote_scope`` binds a quote id for the duration of
that work and restores the previous id afterwards, so records emitted
outside a quote never carry a stale id.

Usage:
    from studio_core.logging_context import get_quote_logger, quote_scope

    logger = get_quote_logger(__name__)
    with quote_scope() as quote_id:
        logger.info("Pricing equipment")  # record.quote_id == quote_id
"""

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

NO_QUOTE_ID = "NO_QUOTE_ID"

_quote_id: ContextVar[str] = ContextVar("quote_id", default=NO_QUOTE_ID)


def new_quote_id() -> str:
    return f"Q-{uuid.uuid4().hex[:6].upper()}"


def get_quote_id() -> str:
    """Retrieve the current correlation ID."""
    return _quote_id.get()


@contextmanager
def quote_scope(quote_id: Optional[str] = None) -> Iterator[str]:
    """Bind a quote id (a fresh one by default) until the block exits."""
    token = _quote_id.set(quote_id or new_quote_id())
    try:
        yield _quote_id.get()
    finally:
        _quote_id.reset(token)


class QuoteIdFilter(logging.Filter):
    """Injects quote_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.quote_id = _quote_id.get()  # type: ignore[attr-defined]
        return True


def get_quote_logger(name: str) -> logging.Logger:
    """Return a logger with the QuoteIdFilter attached.

    The filter adds ``quote_id`` to each record so formatters can
    include ``%(quote_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, QuoteIdFilter) for f in logger.filters):
        logger.addFilter(QuoteIdFilter())
    return logger
