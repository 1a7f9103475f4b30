"""Correlation ID logging context for tracing admissions across modules.

Provides a request_id-aware logger that attaches a correlation ID to every
log message, so a single admission can be followed from the reference
lookups through to the storage commit.

Usage:
    from booking_core.logging_context import get_request_logger, set_request_id

    set_request_id("ADM-abc123")
    logger = get_request_logger(__name__)
    logger.info("Admitting draft")  # record.request_id == "ADM-abc123"
"""

import logging
import uuid
from contextvars import ContextVar

_request_id: ContextVar[str] = ContextVar("request_id", default="NO_REQUEST_ID")


def set_request_id(request_id: str) -> None:
    """Set the correlation ID for the current async context."""
    _request_id.set(request_id)


def get_request_id() -> str:
    """Retrieve the current correlation ID."""
    return _request_id.get()


def new_request_id(prefix: str = "ADM") -> str:
    """Generate and install a fresh correlation ID."""
    request_id = f"{prefix}-{uuid.uuid4().hex[:8]}"
    set_request_id(request_id)
    return request_id


class RequestIdFilter(logging.Filter):
    """Injects request_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def get_request_logger(name: str) -> logging.Logger:
    """Return a logger with the RequestIdFilter attached.

    The filter adds ``request_id`` to each record so formatters can
    include ``%(request_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIdFilter) for f in logger.filters):
        logger.addFilter(RequestIdFilter())
    return logger
