"""Correlation ids for log records.

The HTTP middleware sets the id for the duration of a request; every record
that passes through :class:`CorrelationIdFilter` gets a ``correlation_id``
attribute ("-" outside a request) that the log format can reference.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar, Token
from uuid import uuid4


CORRELATION_HEADER = "X-Correlation-ID"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def new_correlation_id() -> str:
    return uuid4().hex


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def set_correlation_id(value: str | None) -> Token:
    return _correlation_id.set(value)


def reset_correlation_id(token: Token) -> None:
    _correlation_id.reset(token)


class CorrelationIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = _correlation_id.get() or "-"
        return True


def configure_logging(level: str = "INFO", logger_name: str = "uvicorn.error") -> logging.Logger:
    """Attach a correlation-aware stream handler to ``logger_name`` once."""

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    for handler in logger.handlers:
        if any(isinstance(f, CorrelationIdFilter) for f in handler.filters):
            return logger
    handler = logging.StreamHandler()
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
