"""Logging setup with per-request correlation IDs."""

from localfinance.core.logging.logging_context import (
    CORRELATION_HEADER,
    CorrelationIDFilter,
    bind_correlation_id,
    configure_logging,
    get_correlation_id,
    reset_correlation_id,
)

__all__ = [
    "CORRELATION_HEADER",
    "CorrelationIDFilter",
    "bind_correlation_id",
    "configure_logging",
    "get_correlation_id",
    "reset_correlation_id",
]
