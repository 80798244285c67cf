"""Per-request correlation IDs for log records."""

import logging
import uuid
from contextvars import ContextVar, Token
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

CORRELATION_HEADER = "X-Correlation-ID"
LOG_FORMAT = "%(asctime)s - [%(correlation_id)s] - %(name)s - %(levelname)s - %(message)s"

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> Optional[str]:
    """Get the correlation ID bound to the current request, if any."""
    return _correlation_id.get()


def bind_correlation_id(incoming: Optional[str] = None) -> Token:
    """
    Bind a correlation ID to the current context.

    Args:
        incoming: Value of the inbound X-Correlation-ID header. A fresh UUID
            is generated when it is missing or blank.

    Returns:
        Token to pass to reset_correlation_id() when the request ends
    """
    cid = (incoming or "").strip() or str(uuid.uuid4())
    return _correlation_id.set(cid)


def reset_correlation_id(token: Token) -> None:
    """Restore the correlation ID that was active before bind_correlation_id()."""
    _correlation_id.reset(token)


class CorrelationIDFilter(logging.Filter):
    """Stamp every record with the active correlation ID ("-" outside requests)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


def configure_logging(
    log_dir: Path,
    debug: bool = False,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> None:
    """
    Configure root logging: console plus a rotating file under log_dir.

    Both handlers carry the correlation ID filter. Calling this twice does
    not stack handlers.
    """
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(CorrelationIDFilter())

    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_dir / "localfinance.log",
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)
    file_handler.addFilter(CorrelationIDFilter())

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        handlers=[console_handler, file_handler],
        force=True,
    )
