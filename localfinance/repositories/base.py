"""Base repository utilities for common operations."""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, AsyncIterator, Optional, Union

import aiosqlite

logger = logging.getLogger(__name__)


def safe_get(row: Any, key: str, default: Any = None) -> Any:
    """
    Safely get a value from a database row.

    Args:
        row: Database row (dict-like object)
        key: Key to retrieve
        default: Default value if key not found

    Returns:
        Value from row or default
    """
    try:
        if hasattr(row, "keys"):
            return row[key] if key in row.keys() else default
        return row[key]
    except (KeyError, IndexError, TypeError):
        return default


def safe_get_datetime(row: Any, key: str) -> Optional[datetime]:
    """Parse an ISO datetime column, returning None if missing or invalid."""
    value = safe_get(row, key)
    if not value:
        return None

    if isinstance(value, datetime):
        return value

    try:
        return datetime.fromisoformat(str(value))
    except (ValueError, TypeError) as e:
        logger.warning(f"Failed to parse datetime from {key}: {e}")
        return None


def safe_get_bool(row: Any, key: str, default: bool = False) -> bool:
    """
    Safely get a boolean value from a database row.

    Handles integer 0/1 values and boolean values.
    """
    value = safe_get(row, key, default)

    if isinstance(value, bool):
        return value

    if isinstance(value, int):
        return bool(value)

    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes", "on")

    return bool(value) if value is not None else default


def safe_get_decimal(
    row: Any, key: str, default: Optional[Decimal] = None
) -> Optional[Decimal]:
    """Read a TEXT/NUMERIC amount column as Decimal without float round-trips."""
    value = safe_get(row, key)
    if value is None:
        return default

    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        logger.warning(f"Failed to parse decimal from {key}: {value!r}")
        return default


@asynccontextmanager
async def transaction_context(
    db: Union[Any, aiosqlite.Connection],
) -> AsyncIterator[aiosqlite.Connection]:
    """
    Unit of work over either a Database instance or a raw aiosqlite.Connection.

    Commits when the block exits normally and rolls back on any exception,
    so no path leaves a transaction open.

    Args:
        db: Either a Database instance (from manager) or raw aiosqlite.Connection

    Yields:
        aiosqlite.Connection for executing queries
    """
    if hasattr(db, "transaction"):
        async with db.transaction() as conn:
            yield conn
    else:
        try:
            yield db
            await db.commit()
        except BaseException:
            await db.rollback()
            raise


class DatabaseAdapter:
    """Adapter to make raw aiosqlite.Connection work like Database instance for testing."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn
        self._transaction_lock = asyncio.Lock()

    async def fetchone(self, sql: str, params: tuple = ()):
        """Execute and fetch one row."""
        cursor = await self._conn.execute(sql, params)
        return await cursor.fetchone()

    async def fetchall(self, sql: str, params: tuple = ()):
        """Execute and fetch all rows."""
        cursor = await self._conn.execute(sql, params)
        return await cursor.fetchall()

    async def execute(self, sql: str, params: tuple = ()):
        """Execute a single SQL statement."""
        return await self._conn.execute(sql, params)

    async def commit(self):
        """Commit current transaction."""
        await self._conn.commit()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Transaction context manager."""
        async with self._transaction_lock:
            try:
                yield self._conn
                await self._conn.commit()
            except BaseException:
                await self._conn.rollback()
                raise
