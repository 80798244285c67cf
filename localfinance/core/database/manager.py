"""
Database Manager - Single point of database access.

This module provides:
1. Centralized database connections (no direct aiosqlite.connect() elsewhere)
2. Automatic WAL mode and busy timeout configuration
3. Units of work that always commit or roll back

All database access should go through the manager.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import aiosqlite

logger = logging.getLogger(__name__)


class Database:
    """
    Wrapper for a single SQLite database with proper configuration.

    Handles:
    - WAL mode for better concurrency
    - Busy timeout for retry on lock
    - Row factory for dict-like access
    - Connection lifecycle
    """

    def __init__(self, path: Path):
        self.path = path
        self._connection: Optional[aiosqlite.Connection] = None
        self._connect_lock = asyncio.Lock()
        # One open transaction per connection at a time
        self._transaction_lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return self.path.stem

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    async def connect(self) -> aiosqlite.Connection:
        """Get or create connection with proper configuration."""
        async with self._connect_lock:
            if self._connection is None:
                self.path.parent.mkdir(parents=True, exist_ok=True)

                self._connection = await aiosqlite.connect(self.path)
                self._connection.row_factory = aiosqlite.Row

                await self._connection.execute("PRAGMA journal_mode=WAL")
                await self._connection.execute("PRAGMA busy_timeout=30000")
                await self._connection.execute("PRAGMA synchronous=NORMAL")
                await self._connection.execute("PRAGMA foreign_keys=ON")

                logger.debug(f"Connected to database: {self.name}")

            return self._connection

    async def close(self):
        """Close the database connection."""
        async with self._connect_lock:
            if self._connection is not None:
                await self._connection.close()
                self._connection = None
                logger.debug(f"Closed database: {self.name}")

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Unit of work with automatic rollback on error.

        Usage:
            async with db.transaction() as conn:
                await conn.execute("INSERT ...")
                await conn.execute("UPDATE ...")
                # Commits on success, rolls back on exception
        """
        conn = await self.connect()
        async with self._transaction_lock:
            try:
                yield conn
                await conn.commit()
            except BaseException:
                await conn.rollback()
                raise

    async def execute(self, sql: str, params: tuple = ()) -> aiosqlite.Cursor:
        """Execute a single SQL statement."""
        conn = await self.connect()
        return await conn.execute(sql, params)

    async def executescript(self, sql: str):
        """Execute multiple SQL statements."""
        conn = await self.connect()
        await conn.executescript(sql)

    async def commit(self):
        """Commit current transaction."""
        conn = await self.connect()
        await conn.commit()

    async def fetchone(self, sql: str, params: tuple = ()) -> Optional[aiosqlite.Row]:
        """Execute and fetch one row."""
        cursor = await self.execute(sql, params)
        return await cursor.fetchone()

    async def fetchall(self, sql: str, params: tuple = ()) -> list[aiosqlite.Row]:
        """Execute and fetch all rows."""
        cursor = await self.execute(sql, params)
        rows = await cursor.fetchall()
        return list(rows)


class DatabaseManager:
    """
    Single point of database access for the entire application.

    Databases:
    - finance: Accounts (and schema version bookkeeping)
    """

    def __init__(self, database_path: Path):
        self.data_dir = database_path.parent
        self.finance = Database(database_path)

    async def close_all(self):
        """Close all database connections."""
        await self.finance.close()
        logger.info("All database connections closed")


# Global instance - initialized by init_databases()
_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """Get the global database manager instance."""
    if _db_manager is None:
        raise RuntimeError(
            "Database manager not initialized. Call init_databases() first."
        )
    return _db_manager


async def init_databases(database_path: Path) -> DatabaseManager:
    """
    Initialize the database manager and create schemas.

    This should be called once at application startup.
    """
    global _db_manager

    from localfinance.core.database.schemas import init_finance_schema

    _db_manager = DatabaseManager(database_path)
    await init_finance_schema(_db_manager.finance)

    logger.info(f"Database manager initialized with database: {database_path}")

    return _db_manager


async def shutdown_databases():
    """Shutdown all database connections."""
    global _db_manager
    if _db_manager is not None:
        await _db_manager.close_all()
        _db_manager = None
