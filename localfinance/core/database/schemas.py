"""
Database Schemas - CREATE TABLE statements.

finance.db holds the account records. Amounts are stored as fixed
2-decimal TEXT so no precision is lost to floating point; row versions
are opaque BLOBs regenerated on every write.
"""

import logging
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

FINANCE_SCHEMA = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL,
    description TEXT
);

CREATE TABLE IF NOT EXISTS accounts (
    id TEXT PRIMARY KEY,
    label TEXT NOT NULL CHECK (length(label) <= 100),
    type TEXT NOT NULL CHECK (type IN ('Checking', 'Savings', 'Credit', 'Other')),
    currency TEXT NOT NULL CHECK (length(currency) = 3),
    iban TEXT NOT NULL CHECK (length(iban) <= 34),
    starting_balance TEXT NOT NULL DEFAULT '0.00',
    is_archived INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    row_version BLOB NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_accounts_archived ON accounts(is_archived);
"""


async def init_finance_schema(db):
    """Initialize finance database schema."""
    await db.executescript(FINANCE_SCHEMA)

    row = await db.fetchone("SELECT MAX(version) as v FROM schema_version")
    current_version = row["v"] if row and row["v"] else 0

    if current_version == 0:
        await db.execute(
            "INSERT INTO schema_version (version, applied_at, description) VALUES (?, ?, ?)",
            (
                SCHEMA_VERSION,
                datetime.now(timezone.utc).isoformat(),
                "Initial finance schema with accounts",
            ),
        )
        await db.commit()
        logger.info(f"Finance database initialized with schema version {SCHEMA_VERSION}")
    elif current_version > SCHEMA_VERSION:
        logger.warning(
            f"Finance database schema version {current_version} is newer than "
            f"supported version {SCHEMA_VERSION}"
        )
