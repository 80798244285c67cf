"""Database infrastructure.

This module provides:
- DatabaseManager: Centralized database access
- Schemas: Database table definitions
- Seed: Sample accounts for non-production environments
"""

from localfinance.core.database.manager import (
    Database,
    DatabaseManager,
    get_db_manager,
    init_databases,
    shutdown_databases,
)
from localfinance.core.database.seed import SAMPLE_ACCOUNTS, seed_sample_accounts

__all__ = [
    "Database",
    "DatabaseManager",
    "SAMPLE_ACCOUNTS",
    "get_db_manager",
    "init_databases",
    "seed_sample_accounts",
    "shutdown_databases",
]
