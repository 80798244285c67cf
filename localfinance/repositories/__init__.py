"""
Repositories - Data access layer.

Direct implementations using the DatabaseManager.
No abstract interfaces - there's only one implementation (SQLite).
"""

from localfinance.repositories.account import AccountRepository

__all__ = ["AccountRepository"]
