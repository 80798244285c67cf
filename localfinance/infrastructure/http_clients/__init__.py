"""HTTP clients for the finance API."""

from localfinance.infrastructure.http_clients.accounts_client import (
    AccountsHTTPClient,
    get_accounts_client,
)
from localfinance.infrastructure.http_clients.base import BaseHTTPClient

__all__ = ["AccountsHTTPClient", "BaseHTTPClient", "get_accounts_client"]
