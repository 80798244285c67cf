"""HTTP Client for the Accounts API."""

import logging
from typing import List, Optional

import httpx

from localfinance.api.models import (
    AccountCreate,
    AccountResponse,
    AccountUpdate,
)
from localfinance.config import settings
from localfinance.domain.exceptions import (
    AccountNotFoundError,
    ConcurrencyConflictError,
    DomainError,
    ValidationError,
)
from localfinance.infrastructure.http_clients.base import BaseHTTPClient

logger = logging.getLogger(__name__)

ACCOUNTS_PATH = "/api/accounts"


class AccountsHTTPClient(BaseHTTPClient):
    """HTTP client for the Accounts API.

    Error responses come back as the same domain exceptions the server
    raised, so UI code handles one set of errors in-process or remote.
    """

    def __init__(self, base_url: str, timeout: float = 30.0, transport=None):
        super().__init__(
            base_url, service_name="accounts", timeout=timeout, transport=transport
        )

    async def get_accounts(self, include_archived: bool = False) -> List[AccountResponse]:
        """List accounts, archived ones only on request."""
        params = {"includeArchived": "true"} if include_archived else None
        response = await self.get(ACCOUNTS_PATH, params=params)
        self._raise_for_error(response)
        return [AccountResponse.model_validate(item) for item in response.json()]

    async def get_account(self, account_id: str) -> AccountResponse:
        response = await self.get(f"{ACCOUNTS_PATH}/{account_id}")
        self._raise_for_error(response, account_id)
        return AccountResponse.model_validate(response.json())

    async def create_account(self, request: AccountCreate) -> AccountResponse:
        """Create an account and return it as stored."""
        response = await self.post(
            ACCOUNTS_PATH, json=request.model_dump(mode="json", by_alias=True)
        )
        self._raise_for_error(response)
        return AccountResponse.model_validate(response.json())

    async def update_account(
        self, account_id: str, request: AccountUpdate
    ) -> AccountResponse:
        """
        Update an account.

        Raises:
            ConcurrencyConflictError: With the stored account attached when
                request.row_version is stale
        """
        response = await self.put(
            f"{ACCOUNTS_PATH}/{account_id}",
            json=request.model_dump(mode="json", by_alias=True),
        )
        self._raise_for_error(response, account_id)
        return AccountResponse.model_validate(response.json())

    async def archive_account(self, account_id: str) -> None:
        response = await self.delete(f"{ACCOUNTS_PATH}/{account_id}")
        self._raise_for_error(response, account_id)

    async def unarchive_account(self, account_id: str) -> None:
        response = await self.post(f"{ACCOUNTS_PATH}/{account_id}/unarchive")
        self._raise_for_error(response, account_id)

    async def health_check(self) -> dict:
        """Check service health."""
        response = await self.get("/health")
        return response.json()

    def _raise_for_error(
        self, response: httpx.Response, account_id: Optional[str] = None
    ) -> None:
        """Turn an error response back into the matching domain exception."""
        if response.is_success:
            return

        body = self._json_body(response)
        if response.status_code == 400:
            raise ValidationError(body.get("errors") or {})
        if response.status_code == 404:
            raise AccountNotFoundError(account_id or "")
        if response.status_code == 409:
            current = body.get("currentState")
            raise ConcurrencyConflictError(
                account_id or "",
                AccountResponse.model_validate(current).to_account() if current else None,
            )

        logger.error(
            f"[{self.service_name}] Unexpected status {response.status_code}: "
            f"{body.get('message', response.text)}"
        )
        raise DomainError(
            body.get("message") or f"Accounts API returned {response.status_code}"
        )

    @staticmethod
    def _json_body(response: httpx.Response) -> dict:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}


def get_accounts_client(transport=None) -> AccountsHTTPClient:
    """Create an AccountsHTTPClient for the configured API base URL.

    The caller owns the client and must close it (or use ``async with``).
    """
    return AccountsHTTPClient(
        settings.api_base_url,
        timeout=settings.http_timeout_seconds,
        transport=transport,
    )
