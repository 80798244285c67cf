"""Account repository - persistence gateway for the accounts table.

Writes go through two explicit steps owned by this module:
- stamp_created()/stamp_updated() set timestamps from the server clock,
  never from caller input
- updates are a compare-and-swap on row_version at the storage boundary
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import List, Optional

from localfinance.core.database.manager import get_db_manager
from localfinance.domain.exceptions import AccountNotFoundError, ConcurrencyConflictError
from localfinance.domain.models import (
    Account,
    AccountDraft,
    new_account_id,
    new_row_version,
    to_money,
)
from localfinance.domain.validation import validate_account_create, validate_account_update
from localfinance.domain.value_objects.account_type import AccountType
from localfinance.repositories.base import (
    safe_get,
    safe_get_bool,
    safe_get_datetime,
    safe_get_decimal,
    transaction_context,
)

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def stamp_created(account: Account, now: Optional[datetime] = None) -> Account:
    """Set created_at and updated_at to the same server time."""
    now = now or utcnow()
    account.created_at = now
    account.updated_at = now
    return account


def stamp_updated(account: Account, now: Optional[datetime] = None) -> Account:
    """Set updated_at, never earlier than created_at."""
    now = now or utcnow()
    if account.created_at is not None and now < account.created_at:
        now = account.created_at
    account.updated_at = now
    return account


class AccountRepository:
    """Repository for account operations."""

    def __init__(self, db=None):
        """Initialize repository.

        Args:
            db: Optional database connection for testing. If None, uses get_db_manager().finance
                Can be a Database instance or raw aiosqlite.Connection (will be wrapped)
        """
        if db is not None:
            if not hasattr(db, "fetchone") and hasattr(db, "execute"):
                from localfinance.repositories.base import DatabaseAdapter

                self._db = DatabaseAdapter(db)
            else:
                self._db = db
        else:
            self._db = get_db_manager().finance

    async def get_all(self, include_archived: bool = False) -> List[Account]:
        """Get accounts in insertion order, archived ones only on request."""
        query = "SELECT * FROM accounts"
        if not include_archived:
            query += " WHERE is_archived = 0"
        query += " ORDER BY rowid"
        rows = await self._db.fetchall(query)
        return [self._row_to_account(row) for row in rows]

    async def get_by_id(self, account_id: str) -> Optional[Account]:
        """Get account by ID, or None if it does not exist."""
        row = await self._db.fetchone(
            "SELECT * FROM accounts WHERE id = ?", (account_id,)
        )
        if not row:
            return None
        return self._row_to_account(row)

    async def get(self, account_id: str) -> Account:
        """Get account by ID.

        Raises:
            AccountNotFoundError: If no account has this ID
        """
        account = await self.get_by_id(account_id)
        if account is None:
            logger.warning(f"Account not found with ID: {account_id}")
            raise AccountNotFoundError(account_id)
        return account

    async def count(self) -> int:
        """Count stored accounts, archived included."""
        row = await self._db.fetchone("SELECT COUNT(*) AS cnt FROM accounts")
        return row["cnt"] if row else 0

    async def create(self, draft: AccountDraft) -> Account:
        """Validate and persist a new account.

        Raises:
            ValidationError: If the payload fails a field constraint
        """
        draft = draft.normalized()
        validate_account_create(draft)

        account = Account(
            id=new_account_id(),
            label=draft.label,
            type=AccountType(draft.type),
            currency=draft.currency,
            iban=draft.iban,
            starting_balance=to_money(draft.starting_balance),
            is_archived=False,
            row_version=new_row_version(),
        )
        stamp_created(account)

        logger.info(f"Creating new account: {account.label}")
        async with transaction_context(self._db) as conn:
            await conn.execute(
                """
                INSERT INTO accounts
                (id, label, type, currency, iban, starting_balance,
                 is_archived, created_at, updated_at, row_version)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    account.id,
                    account.label,
                    account.type.value,
                    account.currency,
                    account.iban,
                    str(account.starting_balance),
                    0,
                    account.created_at.isoformat(),
                    account.updated_at.isoformat(),
                    account.row_version,
                ),
            )

        logger.info(f"Account created successfully with ID: {account.id}")
        return account

    async def update(
        self, account_id: str, draft: AccountDraft, row_version: Optional[bytes]
    ) -> Account:
        """Apply a draft to an account if row_version is still current.

        Args:
            account_id: Account to update
            draft: New field values
            row_version: Row version the caller last read

        Raises:
            ValidationError: If the payload is invalid or row_version is missing
            AccountNotFoundError: If no account has this ID
            ConcurrencyConflictError: If the account changed since it was read
        """
        draft = draft.normalized()
        validate_account_update(draft, row_version)

        logger.info(f"Updating account with ID: {account_id}")
        async with transaction_context(self._db) as conn:
            current = await self._load_for_write(conn, account_id)
            if current.row_version != bytes(row_version):
                logger.warning(f"Concurrency conflict updating account: {account_id}")
                raise ConcurrencyConflictError(account_id, current)

            updated = replace(
                current,
                label=draft.label,
                type=AccountType(draft.type),
                currency=draft.currency,
                iban=draft.iban,
                starting_balance=to_money(draft.starting_balance),
                row_version=new_row_version(),
            )
            stamp_updated(updated)

            cursor = await conn.execute(
                """
                UPDATE accounts
                SET label = ?, type = ?, currency = ?, iban = ?, starting_balance = ?,
                    updated_at = ?, row_version = ?
                WHERE id = ? AND row_version = ?
                """,
                (
                    updated.label,
                    updated.type.value,
                    updated.currency,
                    updated.iban,
                    str(updated.starting_balance),
                    updated.updated_at.isoformat(),
                    updated.row_version,
                    account_id,
                    current.row_version,
                ),
            )
            if cursor.rowcount == 0:
                logger.warning(f"Concurrency conflict updating account: {account_id}")
                raise ConcurrencyConflictError(account_id, current)

        logger.info(f"Account updated successfully: {account_id}")
        return updated

    async def archive(self, account_id: str) -> Account:
        """Soft delete an account (is_archived = 1).

        Raises:
            AccountNotFoundError: If no account has this ID
        """
        logger.info(f"Archiving account with ID: {account_id}")
        account = await self._set_archived(account_id, True)
        logger.info(f"Account archived successfully: {account_id}")
        return account

    async def unarchive(self, account_id: str) -> Account:
        """Restore an archived account.

        Raises:
            AccountNotFoundError: If no account has this ID
        """
        logger.info(f"Unarchiving account with ID: {account_id}")
        account = await self._set_archived(account_id, False)
        logger.info(f"Account unarchived successfully: {account_id}")
        return account

    async def _set_archived(self, account_id: str, archived: bool) -> Account:
        async with transaction_context(self._db) as conn:
            current = await self._load_for_write(conn, account_id)
            account = replace(
                current, is_archived=archived, row_version=new_row_version()
            )
            stamp_updated(account)
            await conn.execute(
                """
                UPDATE accounts
                SET is_archived = ?, updated_at = ?, row_version = ?
                WHERE id = ?
                """,
                (
                    1 if archived else 0,
                    account.updated_at.isoformat(),
                    account.row_version,
                    account_id,
                ),
            )
        return account

    async def _load_for_write(self, conn, account_id: str) -> Account:
        cursor = await conn.execute(
            "SELECT * FROM accounts WHERE id = ?", (account_id,)
        )
        row = await cursor.fetchone()
        if not row:
            logger.warning(f"Account not found with ID: {account_id}")
            raise AccountNotFoundError(account_id)
        return self._row_to_account(row)

    def _row_to_account(self, row) -> Account:
        """Convert database row to Account model."""
        return Account(
            id=row["id"],
            label=row["label"],
            type=AccountType(row["type"]),
            currency=row["currency"],
            iban=row["iban"],
            starting_balance=to_money(safe_get_decimal(row, "starting_balance", 0)),
            is_archived=safe_get_bool(row, "is_archived"),
            created_at=safe_get_datetime(row, "created_at"),
            updated_at=safe_get_datetime(row, "updated_at"),
            row_version=bytes(safe_get(row, "row_version") or b""),
        )
