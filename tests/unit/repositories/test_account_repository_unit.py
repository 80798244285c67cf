"""Unit tests for AccountRepository with a mocked database."""

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from localfinance.domain.exceptions import (
    AccountNotFoundError,
    ConcurrencyConflictError,
    ValidationError,
)
from localfinance.domain.models import Account, AccountDraft
from localfinance.domain.value_objects import AccountType
from localfinance.repositories.account import (
    AccountRepository,
    stamp_created,
    stamp_updated,
)

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_account(**overrides) -> Account:
    fields = dict(
        id="acc-1",
        label="Main",
        type=AccountType.CHECKING,
        currency="EUR",
        iban="NL91ABNA0417164300",
        starting_balance=Decimal("10.00"),
        created_at=NOW,
        updated_at=NOW,
        row_version=b"v1",
    )
    fields.update(overrides)
    return Account(**fields)


def make_row(account: Account) -> dict:
    return {
        "id": account.id,
        "label": account.label,
        "type": account.type.value,
        "currency": account.currency,
        "iban": account.iban,
        "starting_balance": str(account.starting_balance),
        "is_archived": 1 if account.is_archived else 0,
        "created_at": account.created_at.isoformat(),
        "updated_at": account.updated_at.isoformat(),
        "row_version": account.row_version,
    }


def make_db(conn=None):
    """Mock Database whose transaction() yields conn."""
    conn = conn or AsyncMock()
    db = MagicMock()
    db.fetchone = AsyncMock()
    db.fetchall = AsyncMock(return_value=[])
    transaction = MagicMock()
    transaction.__aenter__ = AsyncMock(return_value=conn)
    transaction.__aexit__ = AsyncMock(return_value=False)
    db.transaction = MagicMock(return_value=transaction)
    return db, conn


def cursor_for(row=None, rowcount=1):
    cursor = MagicMock()
    cursor.fetchone = AsyncMock(return_value=row)
    cursor.rowcount = rowcount
    return cursor


class TestStamping:
    """Test explicit timestamp stamping."""

    def test_stamp_created_sets_equal_times(self):
        account = make_account(created_at=None, updated_at=None)

        stamp_created(account, now=NOW)

        assert account.created_at == NOW
        assert account.updated_at == NOW

    def test_stamp_updated_moves_updated_at_only(self):
        account = make_account()
        later = NOW + timedelta(minutes=5)

        stamp_updated(account, now=later)

        assert account.created_at == NOW
        assert account.updated_at == later

    def test_stamp_updated_never_precedes_created_at(self):
        """Test that a clock step backwards is clamped to created_at."""
        account = make_account()

        stamp_updated(account, now=NOW - timedelta(hours=1))

        assert account.updated_at == NOW


class TestAccountRepositoryInit:
    def test_uses_db_manager_by_default(self):
        manager = MagicMock()

        with patch(
            "localfinance.repositories.account.get_db_manager", return_value=manager
        ):
            repo = AccountRepository()

        assert repo._db is manager.finance

    def test_wraps_raw_connection(self):
        from localfinance.repositories.base import DatabaseAdapter

        conn = MagicMock(spec=["execute", "commit", "rollback"])

        repo = AccountRepository(db=conn)

        assert isinstance(repo._db, DatabaseAdapter)


class TestAccountRepositoryReads:
    @pytest.mark.asyncio
    async def test_get_all_excludes_archived_by_default(self):
        db, _ = make_db()
        db.fetchall.return_value = [make_row(make_account())]
        repo = AccountRepository(db=db)

        result = await repo.get_all()

        query = db.fetchall.call_args[0][0]
        assert "is_archived = 0" in query
        assert "ORDER BY rowid" in query
        assert result[0].id == "acc-1"

    @pytest.mark.asyncio
    async def test_get_all_with_archived(self):
        db, _ = make_db()
        repo = AccountRepository(db=db)

        await repo.get_all(include_archived=True)

        assert "is_archived" not in db.fetchall.call_args[0][0]

    @pytest.mark.asyncio
    async def test_get_maps_row(self):
        db, _ = make_db()
        db.fetchone.return_value = make_row(make_account(is_archived=True))
        repo = AccountRepository(db=db)

        account = await repo.get("acc-1")

        assert account.type is AccountType.CHECKING
        assert account.starting_balance == Decimal("10.00")
        assert account.is_archived is True
        assert account.created_at == NOW
        assert account.row_version == b"v1"

    @pytest.mark.asyncio
    async def test_get_raises_not_found(self):
        db, _ = make_db()
        db.fetchone.return_value = None
        repo = AccountRepository(db=db)

        with pytest.raises(AccountNotFoundError):
            await repo.get("missing")

    @pytest.mark.asyncio
    async def test_get_by_id_returns_none(self):
        db, _ = make_db()
        db.fetchone.return_value = None
        repo = AccountRepository(db=db)

        assert await repo.get_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_count(self):
        db, _ = make_db()
        db.fetchone.return_value = {"cnt": 3}
        repo = AccountRepository(db=db)

        assert await repo.count() == 3


class TestAccountRepositoryCreate:
    @pytest.mark.asyncio
    async def test_create_inserts_normalized_account(self):
        db, conn = make_db()
        repo = AccountRepository(db=db)

        account = await repo.create(
            AccountDraft(
                label="Main",
                type=AccountType.SAVINGS,
                currency="eur",
                iban="nl91 abna 0417 1643 00",
                starting_balance=Decimal("10.005"),
            )
        )

        assert account.currency == "EUR"
        assert account.iban == "NL91ABNA0417164300"
        assert account.starting_balance == Decimal("10.00")
        assert account.created_at == account.updated_at
        assert account.is_archived is False
        assert len(account.row_version) == 16

        params = conn.execute.call_args[0][1]
        assert params[0] == account.id
        assert params[5] == "10.00"
        assert params[9] == account.row_version

    @pytest.mark.asyncio
    async def test_create_validation_error_skips_write(self):
        db, conn = make_db()
        repo = AccountRepository(db=db)

        with pytest.raises(ValidationError) as exc_info:
            await repo.create(AccountDraft(label="", currency="EUR", iban="X"))

        assert "label" in exc_info.value.errors
        conn.execute.assert_not_called()
        db.transaction.assert_not_called()


class TestAccountRepositoryUpdate:
    @pytest.mark.asyncio
    async def test_update_swaps_row_version(self):
        stored = make_account()
        conn = AsyncMock()
        conn.execute = AsyncMock(
            side_effect=[cursor_for(make_row(stored)), cursor_for(rowcount=1)]
        )
        db, _ = make_db(conn)
        repo = AccountRepository(db=db)

        updated = await repo.update(
            "acc-1",
            AccountDraft(label="Renamed", currency="EUR", iban=stored.iban),
            b"v1",
        )

        assert updated.label == "Renamed"
        assert updated.row_version != b"v1"
        assert updated.created_at == NOW
        assert updated.updated_at >= NOW

        sql, params = conn.execute.call_args_list[1][0]
        assert "WHERE id = ? AND row_version = ?" in sql
        assert params[-2:] == ("acc-1", b"v1")

    @pytest.mark.asyncio
    async def test_update_stale_version_conflicts(self):
        stored = make_account(row_version=b"v2")
        conn = AsyncMock()
        conn.execute = AsyncMock(return_value=cursor_for(make_row(stored)))
        db, _ = make_db(conn)
        repo = AccountRepository(db=db)

        with pytest.raises(ConcurrencyConflictError) as exc_info:
            await repo.update(
                "acc-1",
                AccountDraft(label="Renamed", currency="EUR", iban=stored.iban),
                b"v1",
            )

        assert exc_info.value.current.row_version == b"v2"
        assert conn.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_update_conflicts_when_no_row_swapped(self):
        """Test that a write racing between read and swap is a conflict."""
        stored = make_account()
        conn = AsyncMock()
        conn.execute = AsyncMock(
            side_effect=[cursor_for(make_row(stored)), cursor_for(rowcount=0)]
        )
        db, _ = make_db(conn)
        repo = AccountRepository(db=db)

        with pytest.raises(ConcurrencyConflictError):
            await repo.update(
                "acc-1",
                AccountDraft(label="Renamed", currency="EUR", iban=stored.iban),
                b"v1",
            )

    @pytest.mark.asyncio
    async def test_update_missing_account(self):
        conn = AsyncMock()
        conn.execute = AsyncMock(return_value=cursor_for(None))
        db, _ = make_db(conn)
        repo = AccountRepository(db=db)

        with pytest.raises(AccountNotFoundError):
            await repo.update(
                "missing",
                AccountDraft(label="X", currency="EUR", iban="NL00"),
                b"v1",
            )

    @pytest.mark.asyncio
    async def test_update_without_row_version_is_invalid(self):
        db, _ = make_db()
        repo = AccountRepository(db=db)

        with pytest.raises(ValidationError) as exc_info:
            await repo.update(
                "acc-1", AccountDraft(label="X", currency="EUR", iban="NL00"), None
            )

        assert "rowVersion" in exc_info.value.errors
        db.transaction.assert_not_called()


class TestAccountRepositoryArchive:
    @pytest.mark.asyncio
    async def test_archive_sets_flag_and_new_version(self):
        stored = make_account()
        conn = AsyncMock()
        conn.execute = AsyncMock(
            side_effect=[cursor_for(make_row(stored)), cursor_for(rowcount=1)]
        )
        db, _ = make_db(conn)
        repo = AccountRepository(db=db)

        archived = await repo.archive("acc-1")

        assert archived.is_archived is True
        assert archived.row_version != stored.row_version
        params = conn.execute.call_args_list[1][0][1]
        assert params[0] == 1

    @pytest.mark.asyncio
    async def test_unarchive_clears_flag(self):
        stored = replace(make_account(), is_archived=True)
        conn = AsyncMock()
        conn.execute = AsyncMock(
            side_effect=[cursor_for(make_row(stored)), cursor_for(rowcount=1)]
        )
        db, _ = make_db(conn)
        repo = AccountRepository(db=db)

        restored = await repo.unarchive("acc-1")

        assert restored.is_archived is False
        params = conn.execute.call_args_list[1][0][1]
        assert params[0] == 0

    @pytest.mark.asyncio
    async def test_archive_missing_account(self):
        conn = AsyncMock()
        conn.execute = AsyncMock(return_value=cursor_for(None))
        db, _ = make_db(conn)
        repo = AccountRepository(db=db)

        with pytest.raises(AccountNotFoundError):
            await repo.archive("missing")
