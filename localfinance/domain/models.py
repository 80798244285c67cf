"""
Domain Models - All dataclasses for the application.

This consolidates all domain models in one place for easy imports.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Optional

from localfinance.domain.value_objects.account_type import AccountType

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Quantize an amount to the stored 2-decimal precision."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_EVEN)


def new_account_id() -> str:
    return str(uuid.uuid4())


def new_row_version() -> bytes:
    return uuid.uuid4().bytes


@dataclass
class AccountDraft:
    """Client-supplied account fields for a create or update.

    Holds only what a caller may write; identity, timestamps and the
    row version belong to the gateway.
    """

    label: str
    type: AccountType = AccountType.CHECKING
    currency: str = ""
    iban: str = ""
    starting_balance: Decimal = Decimal("0")

    def normalized(self) -> "AccountDraft":
        """Return a copy with currency upper-cased and IBAN spaces removed."""
        return replace(
            self,
            currency=(self.currency or "").strip().upper(),
            iban=(self.iban or "").replace(" ", "").upper(),
        )


@dataclass
class Account:
    """Financial account owned by the user."""

    id: str
    label: str
    type: AccountType
    currency: str
    iban: str
    starting_balance: Decimal
    is_archived: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    row_version: bytes = b""

    @property
    def current_balance(self) -> Decimal:
        # No ledger entries are persisted yet
        return self.starting_balance


@dataclass
class TransactionDraft:
    """Ledger entry awaiting validation.

    Positive amounts are income, negative amounts are expenses.
    """

    account_id: int
    date: Optional[date]
    amount: Decimal
    description: str
    category_id: int
    counter_account: Optional[str] = None
