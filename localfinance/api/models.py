"""Pydantic models for API request/response validation and documentation.

These are the one data contract for accounts: the HTTP routes and the
UI-facing HTTP client both use them, so field names and shapes cannot
drift between the two sides. JSON uses camelCase names.
"""

import base64
import binascii
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from localfinance.domain.exceptions import ValidationError
from localfinance.domain.models import Account, AccountDraft
from localfinance.domain.value_objects.account_type import AccountType


def encode_row_version(row_version: bytes) -> str:
    return base64.b64encode(row_version).decode("ascii")


def decode_row_version(value: Optional[str]) -> Optional[bytes]:
    """Decode a base64 row version; None or an empty token decodes to None.

    Raises:
        ValidationError: If the value is not valid base64
    """
    if value is None or not value.strip():
        return None
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError({"rowVersion": ["Row version is not valid base64"]})


class ApiModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AccountCreate(ApiModel):
    """Request model for creating an account.

    Fields are parsed loosely; account_errors() checks type and amount
    along with the rest so all field errors come back together.
    """

    label: Optional[str] = ""
    type: Optional[str] = AccountType.CHECKING.value
    currency: Optional[str] = ""
    iban: Optional[str] = ""
    starting_balance: Optional[Union[Decimal, str]] = Decimal("0")

    def to_draft(self) -> AccountDraft:
        return AccountDraft(
            label=self.label,
            type=self.type,
            currency=self.currency,
            iban=self.iban,
            starting_balance=self.starting_balance,
        )


class AccountUpdate(AccountCreate):
    """Request model for updating an account.

    row_version is the base64 token from the last read; it is optional here
    so a missing value is reported with the other field errors.
    """

    row_version: Optional[str] = None

    def decoded_row_version(self) -> Optional[bytes]:
        return decode_row_version(self.row_version)


class AccountResponse(ApiModel):
    """Account as returned by the API."""

    id: str
    label: str
    type: AccountType
    currency: str
    iban: str
    starting_balance: Decimal
    current_balance: Decimal
    is_archived: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    row_version: str

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id,
            label=account.label,
            type=account.type,
            currency=account.currency,
            iban=account.iban,
            starting_balance=account.starting_balance,
            current_balance=account.current_balance,
            is_archived=account.is_archived,
            created_at=account.created_at,
            updated_at=account.updated_at,
            row_version=encode_row_version(account.row_version),
        )

    def to_account(self) -> Account:
        return Account(
            id=self.id,
            label=self.label,
            type=self.type,
            currency=self.currency,
            iban=self.iban,
            starting_balance=self.starting_balance,
            is_archived=self.is_archived,
            created_at=self.created_at,
            updated_at=self.updated_at,
            row_version=decode_row_version(self.row_version) or b"",
        )
