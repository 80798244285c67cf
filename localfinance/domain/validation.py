"""
Field validation for account and transaction payloads.

Every check runs; violations are collected per field and raised together.

Usage:
    errors = account_errors(draft)
    validate_account_update(draft, row_version)  # raises ValidationError
"""

from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from localfinance.domain.exceptions import ValidationError
from localfinance.domain.models import AccountDraft, TransactionDraft, to_money
from localfinance.domain.value_objects.account_type import AccountType

LABEL_MAX_LENGTH = 100
IBAN_MAX_LENGTH = 34
CURRENCY_LENGTH = 3
DESCRIPTION_MAX_LENGTH = 500
COUNTER_ACCOUNT_MAX_LENGTH = 50

Errors = Dict[str, List[str]]


def _add(errors: Errors, field: str, message: str) -> None:
    errors.setdefault(field, []).append(message)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def _is_finite_amount(value) -> bool:
    try:
        return Decimal(value).is_finite()
    except (InvalidOperation, TypeError, ValueError):
        return False


def _is_storable_amount(value) -> bool:
    # Must survive quantizing to cents within the decimal context precision
    if not _is_finite_amount(value):
        return False
    try:
        to_money(value)
    except InvalidOperation:
        return False
    return True


def account_errors(draft: AccountDraft) -> Errors:
    """Collect field errors for an account create/update payload."""
    errors: Errors = {}

    if _is_blank(draft.label):
        _add(errors, "label", "Label is required")
    elif len(draft.label) > LABEL_MAX_LENGTH:
        _add(errors, "label", f"Label cannot exceed {LABEL_MAX_LENGTH} characters")

    if _is_blank(draft.iban):
        _add(errors, "iban", "IBAN is required")
    elif len(draft.iban) > IBAN_MAX_LENGTH:
        _add(errors, "iban", f"IBAN cannot exceed {IBAN_MAX_LENGTH} characters")

    if _is_blank(draft.currency):
        _add(errors, "currency", "Currency is required")
    elif len(draft.currency) != CURRENCY_LENGTH:
        _add(
            errors,
            "currency",
            f"Currency must be exactly {CURRENCY_LENGTH} characters",
        )

    try:
        AccountType(draft.type)
    except ValueError:
        _add(errors, "type", "Type must be one of Checking, Savings, Credit, Other")

    if not _is_storable_amount(draft.starting_balance):
        _add(errors, "startingBalance", "Starting balance must be a finite amount")

    return errors


def validate_account_create(draft: AccountDraft) -> None:
    """Raise ValidationError if the create payload is invalid."""
    errors = account_errors(draft)
    if errors:
        raise ValidationError(errors)


def validate_account_update(draft: AccountDraft, row_version: Optional[bytes]) -> None:
    """Raise ValidationError if the update payload is invalid.

    Updates must also carry the row version the caller last read.
    """
    errors = account_errors(draft)
    if row_version is None:
        _add(errors, "rowVersion", "Row version is required")
    if errors:
        raise ValidationError(errors)


def transaction_errors(draft: TransactionDraft, today: Optional[date] = None) -> Errors:
    """Collect field errors for a transaction payload.

    Args:
        draft: Transaction fields to check
        today: Reference day for the future-date check (defaults to today)

    Returns:
        Mapping of field name to messages; empty when valid
    """
    errors: Errors = {}
    today = today or date.today()

    if draft.account_id is None or draft.account_id <= 0:
        _add(errors, "accountId", "Account is required")

    if draft.date is None:
        _add(errors, "date", "Date is required")
    elif draft.date > today + timedelta(days=1):
        _add(errors, "date", "Date cannot be in the future")

    if not _is_finite_amount(draft.amount):
        _add(errors, "amount", "Amount must be a finite amount")
    elif Decimal(draft.amount) == 0:
        _add(errors, "amount", "Amount cannot be zero")

    if _is_blank(draft.description):
        _add(errors, "description", "Description is required")
    elif len(draft.description) > DESCRIPTION_MAX_LENGTH:
        _add(
            errors,
            "description",
            f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters",
        )

    if draft.category_id is None or draft.category_id <= 0:
        _add(errors, "categoryId", "Category is required")

    if (
        draft.counter_account is not None
        and len(draft.counter_account) > COUNTER_ACCOUNT_MAX_LENGTH
    ):
        _add(
            errors,
            "counterAccount",
            f"Counter account cannot exceed {COUNTER_ACCOUNT_MAX_LENGTH} characters",
        )

    return errors


def validate_transaction(draft: TransactionDraft, today: Optional[date] = None) -> None:
    """Raise ValidationError if the transaction payload is invalid."""
    errors = transaction_errors(draft, today=today)
    if errors:
        raise ValidationError(errors)
