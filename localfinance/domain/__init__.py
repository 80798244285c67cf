"""Domain layer: models, value objects, validation and exceptions."""

from localfinance.domain.exceptions import (
    AccountNotFoundError,
    ConcurrencyConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from localfinance.domain.models import Account, AccountDraft, TransactionDraft
from localfinance.domain.value_objects import AccountType

__all__ = [
    "Account",
    "AccountDraft",
    "AccountNotFoundError",
    "AccountType",
    "ConcurrencyConflictError",
    "DomainError",
    "NotFoundError",
    "TransactionDraft",
    "ValidationError",
]
