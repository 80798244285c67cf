"""Domain-specific exceptions."""

from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:
    from localfinance.domain.models import Account


class DomainError(Exception):
    """Base exception for domain errors."""

    pass


class ValidationError(DomainError):
    """Raised when a payload fails one or more field constraints.

    ``errors`` maps the wire name of each offending field to every message
    collected for it, so callers can report all problems at once.
    """

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = {field: list(messages) for field, messages in errors.items()}
        summary = "; ".join(
            f"{field}: {', '.join(messages)}" for field, messages in self.errors.items()
        )
        super().__init__(f"Validation error: {summary}")


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""

    pass


class AccountNotFoundError(NotFoundError):
    """Raised when an account is not found."""

    def __init__(self, account_id: str):
        self.account_id = account_id
        super().__init__(f"Account with ID {account_id} was not found.")


class ConcurrencyConflictError(DomainError):
    """Raised when an update presents a stale row version.

    Carries the currently stored record (when known) so the caller can
    re-read and decide whether to reapply its changes.
    """

    def __init__(self, account_id: str, current: Optional["Account"] = None):
        self.account_id = account_id
        self.current = current
        super().__init__(
            f"Account {account_id} was modified by another user. "
            "Please reload and try again."
        )
