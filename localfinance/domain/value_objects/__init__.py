"""Domain value objects."""

from localfinance.domain.value_objects.account_type import AccountType

__all__ = ["AccountType"]
