"""Account type value object."""

from enum import Enum


class AccountType(str, Enum):
    """Kind of financial account."""

    CHECKING = "Checking"
    SAVINGS = "Savings"
    CREDIT = "Credit"
    OTHER = "Other"

    @classmethod
    def _missing_(cls, value):
        # Accept "checking", "SAVINGS", ... from hand-written payloads
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return None

