"""FastAPI dependency injection container.

Routes receive repositories through these aliases, so tests can swap an
implementation with ``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends

from localfinance.repositories.account import AccountRepository

# Repository Dependencies


def get_account_repository() -> AccountRepository:
    """Get AccountRepository instance."""
    return AccountRepository()


# Type aliases for use in function signatures
AccountRepositoryDep = Annotated[AccountRepository, Depends(get_account_repository)]
