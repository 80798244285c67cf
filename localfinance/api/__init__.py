# API routers
from localfinance.api import accounts

__all__ = ["accounts"]
