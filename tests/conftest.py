"""Pytest configuration and fixtures."""

import os
import tempfile

import aiosqlite
import httpx
import pytest
from fastapi import FastAPI

from localfinance.api import accounts
from localfinance.api.errors import register_exception_handlers
from localfinance.core.database.schemas import FINANCE_SCHEMA
from localfinance.infrastructure.dependencies import get_account_repository
from localfinance.repositories import AccountRepository


@pytest.fixture
async def db():
    """Create a temporary database file with the finance schema."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    try:
        async with aiosqlite.connect(db_path) as db:
            db.row_factory = aiosqlite.Row
            await db.executescript(FINANCE_SCHEMA)
            await db.commit()
            yield db
    finally:
        if os.path.exists(db_path):
            os.unlink(db_path)


@pytest.fixture
async def account_repo(db):
    """Create an account repository instance."""
    return AccountRepository(db=db)


@pytest.fixture
def api_app(account_repo):
    """Accounts API wired to the temporary database."""
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(accounts.router, prefix="/api/accounts")
    app.dependency_overrides[get_account_repository] = lambda: account_repo
    return app


@pytest.fixture
async def client(api_app):
    """HTTP client that calls the app in-process."""
    transport = httpx.ASGITransport(app=api_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
