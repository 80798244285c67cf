"""FastAPI application entry point.

Run with:
    localfinance            (console script, uses HOST/PORT settings)
    uvicorn localfinance.main:app
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from localfinance.api import accounts
from localfinance.api.errors import register_exception_handlers
from localfinance.config import settings
from localfinance.core.database.manager import (
    get_db_manager,
    init_databases,
    shutdown_databases,
)
from localfinance.core.database.seed import seed_sample_accounts
from localfinance.core.logging import (
    CORRELATION_HEADER,
    bind_correlation_id,
    configure_logging,
    get_correlation_id,
    reset_correlation_id,
)
from localfinance.repositories.account import AccountRepository

configure_logging(
    settings.data_dir / "logs",
    debug=settings.debug,
    max_bytes=settings.log_max_bytes,
    backup_count=settings.log_backup_count,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    # Startup
    logger.info(f"Starting {settings.app_name} ({settings.environment})...")

    db_manager = await init_databases(settings.database_path)

    if settings.seed_sample_data and not settings.is_production:
        await seed_sample_accounts(AccountRepository(db_manager.finance))

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")
    await shutdown_databases()


app = FastAPI(
    title=settings.app_name,
    description="Local personal finance manager",
    version="0.1.0",
    lifespan=lifespan,
)

register_exception_handlers(app)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Bind a correlation ID to the request and echo it in the response."""
    token = bind_correlation_id(request.headers.get(CORRELATION_HEADER))
    try:
        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = get_correlation_id()
        return response
    finally:
        reset_correlation_id(token)


# Include API routers
app.include_router(accounts.router, prefix="/api/accounts", tags=["Accounts"])


async def _check_database_health() -> tuple[str, bool]:
    """Check database connectivity."""
    try:
        db_manager = get_db_manager()
        await db_manager.finance.execute("SELECT 1")
        return "connected", False
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return f"error: {str(e)}", True


@app.get("/health")
async def health():
    """
    Health check endpoint.

    Returns:
        - status: "healthy" or "degraded"
        - app: Application name
        - database: Database connectivity status
    """
    health_status = {
        "status": "healthy",
        "app": settings.app_name,
        "database": "unknown",
    }

    db_status, db_degraded = await _check_database_health()
    health_status["database"] = db_status
    if db_degraded:
        health_status["status"] = "degraded"
        return JSONResponse(
            content=health_status, status_code=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    return health_status


def run():
    """Serve the application with uvicorn on the configured host and port."""
    uvicorn.run(
        "localfinance.main:app",
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()
