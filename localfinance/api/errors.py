"""Error responses and exception handlers for API endpoints.

Domain exceptions raised anywhere below a route are mapped here, once:

    ValidationError / malformed body -> 400 {"status": "validation_error", "errors": {...}}
    NotFoundError                    -> 404 {"status": "not_found"}
    ConcurrencyConflictError         -> 409 {"status": "conflict", "currentState": {...}}
    anything else                    -> 500 {"status": "error"} (logged)
"""

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from localfinance.api.models import AccountResponse
from localfinance.domain.exceptions import (
    ConcurrencyConflictError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

VALIDATION_TITLE = "One or more validation errors occurred."


def error_response(
    message: str, status: str = "error", **kwargs: Any
) -> Dict[str, Any]:
    """Create a standardized error response.

    Args:
        message: Error message
        status: Status string (default: "error")
        **kwargs: Additional fields to include in response

    Returns:
        Standardized error response dictionary
    """
    response: Dict[str, Any] = {
        "status": status,
        "message": message,
    }
    response.update(kwargs)
    return response


def request_errors_by_field(exc: RequestValidationError) -> Dict[str, List[str]]:
    """Group FastAPI request validation errors by their (body) field name."""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(location) or "body"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return errors


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response(VALIDATION_TITLE, status="validation_error", errors=exc.errors),
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response(
            VALIDATION_TITLE,
            status="validation_error",
            errors=request_errors_by_field(exc),
        ),
    )


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=error_response(str(exc), status="not_found"),
    )


async def conflict_handler(request: Request, exc: ConcurrencyConflictError) -> JSONResponse:
    current = None
    if exc.current is not None:
        current = jsonable_encoder(
            AccountResponse.from_account(exc.current), by_alias=True
        )
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=error_response(str(exc), status="conflict", currentState=current),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response("Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain error mapping on an application."""
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ConcurrencyConflictError, conflict_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
