"""
Error Handlers

Centralized error handling for the registration service:
- Structured error responses for domain errors
- Request validation errors reported as 400
- Database failures logged with context, returned without driver detail
- Catch-all that never leaks exception text
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from app.core.exceptions import RegistrationServiceError

logger = logging.getLogger(__name__)


def _error_body(request: Request, code: str, message: str, **extra) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "path": request.url.path,
            **extra,
        }
    }


async def registration_error_handler(
    request: Request, exc: RegistrationServiceError
) -> JSONResponse:
    """Handle structured domain errors"""
    logger.info(
        f"Registration error {exc.error_code} on {request.method} {request.url.path}: "
        f"{exc.message}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.error_code, exc.message, **exc.details),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle FastAPI validation errors"""
    errors = []
    for err in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        })

    logger.warning(
        f"Validation error on {request.url.path}",
        extra={"errors": errors, "method": request.method},
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(
            request,
            "VALIDATION_ERROR",
            "Request validation failed",
            validation_errors=errors,
        ),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle database errors"""
    is_connection_error = isinstance(exc, OperationalError)

    logger.error(
        f"Database error: {type(exc).__name__}",
        extra={"path": request.url.path, "method": request.method},
        exc_info=exc,
    )

    if is_connection_error:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=_error_body(
                request, "DATABASE_UNAVAILABLE", "Database connection failed. Please try again."
            ),
            headers={"Retry-After": "30"},
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(request, "DATABASE_ERROR", "Database operation failed."),
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors"""
    error_id = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")
    logger.critical(
        f"Unexpected error {error_id}: {type(exc).__name__}",
        extra={"path": request.url.path, "method": request.method},
        exc_info=exc,
    )

    # Don't expose internal details
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            request,
            "INTERNAL_ERROR",
            "An unexpected error occurred.",
            error_id=error_id,
        ),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RegistrationServiceError, registration_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
