"""
Global exception handlers for FastAPI application.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from loguru import logger
from slowapi.errors import RateLimitExceeded

from cendre.core.logging import log_error
from cendre.core.middleware import SECURITY_HEADERS
from cendre.utils.exceptions import (
    CendreException,
    InvalidInputError,
    SecretNotFoundError,
    StorageError,
    InvariantViolationError,
)
from cendre.utils.formatters import format_error_response


async def cendre_exception_handler(request: Request, exc: CendreException) -> JSONResponse:
    """Handle custom Cendre exceptions."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    # Map exception types to status codes
    if isinstance(exc, SecretNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, InvalidInputError):
        status_code = status.HTTP_400_BAD_REQUEST

    if status_code >= 500:
        # Backend details stay in the logs
        if isinstance(exc, InvariantViolationError):
            logger.critical(exc.message)
        log_error(exc, {"cause": repr(exc.__cause__) if exc.__cause__ else None})
        error_response = {
            "error": exc.__class__.__name__,
            "detail": "internal storage error" if isinstance(exc, StorageError) else "internal error",
            "status_code": status_code,
        }
    else:
        if status_code == status.HTTP_404_NOT_FOUND:
            logger.info("Secret not found")
        else:
            logger.warning(f"Rejected request: {exc.message}")
        error_response = format_error_response(exc, status_code)

    return JSONResponse(
        status_code=status_code,
        content=error_response
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle Pydantic validation errors. Submitted values are never echoed back or logged."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error.get("loc", []))
        errors.append({
            "field": field,
            "message": error.get("msg"),
            "type": error.get("type")
        })

    error_response = {
        "error": "ValidationError",
        "detail": "Request validation failed",
        "status_code": status.HTTP_400_BAD_REQUEST,
        "errors": errors
    }

    logger.warning(f"Validation error on fields: {[e['field'] for e in errors]}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle slowapi rate limit errors with the common error body."""
    logger.warning(f"Rate limit exceeded for client {request.client.host if request.client else 'unknown'}")

    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "error": "RateLimitExceeded",
            "detail": "too many requests",
            "status_code": status.HTTP_429_TOO_MANY_REQUESTS,
        },
        headers={"Retry-After": "60"},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle generic exceptions."""
    error_response = {
        "error": "InternalServerError",
        "detail": "internal error",
        "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR
    }

    log_error(exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response,
        # Runs outside the middleware stack
        headers=SECURITY_HEADERS,
    )
