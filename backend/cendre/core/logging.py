"""
Structured logging utilities for the application.

Only identifiers, TTLs, status codes and timings are ever logged. Request
bodies are never logged because they carry ciphertext and IVs.
"""

import uuid
from contextvars import ContextVar
from typing import Optional, Dict, Any
from loguru import logger
from fastapi import Request

# Context variable for correlation ID
correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from context."""
    return correlation_id_var.get()


def set_correlation_id(cid: Optional[str] = None) -> str:
    """
    Set correlation ID in context.

    Args:
        cid: Correlation ID to set. If None, generates a new UUID.

    Returns:
        The correlation ID that was set.
    """
    if cid is None:
        cid = str(uuid.uuid4())
    correlation_id_var.set(cid)
    return cid


def redact_path(path: str) -> str:
    """Replace the secret id in retrieval paths so access logs cannot be replayed."""
    prefix = "/api/secret/"
    if path.startswith(prefix) and len(path) > len(prefix):
        return f"{prefix}<id>"
    return path


def log_request(
    request: Request,
    method: str,
    path: str,
    correlation_id: Optional[str] = None
) -> None:
    """
    Log incoming HTTP request with correlation ID.

    Args:
        request: FastAPI request object
        method: HTTP method
        path: Request path
    """
    if correlation_id is None:
        correlation_id = get_correlation_id() or set_correlation_id()

    logger.bind(
        correlation_id=correlation_id,
        method=method,
        path=redact_path(path),
        client_ip=request.client.host if request.client else None,
    ).info(f"Incoming request {method} {redact_path(path)}")


def log_response(
    status_code: int,
    response_time_ms: float,
    correlation_id: Optional[str] = None
) -> None:
    """
    Log HTTP response.

    Args:
        status_code: HTTP status code
        response_time_ms: Response time in milliseconds
        correlation_id: Correlation ID (uses context if not provided)
    """
    if correlation_id is None:
        correlation_id = get_correlation_id()

    log_level = "error" if status_code >= 500 else "warning" if status_code >= 400 and status_code != 404 else "info"

    getattr(logger.bind(
        correlation_id=correlation_id,
        status_code=status_code,
        response_time_ms=round(response_time_ms, 2),
    ), log_level)(f"Response sent {status_code} in {response_time_ms:.2f}ms")


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    correlation_id: Optional[str] = None
) -> None:
    """
    Log an error with context.

    Args:
        error: Exception object
        context: Additional context dictionary
        correlation_id: Correlation ID (uses context if not provided)
    """
    if correlation_id is None:
        correlation_id = get_correlation_id()

    extra = {
        "correlation_id": correlation_id,
        "error_type": error.__class__.__name__,
    }

    if context:
        extra.update(context)

    logger.bind(**extra).opt(exception=error).error(f"Error occurred: {error.__class__.__name__}: {error}")
