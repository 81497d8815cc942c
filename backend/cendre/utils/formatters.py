"""
Data formatting utilities.
"""

from datetime import datetime, timezone
from typing import Any, Dict


def format_rfc3339(dt: datetime) -> str:
    """
    Format datetime as an RFC 3339 UTC timestamp with second precision.

    Args:
        dt: Datetime object (naive values are treated as UTC)

    Returns:
        Timestamp string such as "2024-01-01T12:00:00Z"
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def format_error_response(error: Exception, status_code: int = 500) -> Dict[str, Any]:
    """
    Format error response for API.

    Args:
        error: Exception object
        status_code: HTTP status code

    Returns:
        Formatted error response dictionary
    """
    response = {
        "error": error.__class__.__name__,
        "detail": getattr(error, "message", None) or str(error),
        "status_code": status_code,
    }

    # Add additional details for custom exceptions
    if getattr(error, "detail", None):
        response["detail"] = error.detail

    if getattr(error, "field", None):
        response["field"] = error.field

    return response
