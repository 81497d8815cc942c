"""
Custom exception classes for the Cendre secret service.
"""

from typing import Optional


class CendreException(Exception):
    """Base exception for all Cendre errors."""

    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail
        super().__init__(self.message)


class InvalidInputError(CendreException):
    """Raised when a request is malformed or out of bounds. Nothing is written."""

    def __init__(self, message: str, field: Optional[str] = None, detail: Optional[str] = None):
        if field:
            message = f"Validation error for field '{field}': {message}"
        super().__init__(message, detail)
        self.field = field


class SecretNotFoundError(CendreException):
    """
    Raised when a secret is absent, already consumed, or expired.

    The three cases share one message on purpose; the id is kept off the message.
    """

    def __init__(self, detail: Optional[str] = None):
        super().__init__("Secret not found", detail)


class StorageError(CendreException):
    """Raised when the backend is unreachable, times out, or cannot complete an operation."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(f"Storage error: {message}", detail)


class InvariantViolationError(CendreException):
    """Raised when an id collides or the backend cannot honour one-time reads."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(f"Invariant violation: {message}", detail)
