"""
Utility modules for the Cendre secret service.
"""

from .exceptions import (
    CendreException,
    InvalidInputError,
    SecretNotFoundError,
    StorageError,
    InvariantViolationError,
)

__all__ = [
    "CendreException",
    "InvalidInputError",
    "SecretNotFoundError",
    "StorageError",
    "InvariantViolationError",
]
