"""
Validation and id generation for stored secrets.
"""

import secrets
from typing import Any, Optional

from cendre.core.config import settings
from cendre.utils.exceptions import InvalidInputError

# 16 random bytes -> 22 URL-safe characters, 128 bits of entropy
ID_NUM_BYTES = 16


def generate_id() -> str:
    """Return a fresh, unguessable, URL-safe secret id."""
    return secrets.token_urlsafe(ID_NUM_BYTES)


def validate_ttl(
    ttl_secs: Any,
    max_ttl_secs: Optional[int] = None,
    min_ttl_secs: Optional[int] = None,
) -> int:
    """
    Check a TTL against the configured bounds.

    Args:
        ttl_secs: Requested time-to-live in seconds
        max_ttl_secs: Upper bound (defaults to SECRET_TTL_MAX_SECS)
        min_ttl_secs: Lower bound (defaults to SECRET_TTL_MIN_SECS, never below 1)

    Returns:
        The validated TTL

    Raises:
        InvalidInputError: If the TTL is not an integer or is out of bounds
    """
    if max_ttl_secs is None:
        max_ttl_secs = settings.SECRET_TTL_MAX_SECS
    if min_ttl_secs is None:
        min_ttl_secs = settings.SECRET_TTL_MIN_SECS
    min_ttl_secs = max(1, min_ttl_secs)

    if isinstance(ttl_secs, bool) or not isinstance(ttl_secs, int):
        raise InvalidInputError("must be an integer number of seconds", field="ttl_secs")
    if ttl_secs < min_ttl_secs or ttl_secs > max_ttl_secs:
        raise InvalidInputError(
            f"must be between {min_ttl_secs} and {max_ttl_secs} seconds",
            field="ttl_secs",
        )
    return ttl_secs


def validate_blob(name: str, value: Any, max_length: Optional[int] = None) -> str:
    """Reject empty or oversized opaque payload fields. The value itself is never inspected further."""
    if max_length is None:
        max_length = settings.SECRET_MAX_BLOB_LENGTH

    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError("must be a non-empty string", field=name)
    if len(value) > max_length:
        raise InvalidInputError(f"must not exceed {max_length} characters", field=name)
    return value
