"""
Base interface for secret storage backends.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from cendre.core.config import settings

from .validation import generate_id, validate_blob, validate_ttl

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Secret:
    """An opaque encrypted payload. Immutable once stored."""

    id: str
    ciphertext: str = field(repr=False)
    iv: str = field(repr=False)
    created_at: datetime
    ttl_secs: int

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(seconds=self.ttl_secs)

    def is_expired_at(self, now: datetime) -> bool:
        return now >= self.expires_at


class SecretStore(ABC):
    """
    Abstract base class for secret storage backends.

    Every backend honours the same contract:

    - ``put`` validates input, assigns a fresh id and writes an immutable record
      that expires after ``ttl_secs``.
    - ``take`` returns a record at most once. For any number of concurrent
      callers asking for the same id exactly one receives the secret, the
      rest receive ``None``. Expired records also yield ``None``.

    Backend failures surface as ``StorageError``; ``None`` only ever means the
    secret is absent, consumed or expired.
    """

    name: str = "base"

    def __init__(
        self,
        max_ttl_secs: Optional[int] = None,
        min_ttl_secs: Optional[int] = None,
        max_blob_length: Optional[int] = None,
        clock: Optional[Clock] = None,
    ):
        self.max_ttl_secs = max_ttl_secs if max_ttl_secs is not None else settings.SECRET_TTL_MAX_SECS
        self.min_ttl_secs = min_ttl_secs if min_ttl_secs is not None else settings.SECRET_TTL_MIN_SECS
        self.max_blob_length = (
            max_blob_length if max_blob_length is not None else settings.SECRET_MAX_BLOB_LENGTH
        )
        self._clock = clock or utc_now

    def now(self) -> datetime:
        return self._clock()

    async def put(self, ciphertext: str, iv: str, ttl_secs: int) -> Secret:
        """
        Validate and persist a new secret.

        Args:
            ciphertext: Opaque encrypted payload
            iv: Opaque initialisation vector
            ttl_secs: Lifetime in seconds

        Returns:
            The stored Secret, carrying its id and expires_at

        Raises:
            InvalidInputError: Bad TTL or empty payload; nothing is written
            StorageError: Backend failure; the write outcome is unknown
        """
        ttl_secs = validate_ttl(ttl_secs, self.max_ttl_secs, self.min_ttl_secs)
        validate_blob("ciphertext", ciphertext, self.max_blob_length)
        validate_blob("iv", iv, self.max_blob_length)

        secret = Secret(
            id=generate_id(),
            ciphertext=ciphertext,
            iv=iv,
            created_at=self.now(),
            ttl_secs=ttl_secs,
        )
        await self._insert(secret)
        return secret

    @abstractmethod
    async def _insert(self, secret: Secret) -> None:
        """Write a freshly built record with its expiry attached."""
        pass

    @abstractmethod
    async def take(self, secret_id: str) -> Optional[Secret]:
        """
        Atomically fetch and delete a secret.

        Args:
            secret_id: Id returned by ``put``

        Returns:
            The Secret for exactly one caller, otherwise None
        """
        pass

    @abstractmethod
    async def ping(self) -> None:
        """Raise StorageError if the backend cannot be reached."""
        pass

    async def start(self) -> None:
        """Acquire backend resources. Called once at application startup."""
        return None

    async def close(self) -> None:
        """Release backend resources. Called once at application shutdown."""
        return None
