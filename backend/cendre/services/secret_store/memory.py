"""
In-memory secret store for tests and single-process development.
"""

import threading
from datetime import timedelta
from typing import Dict, Optional

from loguru import logger

from cendre.core.config import settings

from .base import Secret, SecretStore


class InMemorySecretStore(SecretStore):
    """
    Dict-backed store guarded by a single lock.

    The lock covers only map mutation; nothing is awaited while it is held, so
    it is safe for both threads and tasks. Expired entries are dropped lazily on
    ``take`` and by a periodic ``sweep`` triggered from ``put``.

    Offers no durability and no cross-process guarantee.
    """

    name = "memory"

    def __init__(self, sweep_interval_secs: Optional[int] = None, **kwargs):
        super().__init__(**kwargs)
        if sweep_interval_secs is None:
            sweep_interval_secs = settings.MEMORY_SWEEP_INTERVAL_SECS
        self._sweep_interval = timedelta(seconds=sweep_interval_secs)
        self._records: Dict[str, Secret] = {}
        self._lock = threading.Lock()
        self._last_sweep = self.now()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    async def _insert(self, secret: Secret) -> None:
        self._maybe_sweep()
        with self._lock:
            self._records[secret.id] = secret

    async def take(self, secret_id: str) -> Optional[Secret]:
        now = self.now()
        with self._lock:
            secret = self._records.pop(secret_id, None)
        if secret is None or secret.is_expired_at(now):
            return None
        return secret

    async def ping(self) -> None:
        return None

    async def close(self) -> None:
        with self._lock:
            self._records.clear()

    def sweep(self) -> int:
        """
        Drop expired entries.

        Returns:
            Number of entries removed
        """
        now = self.now()
        with self._lock:
            expired = [sid for sid, s in self._records.items() if s.is_expired_at(now)]
            for sid in expired:
                del self._records[sid]
            self._last_sweep = now
        if expired:
            logger.debug(f"Swept {len(expired)} expired secret(s) from memory")
        return len(expired)

    def _maybe_sweep(self) -> None:
        if self.now() - self._last_sweep >= self._sweep_interval:
            self.sweep()
