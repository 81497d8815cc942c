"""
Redis-backed secret store.

Each secret is one JSON value under ``{prefix}{id}`` with the native key TTL set
to ``ttl_secs``, so expiry needs no background job. One-time reads rely on
``GETDEL``; servers older than Redis 6.2 fall back to an optimistic
WATCH/MULTI/EXEC loop. A plain GET followed by a separate DEL is never used.
"""

import json
from datetime import datetime
from typing import Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError, ResponseError, WatchError
from loguru import logger

from cendre.core.config import settings
from cendre.utils.exceptions import InvariantViolationError, StorageError

from .base import Secret, SecretStore


class RedisSecretStore(SecretStore):
    """Durable, multi-instance secret store on top of Redis."""

    name = "redis"

    def __init__(
        self,
        redis_url: Optional[str] = None,
        client: Optional[aioredis.Redis] = None,
        key_prefix: Optional[str] = None,
        max_retries: Optional[int] = None,
        allow_transaction_fallback: Optional[bool] = None,
        socket_timeout: Optional[float] = None,
        connect_timeout: Optional[float] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._redis_url = redis_url or settings.REDIS_URL
        self._client = client
        self._owns_client = client is None
        self.key_prefix = key_prefix if key_prefix is not None else settings.REDIS_KEY_PREFIX
        self.max_retries = max_retries or settings.REDIS_TAKE_MAX_RETRIES
        self.allow_transaction_fallback = (
            settings.REDIS_ALLOW_TRANSACTION_FALLBACK
            if allow_transaction_fallback is None
            else allow_transaction_fallback
        )
        self.socket_timeout = socket_timeout or settings.REDIS_SOCKET_TIMEOUT
        self.connect_timeout = connect_timeout or settings.REDIS_CONNECT_TIMEOUT
        # None until the first take tells us whether the server knows GETDEL
        self._getdel_supported: Optional[bool] = None

    def _get_client(self) -> aioredis.Redis:
        """Get or create the Redis client."""
        if self._client is None:
            if not self._redis_url:
                raise StorageError("REDIS_URL is not configured")
            self._client = aioredis.from_url(
                self._redis_url,
                socket_timeout=self.socket_timeout,
                socket_connect_timeout=self.connect_timeout,
                decode_responses=False,
            )
        return self._client

    def make_key(self, secret_id: str) -> str:
        return f"{self.key_prefix}{secret_id}"

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    @staticmethod
    def _encode(secret: Secret) -> str:
        return json.dumps({
            "ciphertext": secret.ciphertext,
            "iv": secret.iv,
            "created_at": secret.created_at.isoformat(),
            "ttl_secs": secret.ttl_secs,
        })

    @staticmethod
    def _decode(secret_id: str, raw) -> Secret:
        try:
            data = json.loads(raw)
            return Secret(
                id=secret_id,
                ciphertext=data["ciphertext"],
                iv=data["iv"],
                created_at=datetime.fromisoformat(data["created_at"]),
                ttl_secs=int(data["ttl_secs"]),
            )
        except (ValueError, KeyError, TypeError) as e:
            raise StorageError("stored secret could not be decoded") from e

    # ------------------------------------------------------------------
    # SecretStore API
    # ------------------------------------------------------------------

    async def _insert(self, secret: Secret) -> None:
        client = self._get_client()
        try:
            created = await client.set(
                self.make_key(secret.id),
                self._encode(secret),
                ex=secret.ttl_secs,
                nx=True,
            )
        except (RedisError, OSError) as e:
            raise StorageError("failed to write secret") from e

        if not created:
            raise InvariantViolationError("generated secret id already exists")

    async def take(self, secret_id: str) -> Optional[Secret]:
        key = self.make_key(secret_id)

        if self._getdel_supported is not False:
            try:
                raw = await self._get_client().getdel(key)
                self._getdel_supported = True
            except ResponseError as e:
                if "unknown command" not in str(e).lower():
                    raise StorageError("atomic read failed") from e
                self._getdel_supported = False
                logger.warning(
                    "Redis server does not support GETDEL; "
                    + ("using WATCH/MULTI fallback" if self.allow_transaction_fallback else "refusing reads")
                )
            except (RedisError, OSError) as e:
                raise StorageError("atomic read failed") from e
            else:
                return self._decode(secret_id, raw) if raw is not None else None

        if not self.allow_transaction_fallback:
            raise InvariantViolationError(
                "backend offers no atomic fetch-and-delete and the transaction fallback is disabled"
            )
        raw = await self._take_with_transaction(key)
        return self._decode(secret_id, raw) if raw is not None else None

    async def _take_with_transaction(self, key: str):
        """
        Optimistic fetch-and-delete: WATCH the key, read it, delete it in MULTI/EXEC.

        EXEC aborts when another client touched the key after WATCH; the loop then
        starts over until it either performs the delete itself or sees the key gone.
        """
        client = self._get_client()
        try:
            async with client.pipeline(transaction=True) as pipe:
                for attempt in range(self.max_retries):
                    try:
                        await pipe.watch(key)
                        raw = await pipe.get(key)
                        if raw is None:
                            await pipe.reset()
                            return None
                        pipe.multi()
                        pipe.delete(key)
                        deleted, = await pipe.execute()
                        # Key expired between GET and EXEC
                        return raw if deleted else None
                    except WatchError:
                        logger.debug(f"Secret transaction conflict, retry {attempt + 1}/{self.max_retries}")
                        continue
        except (RedisError, OSError) as e:
            raise StorageError("atomic read transaction failed") from e

        raise StorageError(f"atomic read aborted after {self.max_retries} conflicting attempts")

    async def ping(self) -> None:
        try:
            await self._get_client().ping()
        except (RedisError, OSError) as e:
            raise StorageError("redis is unreachable") from e

    async def start(self) -> None:
        await self.ping()
        logger.info(f"Connected to Redis secret store (prefix={self.key_prefix!r})")

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
