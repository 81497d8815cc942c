"""
Secret storage backends.
"""

from typing import Optional

from loguru import logger

from cendre.core.config import Settings, settings as default_settings

from .base import Secret, SecretStore
from .memory import InMemorySecretStore
from .redis_store import RedisSecretStore
from .validation import generate_id, validate_ttl, validate_blob


def build_secret_store(config: Optional[Settings] = None) -> SecretStore:
    """
    Build the configured backend. Called once at startup.

    Args:
        config: Settings to read (defaults to the global settings)

    Returns:
        An unstarted SecretStore
    """
    config = config or default_settings
    limits = {
        "max_ttl_secs": config.SECRET_TTL_MAX_SECS,
        "min_ttl_secs": config.SECRET_TTL_MIN_SECS,
        "max_blob_length": config.SECRET_MAX_BLOB_LENGTH,
    }
    backend = config.resolved_store_backend

    if backend == "redis":
        logger.info("Using RedisSecretStore as backing store")
        return RedisSecretStore(
            redis_url=config.REDIS_URL,
            key_prefix=config.REDIS_KEY_PREFIX,
            max_retries=config.REDIS_TAKE_MAX_RETRIES,
            allow_transaction_fallback=config.REDIS_ALLOW_TRANSACTION_FALLBACK,
            socket_timeout=config.REDIS_SOCKET_TIMEOUT,
            connect_timeout=config.REDIS_CONNECT_TIMEOUT,
            **limits,
        )

    logger.info("Using InMemorySecretStore; secrets are lost on restart and not shared between processes")
    return InMemorySecretStore(sweep_interval_secs=config.MEMORY_SWEEP_INTERVAL_SECS, **limits)


__all__ = [
    "Secret",
    "SecretStore",
    "InMemorySecretStore",
    "RedisSecretStore",
    "build_secret_store",
    "generate_id",
    "validate_ttl",
    "validate_blob",
]
