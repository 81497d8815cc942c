"""
Secret store lifecycle and request dependency.
"""

from fastapi import FastAPI, Request
from loguru import logger

from cendre.services.secret_store import SecretStore
from cendre.utils.exceptions import StorageError


async def open_store(app: FastAPI, store: SecretStore) -> None:
    """Start the store and attach it to the application state."""
    await store.start()
    app.state.secret_store = store
    logger.info(f"Secret store '{store.name}' ready")


async def close_store(app: FastAPI) -> None:
    """Close the store attached to the application, if any."""
    store = getattr(app.state, "secret_store", None)
    if store is None:
        return
    await store.close()
    app.state.secret_store = None
    logger.info(f"Secret store '{store.name}' closed")


def get_secret_store(request: Request) -> SecretStore:
    """
    Dependency returning the store built at startup.

    Raises:
        StorageError: If the application lifespan has not opened a store
    """
    store = getattr(request.app.state, "secret_store", None)
    if store is None:
        raise StorageError("secret store not initialized")
    return store
