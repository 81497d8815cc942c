"""
One-time secret endpoints.
"""

from fastapi import APIRouter, Depends, Request, status
from loguru import logger

from cendre.core.rate_limit import limiter, rate_limit_disabled, secrets_limit
from cendre.core.store import get_secret_store
from cendre.schemas.secrets import SecretCreateRequest, SecretCreateResponse, SecretRevealResponse
from cendre.services.secret_store import SecretStore, validate_ttl
from cendre.utils.exceptions import SecretNotFoundError

router = APIRouter()


@router.post("/secrets", response_model=SecretCreateResponse, status_code=status.HTTP_201_CREATED)
@limiter.shared_limit(secrets_limit, scope="secrets", exempt_when=rate_limit_disabled)
async def create_secret(
    request: Request,
    payload: SecretCreateRequest,
    store: SecretStore = Depends(get_secret_store),
):
    """Store an encrypted payload that can be read exactly once before it expires."""
    ttl_secs = validate_ttl(payload.ttl_secs, store.max_ttl_secs, store.min_ttl_secs)
    secret = await store.put(payload.ciphertext, payload.iv, ttl_secs)

    logger.info(f"Created secret (ttl={secret.ttl_secs}s, store={store.name})")
    return SecretCreateResponse(id=secret.id, expires_at=secret.expires_at)


@router.get("/secret/{secret_id}", response_model=SecretRevealResponse)
@limiter.shared_limit(secrets_limit, scope="secrets", exempt_when=rate_limit_disabled)
async def read_secret(
    request: Request,
    secret_id: str,
    store: SecretStore = Depends(get_secret_store),
):
    """
    Return a secret and destroy it.

    Missing, already read, and expired secrets all produce the same 404.
    """
    if len(secret_id) > request.app.state.settings.SECRET_ID_MAX_LENGTH:
        raise SecretNotFoundError()

    secret = await store.take(secret_id)
    if secret is None:
        raise SecretNotFoundError()

    logger.info(f"Secret read and destroyed (store={store.name})")
    return SecretRevealResponse(ciphertext=secret.ciphertext, iv=secret.iv)
