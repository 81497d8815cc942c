"""
Tests for rate limiting on the secret endpoints.
"""

from fastapi.testclient import TestClient

from main import create_app
from cendre.core.config import Settings, settings

from factories import make_payload


def test_excessive_requests_eventually_receive_429(client: TestClient):
    """A burst from one client is cut off with the common error body."""
    rate_limited = None
    for _ in range(100):
        response = client.post("/api/secrets", json=make_payload())
        if response.status_code == 429:
            rate_limited = response
            break
        assert response.status_code == 201

    assert rate_limited is not None, f"expected a 429 within 100 requests at {settings.SECRETS_RATE_LIMIT}"
    body = rate_limited.json()
    assert body["error"] == "RateLimitExceeded"
    assert body["detail"] == "too many requests"
    assert rate_limited.headers["X-Content-Type-Options"] == "nosniff"


def test_create_and_read_share_one_budget(client: TestClient):
    limit = int(settings.SECRETS_RATE_LIMIT.split("/")[0])
    for _ in range(limit):
        client.get("/api/secret/missing")

    response = client.post("/api/secrets", json=make_payload())

    assert response.status_code == 429


def test_app_built_with_rate_limiting_disabled_never_returns_429(memory_store):
    config = Settings(_env_file=None, RATE_LIMIT_ENABLED=False)
    with TestClient(create_app(config=config, store=memory_store)) as unlimited_client:
        statuses = {
            unlimited_client.post("/api/secrets", json=make_payload()).status_code
            for _ in range(70)
        }

    assert statuses == {201}


def test_rate_limit_comes_from_app_settings(memory_store):
    config = Settings(_env_file=None, SECRETS_RATE_LIMIT="2/minute")
    with TestClient(create_app(config=config, store=memory_store)) as strict_client:
        responses = [strict_client.post("/api/secrets", json=make_payload()) for _ in range(3)]

    assert [r.status_code for r in responses] == [201, 201, 429]
