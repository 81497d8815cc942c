"""
Pytest configuration and fixtures for backend tests.
"""

import pytest
from fastapi.testclient import TestClient

from main import create_app
from cendre.core.rate_limit import limiter
from cendre.services.secret_store import InMemorySecretStore, RedisSecretStore

from factories import FakeClock, FakeRedis


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Each test starts with a fresh rate limit budget."""
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_store() -> InMemorySecretStore:
    """In-memory store with deterministic bounds."""
    return InMemorySecretStore(max_ttl_secs=86400, min_ttl_secs=1, max_blob_length=1024)


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def redis_store(fake_redis: FakeRedis) -> RedisSecretStore:
    """Redis store wired to an in-process fake client."""
    return RedisSecretStore(
        client=fake_redis,
        key_prefix="test-secret:",
        max_retries=5,
        allow_transaction_fallback=True,
        max_ttl_secs=86400,
        min_ttl_secs=1,
        max_blob_length=1024,
    )


@pytest.fixture
def client(memory_store: InMemorySecretStore) -> TestClient:
    """Create a test client backed by the in-memory store."""
    with TestClient(create_app(store=memory_store)) as test_client:
        yield test_client
