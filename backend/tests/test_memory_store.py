"""
Tests for the in-memory secret store.
"""

import asyncio
import threading

import pytest

from cendre.services.secret_store import InMemorySecretStore
from cendre.utils.exceptions import InvalidInputError


@pytest.mark.asyncio
async def test_put_then_take_returns_original_payload(memory_store):
    created = await memory_store.put("ciphertext-value", "iv-value", 60)

    fetched = await memory_store.take(created.id)

    assert fetched is not None
    assert fetched.id == created.id
    assert fetched.ciphertext == "ciphertext-value"
    assert fetched.iv == "iv-value"
    assert fetched.ttl_secs == 60


@pytest.mark.asyncio
async def test_put_sets_expiry_from_ttl(clock):
    store = InMemorySecretStore(clock=clock)

    created = await store.put("c", "i", 120)

    assert created.created_at == clock.current
    assert (created.expires_at - created.created_at).total_seconds() == 120


@pytest.mark.asyncio
async def test_second_take_returns_none(memory_store):
    created = await memory_store.put("c", "i", 3600)

    assert await memory_store.take(created.id) is not None
    assert await memory_store.take(created.id) is None


@pytest.mark.asyncio
async def test_take_unknown_id_returns_none(memory_store):
    assert await memory_store.take("00000000-0000-0000-0000-000000000000") is None


@pytest.mark.asyncio
async def test_take_after_ttl_returns_none_and_purges_entry(clock):
    store = InMemorySecretStore(clock=clock)
    created = await store.put("c", "i", 30)

    clock.advance(30)

    assert await store.take(created.id) is None
    assert len(store) == 0


@pytest.mark.asyncio
async def test_take_just_before_expiry_succeeds(clock):
    store = InMemorySecretStore(clock=clock)
    created = await store.put("c", "i", 30)

    clock.advance(29)

    assert await store.take(created.id) is not None


@pytest.mark.asyncio
async def test_secret_expires_in_real_time(memory_store):
    created = await memory_store.put("c", "i", 1)

    await asyncio.sleep(1.2)

    assert await memory_store.take(created.id) is None


@pytest.mark.asyncio
@pytest.mark.parametrize("ttl", [0, -5, 86401])
async def test_put_with_invalid_ttl_writes_nothing(memory_store, ttl):
    with pytest.raises(InvalidInputError):
        await memory_store.put("c", "i", ttl)

    assert len(memory_store) == 0


@pytest.mark.asyncio
async def test_put_with_empty_payload_writes_nothing(memory_store):
    with pytest.raises(InvalidInputError):
        await memory_store.put("", "i", 60)

    assert len(memory_store) == 0


@pytest.mark.asyncio
async def test_concurrent_tasks_take_exactly_once(memory_store):
    created = await memory_store.put("c", "i", 60)

    results = await asyncio.gather(*(memory_store.take(created.id) for _ in range(50)))

    assert sum(1 for r in results if r is not None) == 1


def test_concurrent_threads_take_exactly_once(memory_store):
    created = asyncio.run(memory_store.put("c", "i", 60))
    barrier = threading.Barrier(16)
    results = []
    results_lock = threading.Lock()

    def reader():
        barrier.wait()
        result = asyncio.run(memory_store.take(created.id))
        with results_lock:
            results.append(result)

    threads = [threading.Thread(target=reader) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 16
    assert sum(1 for r in results if r is not None) == 1


@pytest.mark.asyncio
async def test_sweep_removes_only_expired_entries(clock):
    store = InMemorySecretStore(clock=clock, sweep_interval_secs=3600)
    short = await store.put("c", "i", 10)
    long = await store.put("c", "i", 100)

    clock.advance(50)

    assert store.sweep() == 1
    assert len(store) == 1
    assert await store.take(short.id) is None
    assert await store.take(long.id) is not None


@pytest.mark.asyncio
async def test_put_triggers_lazy_sweep_after_interval(clock):
    store = InMemorySecretStore(clock=clock, sweep_interval_secs=60)
    await store.put("c", "i", 10)

    clock.advance(61)
    await store.put("c", "i", 10)

    # The expired first entry was reclaimed, only the fresh one remains
    assert len(store) == 1


@pytest.mark.asyncio
async def test_close_discards_all_secrets(memory_store):
    created = await memory_store.put("c", "i", 60)

    await memory_store.close()

    assert await memory_store.take(created.id) is None

