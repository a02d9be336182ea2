"""Tests for ResolutionDomain guards and SchemaRegistryClientCache sweeps."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from registry_client.domain.exceptions import TransportError
from registry_client.domain.models import SchemaMetadata
from registry_client.infrastructure.cache.domain_cache import (
    CacheDomain,
    ResolutionDomain,
    SchemaRegistryClientCache,
)
from registry_client.infrastructure.cache.keys import (
    id_key,
    latest_key,
    schema_key,
    version_key,
)


async def _let_tasks_queue() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_resolve_miss_then_hit() -> None:
    """Second resolve for the same key returns the cached value without fetching."""
    domain: ResolutionDomain = ResolutionDomain(CacheDomain.SCHEMA_TO_ID)
    fetch = AsyncMock(return_value=7)
    key = schema_key("orders", {"schema": "A"})

    assert await domain.resolve(key, fetch) == 7
    assert await domain.resolve(key, fetch) == 7
    assert fetch.await_count == 1
    assert domain.size() == 1


@pytest.mark.asyncio
async def test_resolve_error_is_not_cached() -> None:
    """A failed fetch leaves the key absent; the next resolve fetches again."""
    domain: ResolutionDomain = ResolutionDomain(CacheDomain.SCHEMA_TO_ID)
    key = schema_key("orders", {"schema": "A"})
    fetch = AsyncMock(side_effect=[TransportError(500, {"message": "boom"}), 7])

    with pytest.raises(TransportError) as exc_info:
        await domain.resolve(key, fetch)
    assert exc_info.value.status == 500
    assert not domain.peek(key)

    assert await domain.resolve(key, fetch) == 7
    assert fetch.await_count == 2


@pytest.mark.asyncio
async def test_resolve_does_not_cache_none() -> None:
    domain: ResolutionDomain = ResolutionDomain(CacheDomain.LATEST_TO_SCHEMA_METADATA)
    key = latest_key("orders")
    fetch = AsyncMock(return_value=None)
    assert await domain.resolve(key, fetch) is None
    assert await domain.resolve(key, fetch) is None
    assert fetch.await_count == 2


@pytest.mark.asyncio
async def test_concurrent_same_key_single_fetch() -> None:
    """Five concurrent callers for one key cause exactly one fetch."""
    domain: ResolutionDomain = ResolutionDomain(CacheDomain.SCHEMA_TO_ID)
    key = schema_key("orders", {"schema": "A"})
    release = asyncio.Event()
    calls = 0

    async def fetch() -> int:
        nonlocal calls
        calls += 1
        await release.wait()
        return 7

    tasks = [asyncio.create_task(domain.resolve(key, fetch)) for _ in range(5)]
    await _let_tasks_queue()
    assert calls == 1
    release.set()
    assert await asyncio.gather(*tasks) == [7] * 5
    assert calls == 1


@pytest.mark.asyncio
async def test_waiters_retry_after_failed_fetch() -> None:
    """Callers queued behind a failure each fetch again when they get the guard."""
    domain: ResolutionDomain = ResolutionDomain(CacheDomain.SCHEMA_TO_ID)
    key = schema_key("orders", {"schema": "A"})
    release = asyncio.Event()
    calls = 0

    async def failing_fetch() -> int:
        nonlocal calls
        calls += 1
        await release.wait()
        raise TransportError(503, "unavailable")

    tasks = [asyncio.create_task(domain.resolve(key, failing_fetch)) for _ in range(3)]
    await _let_tasks_queue()
    release.set()
    results = await asyncio.gather(*tasks, return_exceptions=True)

    assert all(isinstance(r, TransportError) for r in results)
    assert calls == 3
    assert domain.size() == 0


@pytest.mark.asyncio
async def test_waiter_populates_after_first_failure() -> None:
    """First caller fails, second succeeds and caches, third hits the cache."""
    domain: ResolutionDomain = ResolutionDomain(CacheDomain.SCHEMA_TO_ID)
    key = schema_key("orders", {"schema": "A"})
    release = asyncio.Event()
    calls = 0

    async def flaky_fetch() -> int:
        nonlocal calls
        calls += 1
        if calls == 1:
            await release.wait()
            raise TransportError(500, "boom")
        return 7

    tasks = [asyncio.create_task(domain.resolve(key, flaky_fetch)) for _ in range(3)]
    await _let_tasks_queue()
    release.set()
    results = await asyncio.gather(*tasks, return_exceptions=True)

    assert isinstance(results[0], TransportError)
    assert results[1:] == [7, 7]
    assert calls == 2


@pytest.mark.asyncio
async def test_domains_do_not_block_each_other() -> None:
    """A slow fetch in one domain does not hold up another domain."""
    cache = SchemaRegistryClientCache()
    release = asyncio.Event()

    async def slow_fetch() -> int:
        await release.wait()
        return 7

    slow = asyncio.create_task(
        cache.schema_to_id.resolve(schema_key("orders", {"schema": "A"}), slow_fetch)
    )
    await _let_tasks_queue()
    latest = SchemaMetadata(id=7, subject="orders", version=1)
    result = await asyncio.wait_for(
        cache.latest_to_schema_metadata.resolve(
            latest_key("orders"), AsyncMock(return_value=latest)
        ),
        timeout=1,
    )
    assert result is latest
    assert not slow.done()
    release.set()
    assert await slow == 7


@pytest.mark.asyncio
async def test_invalidate_subject_sweeps_every_domain() -> None:
    cache = SchemaRegistryClientCache()
    meta = SchemaMetadata(id=7, subject="orders", version=1)
    for subject in ("orders", "payments"):
        cache.schema_to_id.store.set(schema_key(subject, {"schema": "A"}), 7)
        cache.id_to_schema_info.store.set(id_key(subject, 7), meta)
        cache.info_to_schema_metadata.store.set(schema_key(subject, {"schema": "A"}), meta)
        cache.latest_to_schema_metadata.store.set(latest_key(subject), meta)
        cache.schema_to_version.store.set(schema_key(subject, {"schema": "A"}), 1)
        cache.version_to_schema_metadata.store.set(version_key(subject, 1), meta)

    removed = await cache.invalidate_subject("orders")

    assert removed == 6
    assert all(
        key.subject == "payments"
        for domain in cache.domains()
        for key in domain.store.keys()
    )
    assert sum(cache.stats().values()) == 6


@pytest.mark.asyncio
async def test_invalidate_waits_for_in_flight_resolution() -> None:
    """The sweep takes the domain guard, so it cannot interleave with a populate."""
    cache = SchemaRegistryClientCache()
    key = schema_key("orders", {"schema": "A"})
    release = asyncio.Event()

    async def slow_fetch() -> int:
        await release.wait()
        return 7

    resolving = asyncio.create_task(cache.schema_to_id.resolve(key, slow_fetch))
    await _let_tasks_queue()
    sweeping = asyncio.create_task(cache.invalidate_subject("orders"))
    await _let_tasks_queue()
    assert not sweeping.done()

    release.set()
    assert await resolving == 7
    assert await sweeping == 1
    assert not cache.schema_to_id.peek(key)


def test_domain_lookup_by_name() -> None:
    cache = SchemaRegistryClientCache(capacity=3)
    domain = cache.domain(CacheDomain.VERSION_TO_SCHEMA_METADATA)
    assert domain is cache.version_to_schema_metadata
    assert domain.store.capacity == 3
    assert len(list(cache.domains())) == 7


def test_separate_caches_are_independent() -> None:
    first = SchemaRegistryClientCache()
    second = SchemaRegistryClientCache()
    first.schema_to_id.store.set(schema_key("orders", {"schema": "A"}), 7)
    assert second.schema_to_id.size() == 0
