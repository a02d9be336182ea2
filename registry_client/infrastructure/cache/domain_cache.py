"""Keyed resolution cache: one guarded bounded store per resolution domain.

A resolution domain is one key -> value mapping problem (schema -> id,
version -> schema, ...). Each domain owns a BoundedStore and an asyncio.Lock
(its guard). The guard is held for the whole resolution, fetch included, so
two callers with the same key never issue the same transport call at once;
a caller queued behind a failed fetch finds the store still empty and
fetches again itself.

Invalidation acquires one domain guard at a time (acquire, sweep, release)
and never holds two guards simultaneously.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterator
from enum import Enum
from typing import Any, Generic, TypeVar

from registry_client.core.constants import DEFAULT_CACHE_CAPACITY
from registry_client.domain.models import SchemaInfo, SchemaMetadata
from registry_client.infrastructure.cache.keys import (
    CacheKey,
    SubjectIdKey,
    SubjectKey,
    SubjectMetadataKey,
    SubjectSchemaKey,
    SubjectVersionKey,
)
from registry_client.infrastructure.cache.store import BoundedStore
from registry_client.shared.telemetry.tracing import add_span_event

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=CacheKey)
V = TypeVar("V")


class CacheDomain(str, Enum):
    """Resolution domains; each is cached independently."""

    SCHEMA_TO_ID = "schema_to_id"
    ID_TO_SCHEMA_INFO = "id_to_schema_info"
    INFO_TO_SCHEMA_METADATA = "info_to_schema_metadata"
    LATEST_TO_SCHEMA_METADATA = "latest_to_schema_metadata"
    SCHEMA_TO_VERSION = "schema_to_version"
    VERSION_TO_SCHEMA_METADATA = "version_to_schema_metadata"
    METADATA_TO_SCHEMA_METADATA = "metadata_to_schema_metadata"


class ResolutionDomain(Generic[K, V]):
    """Bounded store plus the guard serializing every access to it."""

    def __init__(
        self,
        name: CacheDomain,
        capacity: int = DEFAULT_CACHE_CAPACITY,
        max_age: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self.store: BoundedStore[K, V] = BoundedStore(capacity, max_age, clock)
        self._guard = asyncio.Lock()

    async def resolve(self, key: K, fetch: Callable[[], Awaitable[V]]) -> V:
        """Return the cached value for key, or fetch, store, and return it.

        The guard is held across the lookup, the fetch, and the insert.
        Exceptions from fetch propagate unchanged and nothing is stored.

        Args:
            key: Domain cache key.
            fetch: Zero-argument coroutine factory performing the transport call.

        Returns:
            Cached or freshly fetched value.
        """
        async with self._guard:
            cached = self.store.get(key)
            if cached is not None:
                logger.debug("Cache HIT: %s %s", self.name.value, key)
                add_span_event("cache.hit", {"domain": self.name.value})
                return cached
            logger.debug("Cache MISS: %s %s", self.name.value, key)
            add_span_event("cache.miss", {"domain": self.name.value})
            value = await fetch()
            if value is not None:
                self.store.set(key, value)
            return value

    async def invalidate(self, predicate: Callable[[K, V], bool]) -> int:
        """Remove every entry for which predicate(key, value) is true.

        Returns:
            Number of entries removed.
        """
        async with self._guard:
            doomed: list[K] = []

            def visit(value: V, key: K) -> None:
                if predicate(key, value):
                    doomed.append(key)

            self.store.for_each(visit)
            for key in doomed:
                self.store.delete(key)
        if doomed:
            logger.debug(
                "Cache INVALIDATE: %s (%s entries)", self.name.value, len(doomed)
            )
        return len(doomed)

    def peek(self, key: K) -> bool:
        """Return True if key is currently cached (does not touch recency)."""
        return key in self.store

    def size(self) -> int:
        return self.store.size()

    def clear(self) -> None:
        self.store.clear()


def _stored_version(value: Any) -> int | None:
    """Version recorded in a cached value, if the value carries one."""
    version = getattr(value, "version", None)
    return version if isinstance(version, int) else None


class SchemaRegistryClientCache:
    """All resolution domains of one client instance.

    Instances never share stores or guards; build one per client (or per
    test) instead of relying on process-wide state.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CACHE_CAPACITY,
        max_age: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Create empty domains.

        Args:
            capacity: Maximum entries per domain.
            max_age: Optional entry lifetime in seconds (None disables expiry).
            clock: Monotonic time source shared by all domains.
        """
        self.capacity = capacity
        self.max_age = max_age

        def domain(name: CacheDomain) -> ResolutionDomain:
            return ResolutionDomain(name, capacity, max_age, clock)

        self.schema_to_id: ResolutionDomain[SubjectSchemaKey, int] = domain(
            CacheDomain.SCHEMA_TO_ID
        )
        self.id_to_schema_info: ResolutionDomain[SubjectIdKey, SchemaInfo] = domain(
            CacheDomain.ID_TO_SCHEMA_INFO
        )
        self.info_to_schema_metadata: ResolutionDomain[
            SubjectSchemaKey, SchemaMetadata
        ] = domain(CacheDomain.INFO_TO_SCHEMA_METADATA)
        self.latest_to_schema_metadata: ResolutionDomain[
            SubjectKey, SchemaMetadata
        ] = domain(CacheDomain.LATEST_TO_SCHEMA_METADATA)
        self.schema_to_version: ResolutionDomain[SubjectSchemaKey, int] = domain(
            CacheDomain.SCHEMA_TO_VERSION
        )
        self.version_to_schema_metadata: ResolutionDomain[
            SubjectVersionKey, SchemaMetadata
        ] = domain(CacheDomain.VERSION_TO_SCHEMA_METADATA)
        self.metadata_to_schema_metadata: ResolutionDomain[
            SubjectMetadataKey, SchemaMetadata
        ] = domain(CacheDomain.METADATA_TO_SCHEMA_METADATA)

    def domains(self) -> Iterator[ResolutionDomain]:
        yield self.schema_to_id
        yield self.id_to_schema_info
        yield self.info_to_schema_metadata
        yield self.latest_to_schema_metadata
        yield self.schema_to_version
        yield self.version_to_schema_metadata
        yield self.metadata_to_schema_metadata

    def domain(self, name: CacheDomain) -> ResolutionDomain:
        """Return the domain registered under name."""
        for candidate in self.domains():
            if candidate.name is name:
                return candidate
        raise KeyError(name)

    async def invalidate_subject(self, subject: str) -> int:
        """Drop every entry whose key belongs to subject, in every domain.

        Returns:
            Total number of entries removed.
        """
        removed = 0
        for domain in self.domains():
            removed += await domain.invalidate(lambda key, _value: key.subject == subject)
        logger.info("Invalidated subject %r (%s cache entries)", subject, removed)
        return removed

    async def invalidate_version(self, subject: str, version: int) -> int:
        """Drop entries resolving to (subject, version).

        Domains keyed by schema content hold the version only in the value,
        so values are inspected there. Schema ids are global and outlive a
        deleted version, so schema_to_id is left alone.

        Returns:
            Total number of entries removed.
        """

        def stored_in_version(key: CacheKey, value: Any) -> bool:
            return key.subject == subject and _stored_version(value) == version

        versioned_schema_keys: set[SubjectSchemaKey] = set()

        def schema_version_matches(key: SubjectSchemaKey, value: int) -> bool:
            if key.subject == subject and value == version:
                versioned_schema_keys.add(key)
                return True
            return False

        removed = await self.schema_to_version.invalidate(schema_version_matches)
        removed += await self.info_to_schema_metadata.invalidate(
            lambda key, value: key in versioned_schema_keys
            or stored_in_version(key, value)
        )
        removed += await self.version_to_schema_metadata.invalidate(
            lambda key, _value: key.subject == subject and key.version == version
        )
        removed += await self.latest_to_schema_metadata.invalidate(stored_in_version)
        removed += await self.metadata_to_schema_metadata.invalidate(stored_in_version)
        removed += await self.id_to_schema_info.invalidate(stored_in_version)
        logger.info(
            "Invalidated subject %r version %s (%s cache entries)",
            subject,
            version,
            removed,
        )
        return removed

    def clear(self) -> None:
        """Empty every domain. Not guarded; call only when no resolution is running."""
        for domain in self.domains():
            domain.clear()

    def stats(self) -> dict[str, int]:
        """Entry count per domain name."""
        return {domain.name.value: domain.size() for domain in self.domains()}
