"""Bounded in-memory key/value store with LRU eviction and optional max age.

One store backs each resolution domain. The store is not thread- or
task-safe by itself; every access goes through the owning domain's guard.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable, Hashable
from typing import Generic, TypeVar

from registry_client.core.constants import DEFAULT_CACHE_CAPACITY

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class BoundedStore(Generic[K, V]):
    """Capacity-bounded store; least recently used entries are evicted first.

    Entries are (value, stored_at) pairs in an OrderedDict whose order is
    recency: the first item is the next eviction candidate. When max_age is
    set, an entry older than max_age seconds is treated as absent and dropped
    on the next lookup.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CACHE_CAPACITY,
        max_age: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty store.

        Args:
            capacity: Maximum number of entries kept (>= 1).
            max_age: Optional entry lifetime in seconds; None disables expiry.
            clock: Monotonic time source (injectable for tests).

        Raises:
            ValueError: capacity < 1 or max_age <= 0.
        """
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        if max_age is not None and max_age <= 0:
            raise ValueError(f"max_age must be > 0 when set, got {max_age}")
        self.capacity = capacity
        self.max_age = max_age
        self._clock = clock
        self._entries: OrderedDict[K, tuple[V, float]] = OrderedDict()

    def _is_expired(self, stored_at: float) -> bool:
        return self.max_age is not None and self._clock() - stored_at > self.max_age

    def get(self, key: K) -> V | None:
        """Return the value for key (marking it most recently used) or None."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, stored_at = entry
        if self._is_expired(stored_at):
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return value

    def set(self, key: K, value: V) -> None:
        """Insert value as most recently used.

        When the store is full, expired entries are dropped first; live entries
        are then evicted least recently used first.
        """
        self._entries.pop(key, None)
        if self.max_age is not None and len(self._entries) >= self.capacity:
            self._purge_expired()
        self._entries[key] = (value, self._clock())
        while len(self._entries) > self.capacity:
            self._entries.popitem(last=False)

    def _purge_expired(self) -> None:
        for key, (_value, stored_at) in list(self._entries.items()):
            if self._is_expired(stored_at):
                del self._entries[key]

    def delete(self, key: K) -> bool:
        """Remove key. Returns True if an entry was removed."""
        return self._entries.pop(key, None) is not None

    def for_each(self, visit: Callable[[V, K], None]) -> None:
        """Call visit(value, key) for every live entry, oldest first.

        Iterates over a snapshot, so visit may delete entries. Expired
        entries are dropped instead of visited. Recency is not updated.
        """
        for key, (value, stored_at) in list(self._entries.items()):
            if self._is_expired(stored_at):
                self._entries.pop(key, None)
                continue
            visit(value, key)

    def keys(self) -> list[K]:
        """Snapshot of stored keys, least recently used first."""
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        entry = self._entries.get(key)  # type: ignore[arg-type]
        return entry is not None and not self._is_expired(entry[1])
