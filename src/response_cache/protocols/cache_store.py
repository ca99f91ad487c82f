"""Cache storage protocol.

Defines the interface for a bounded, recency-ordered key/entry store.
The in-memory ``LRUStore`` is the default implementation; anything with
the same methods (a cost-aware store, an instrumented test double, ...)
can be handed to ``CacheService`` instead.
"""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from response_cache.entities import CacheEntry


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Similar to Go's interface pattern - any type that implements these
    methods satisfies the protocol, no explicit inheritance needed.

    Example:
        ```python
        from response_cache.protocols import CacheStore

        store: CacheStore = LRUStore(capacity=100, expiry=ExpiryPolicy())
        ```
    """

    @property
    def capacity(self) -> int:
        """Maximum number of entries held at once."""
        ...

    def get(self, key: str) -> CacheEntry | None:
        """Return a live entry and mark it most recently used.

        Args:
            key: The cache key

        Returns:
            The entry, or None when absent or expired (expired entries are removed)
        """
        ...

    def peek(self, key: str) -> CacheEntry | None:
        """Return an entry without touching recency, counters or expiry."""
        ...

    def set(self, key: str, entry: CacheEntry) -> CacheEntry | None:
        """Insert or replace an entry as the most recently used one.

        Args:
            key: The cache key
            entry: The entry to store

        Returns:
            The entry evicted to stay within capacity, if any
        """
        ...

    def remove(self, key: str) -> bool:
        """Remove an entry.

        Args:
            key: The cache key

        Returns:
            True if an entry was removed, False otherwise
        """
        ...

    def clear(self) -> int:
        """Remove every entry.

        Returns:
            Number of entries removed
        """
        ...

    def keys(self) -> list[str]:
        """Keys ordered from most to least recently used."""
        ...

    def values(self) -> list[CacheEntry]:
        """Entries ordered from most to least recently used."""
        ...

    def __len__(self) -> int: ...

    def __contains__(self, key: object) -> bool: ...

    def __iter__(self) -> Iterator[str]: ...
