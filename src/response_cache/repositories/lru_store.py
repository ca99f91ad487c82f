"""In-memory LRU implementation of CacheStore.

A dict maps keys to nodes of a doubly linked list ordered from the most
recently used entry (head) to the least recently used one (tail), so
lookups, promotions and evictions are all O(1).
"""

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

from response_cache.entities import CacheEntry

if TYPE_CHECKING:
    from response_cache.services.expiry_policy import ExpiryPolicy

logger = logging.getLogger(__name__)


class _Node:
    __slots__ = ("key", "value", "prev", "next")

    def __init__(self, key: str, value: CacheEntry) -> None:
        self.key = key
        self.value = value
        self.prev: _Node | None = None
        self.next: _Node | None = None


class LRUStore:
    """Capacity-bounded store with least-recently-used eviction.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    The store is not synchronized; ``CacheService`` serializes access.
    """

    def __init__(self, capacity: int, expiry: "ExpiryPolicy") -> None:
        """Initialize the store.

        Args:
            capacity: Maximum number of entries. Values below 1 are coerced to 1.
            expiry: Policy consulted on every ``get``.
        """
        if capacity < 1:
            logger.warning(
                "Cache capacity must be positive, using 1",
                extra={"requested_capacity": capacity},
            )
            capacity = 1
        self._capacity = capacity
        self._expiry = expiry
        self._map: dict[str, _Node] = {}
        self._head: _Node | None = None
        self._tail: _Node | None = None

    @classmethod
    def create(cls, capacity: int, expiry: "ExpiryPolicy") -> "LRUStore":
        """Factory method mirroring the other repositories."""
        return cls(capacity=capacity, expiry=expiry)

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._map)

    def __contains__(self, key: object) -> bool:
        return key in self._map

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    # Linked list plumbing

    def _unlink(self, node: _Node) -> None:
        if node.prev is not None:
            node.prev.next = node.next
        else:
            self._head = node.next
        if node.next is not None:
            node.next.prev = node.prev
        else:
            self._tail = node.prev
        node.prev = None
        node.next = None

    def _push_head(self, node: _Node) -> None:
        node.prev = None
        node.next = self._head
        if self._head is not None:
            self._head.prev = node
        self._head = node
        if self._tail is None:
            self._tail = node

    def _move_to_head(self, node: _Node) -> None:
        if node is self._head:
            return
        self._unlink(node)
        self._push_head(node)

    # Store operations

    def get(self, key: str) -> CacheEntry | None:
        """Return a live entry and mark it most recently used.

        Expired entries are removed and reported as absent.

        Args:
            key: The cache key

        Returns:
            The entry, or None
        """
        node = self._map.get(key)
        if node is None:
            return None

        now = self._expiry.now()
        if self._expiry.is_expired(node.value, now):
            self._remove_node(node)
            logger.debug("Cache entry expired", extra={"cache_key": key})
            return None

        self._move_to_head(node)
        entry = node.value
        entry.access_count += 1
        entry.last_accessed_at = now
        return entry

    def peek(self, key: str) -> CacheEntry | None:
        """Return an entry without side effects."""
        node = self._map.get(key)
        return node.value if node is not None else None

    def set(self, key: str, entry: CacheEntry) -> CacheEntry | None:
        """Insert or replace an entry as the most recently used one.

        Args:
            key: The cache key
            entry: The entry to store

        Returns:
            The entry evicted from the tail, if the insert overflowed capacity
        """
        node = self._map.get(key)
        if node is not None:
            node.value = entry
            self._move_to_head(node)
            return None

        node = _Node(key, entry)
        self._push_head(node)
        self._map[key] = node

        # capacity >= 1, so an overflow always leaves a tail distinct from the new head
        evicted = self._tail
        if len(self._map) > self._capacity and evicted is not None:
            self._remove_node(evicted)
            logger.debug("Cache entry evicted", extra={"cache_key": evicted.key})
            return evicted.value
        return None

    def _remove_node(self, node: _Node) -> None:
        self._unlink(node)
        del self._map[node.key]

    def remove(self, key: str) -> bool:
        """Remove an entry; no-op when absent.

        Args:
            key: The cache key

        Returns:
            True if an entry was removed, False otherwise
        """
        node = self._map.get(key)
        if node is None:
            return False
        self._remove_node(node)
        return True

    def clear(self) -> int:
        """Remove every entry.

        Returns:
            Number of entries removed
        """
        count = len(self._map)
        self._map.clear()
        self._head = None
        self._tail = None
        return count

    def _walk(self) -> Iterator[_Node]:
        node = self._head
        while node is not None:
            yield node
            node = node.next

    def keys(self) -> list[str]:
        """Keys ordered from most to least recently used."""
        return [node.key for node in self._walk()]

    def values(self) -> list[CacheEntry]:
        """Entries ordered from most to least recently used."""
        return [node.value for node in self._walk()]
