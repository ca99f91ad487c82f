"""Repository layer for storage.

This layer holds the concrete stores behind protocol-based interfaces:
- LRUStore: the in-memory, capacity-bounded entry store (CacheStore)
- RedisHistoryRepository: durable response history used to warm the cache (WarmupSource)

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from response_cache.protocols import CacheStore, WarmupSource

from .lru_store import LRUStore
from .redis_history import RedisHistoryRepository

__all__ = [
    "CacheStore",
    "WarmupSource",
    "LRUStore",
    "RedisHistoryRepository",
]
