"""Response Cache - In-memory LRU caching for generated text.

This package provides a layered architecture for response caching:

Layers:
    - protocols: Interface contracts (CacheStore, WarmupSource)
    - repositories: Storage implementations (LRUStore, RedisHistoryRepository)
    - services: Cache engine (keys, expiry, similarity, stats, invalidation)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from response_cache.services import CacheService

    # Using class method (recommended, like Path.home())
    cache = CacheService.create()
    cache = CacheService.create(capacity=500, similarity_threshold=0.9)

    lookup = cache.get("소설 챕터 1 써줘", "gemini-2.0-flash")
    if not lookup.hit:
        cache.set("소설 챕터 1 써줘", "gemini-2.0-flash", generated_text)
    ```

For HTTP API:
    ```python
    from response_cache.api.app import app
    ```
"""

from response_cache.config import get_redis_client, settings
from response_cache.entities import CacheEntry, CacheLookup, CacheStatsSnapshot, WarmupRecord
from response_cache.protocols import CacheStore, WarmupSource
from response_cache.repositories import LRUStore, RedisHistoryRepository
from response_cache.services import (
    CacheService,
    ExpiryPolicy,
    KeyDeriver,
    SimilarityIndex,
    StatsRecorder,
)

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "CacheStore",
    "WarmupSource",
    # Services (cache engine)
    "CacheService",
    "ExpiryPolicy",
    "KeyDeriver",
    "SimilarityIndex",
    "StatsRecorder",
    # Repositories (storage)
    "LRUStore",
    "RedisHistoryRepository",
    # Entities (domain models)
    "CacheEntry",
    "CacheLookup",
    "CacheStatsSnapshot",
    "WarmupRecord",
]
