"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (in-memory LRU → cost-aware store, Redis → SQL history, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from response_cache.protocols import CacheStore, WarmupSource

    # Type hints work with any implementation
    store: CacheStore = LRUStore(capacity=100, expiry=ExpiryPolicy())
    source: WarmupSource = RedisHistoryRepository.create()
    ```
"""

from .cache_store import CacheStore
from .warmup_source import WarmupSource

__all__ = [
    "CacheStore",
    "WarmupSource",
]
