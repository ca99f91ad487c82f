"""Service layer for business logic.

This layer contains the core cache engine. Services depend on protocols
(interfaces), not concrete implementations, making them testable and
flexible.

Architecture:
    Handler -> Service -> Store
    (HTTP)  -> (Business) -> (In-memory LRU)

Usage:
    ```python
    from response_cache.services import CacheService

    # Using factory method (recommended)
    cache = CacheService.create()
    cache = CacheService.create(capacity=500, similarity_threshold=0.9)

    # Or manual creation
    cache = CacheService(store=store, key_deriver=KeyDeriver(), expiry=expiry,
                         similarity=SimilarityIndex())
    ```
"""

from .cache_service import CacheService
from .expiry_policy import ExpiryPolicy
from .key_deriver import KeyDeriver, fnv1a_32
from .similarity_index import SimilarityIndex, jaccard
from .stats_recorder import StatsRecorder

__all__ = [
    "CacheService",
    "ExpiryPolicy",
    "KeyDeriver",
    "SimilarityIndex",
    "StatsRecorder",
    "fnv1a_32",
    "jaccard",
]
