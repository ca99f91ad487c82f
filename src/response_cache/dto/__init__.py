"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import InvalidateTagsRequest, LookupCacheRequest, StoreCacheRequest, ThresholdRequest
from .responses import (
    CacheInvalidateResponse,
    CacheLookupResponse,
    CacheStatsResponse,
    CacheStoreResponse,
    HealthCheckResponse,
)

__all__ = [
    "InvalidateTagsRequest",
    "LookupCacheRequest",
    "StoreCacheRequest",
    "ThresholdRequest",
    "CacheLookupResponse",
    "CacheStoreResponse",
    "CacheInvalidateResponse",
    "CacheStatsResponse",
    "HealthCheckResponse",
]
