"""Response DTOs for API endpoints."""

from typing import Literal

from pydantic import BaseModel, Field


class CacheLookupResponse(BaseModel):
    """Response DTO for cache lookup operation."""

    hit: bool = Field(..., description="Whether a cached response was found")
    response: str | None = Field(None, description="The cached response on a hit")
    source: Literal["exact", "similarity"] | None = Field(
        None,
        description="'exact' for a key match, 'similarity' for a near-duplicate prompt",
    )
    key: str | None = Field(None, description="Key of the entry that served the hit")
    lookup_time_ms: float = Field(..., description="Time taken for the cache lookup in milliseconds")


class CacheStoreResponse(BaseModel):
    """Response DTO for cache store operation."""

    success: bool = Field(..., description="Whether the operation succeeded")
    key: str = Field(..., description="The cache key for the entry")
    message: str = Field(..., description="Human-readable status message")


class CacheInvalidateResponse(BaseModel):
    """Response DTO for invalidation and cleanup operations."""

    success: bool = Field(..., description="Whether the operation succeeded")
    removed: int = Field(..., description="Number of entries removed", ge=0)
    message: str = Field(..., description="Human-readable status message")


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    hits: int = Field(..., ge=0)
    misses: int = Field(..., ge=0)
    memory_hits: int = Field(..., description="Hits served by the exact key", ge=0)
    similarity_hits: int = Field(..., description="Hits served by a near-duplicate prompt", ge=0)
    total_saved: int = Field(..., description="Sum of token counts of all hits", ge=0)
    total_requests: int = Field(..., ge=0)
    hit_rate: float = Field(..., description="hits / total_requests (0 without requests)", ge=0.0, le=1.0)
    size: int = Field(..., description="Current number of cached entries", ge=0)
    capacity: int = Field(..., description="Maximum number of cached entries", ge=1)
    threshold: float = Field(..., description="Current similarity threshold", ge=0.0, le=1.0)
    ttl_seconds: float = Field(..., description="Default time-to-live for cache entries in seconds")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'degraded'")
    cache_healthy: bool = Field(..., description="Whether the in-memory cache is serving")
    history_healthy: bool | None = Field(
        None,
        description="Whether the Redis history is reachable (None when persistence is off)",
    )
