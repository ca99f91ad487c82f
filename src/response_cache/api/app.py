from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from response_cache.api.dependencies import HandlerDep, ServiceDep, lifespan
from response_cache.config import settings
from response_cache.dto import (
    CacheInvalidateResponse,
    CacheLookupResponse,
    CacheStatsResponse,
    CacheStoreResponse,
    HealthCheckResponse,
    InvalidateTagsRequest,
    LookupCacheRequest,
    StoreCacheRequest,
    ThresholdRequest,
)

app = FastAPI(
    title="Response Cache API",
    description="In-memory LRU cache for generated text with near-duplicate prompt matching",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Response Cache API",
        "version": "0.1.0",
        "description": "In-memory LRU cache for generated text with near-duplicate prompt matching",
        "endpoints": {
            "cache": "/cache",
            "stats": "/stats",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health(handler: HandlerDep) -> HealthCheckResponse:
    """Health check endpoint."""
    return await handler.health_check()


@app.post("/cache/lookup", response_model=CacheLookupResponse)
async def lookup_cache(request: LookupCacheRequest, handler: HandlerDep) -> CacheLookupResponse:
    """Look up a cached response for a prompt/model pair."""
    return await handler.lookup(request)


@app.post("/cache/store", response_model=CacheStoreResponse)
async def store_cache(request: StoreCacheRequest, handler: HandlerDep) -> CacheStoreResponse:
    """Store a fresh upstream response."""
    return await handler.store(request)


@app.delete("/cache", response_model=CacheInvalidateResponse)
async def invalidate_cache(
    handler: HandlerDep,
    pattern: str | None = None,
    regex: bool = False,
) -> CacheInvalidateResponse:
    """Invalidate entries whose key matches ``pattern``, or everything without one."""
    return await handler.invalidate(pattern=pattern, regex=regex)


@app.post("/cache/invalidate-tags", response_model=CacheInvalidateResponse)
async def invalidate_tags(request: InvalidateTagsRequest, handler: HandlerDep) -> CacheInvalidateResponse:
    """Invalidate entries stored with all of the given tag values."""
    return await handler.invalidate_tagged(request)


@app.post("/cache/cleanup", response_model=CacheInvalidateResponse)
async def cleanup_cache(handler: HandlerDep) -> CacheInvalidateResponse:
    """Remove all expired entries now."""
    return await handler.cleanup()


@app.get("/cache/threshold", response_model=dict[str, float])
async def get_threshold(cache: ServiceDep) -> dict[str, float]:
    """Get the current similarity threshold."""
    return {"threshold": cache.threshold}


@app.post("/cache/threshold", response_model=dict[str, Any])
async def set_threshold(request: ThresholdRequest, handler: HandlerDep) -> dict[str, Any]:
    """Update the similarity threshold."""
    return await handler.set_threshold(request)


@app.get("/stats", response_model=CacheStatsResponse)
async def get_stats(handler: HandlerDep) -> CacheStatsResponse:
    """Get cache statistics."""
    return await handler.get_stats()


@app.post("/stats/reset", response_model=dict[str, str])
async def reset_stats(handler: HandlerDep) -> dict[str, str]:
    """Reset cache statistics without touching entries."""
    return await handler.reset_stats()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "response_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
