"""HTTP handlers for cache operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

import logging
import re
import time

import redis
from fastapi import HTTPException, status

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
from response_cache.entities import WarmupRecord
from response_cache.repositories import RedisHistoryRepository
from response_cache.services import CacheService

logger = logging.getLogger(__name__)


class CacheHandler:
    """HTTP handlers for cache operations.

    This handler delegates business logic to CacheService
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Setting appropriate status codes
    - Error handling and responses
    - Writing fresh responses through to the Redis history, when configured

    Example:
        ```python
        from response_cache.services import CacheService
        from response_cache.handlers import CacheHandler

        cache_service = CacheService.create()
        handler = CacheHandler(cache_service=cache_service)

        # Use in FastAPI route
        @app.post("/cache/lookup", response_model=CacheLookupResponse)
        async def lookup(request: LookupCacheRequest):
            return await handler.lookup(request)
        ```
    """

    def __init__(
        self,
        cache_service: CacheService,
        history: RedisHistoryRepository | None = None,
    ) -> None:
        """Initialize the cache handler.

        Args:
            cache_service: The cache service for business logic (required).
            history: Durable history to write fresh responses to (optional).
        """
        self._cache = cache_service
        self._history = history

    async def lookup(self, request: LookupCacheRequest) -> CacheLookupResponse:
        """Handle POST /cache/lookup requests.

        Args:
            request: The lookup request DTO

        Returns:
            CacheLookupResponse with hit status, source and response

        Raises:
            HTTPException: If an error occurs during the lookup
        """
        try:
            start_time = time.time()

            result = self._cache.get(
                prompt=request.prompt,
                model=request.model,
                options=request.options,
            )

            lookup_time_ms = (time.time() - start_time) * 1000

            return CacheLookupResponse(
                hit=result.hit,
                response=result.response,
                source=result.source,
                key=result.key,
                lookup_time_ms=lookup_time_ms,
            )

        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to look up cache: {e}",
            ) from e

    async def store(self, request: StoreCacheRequest) -> CacheStoreResponse:
        """Handle POST /cache/store requests.

        Args:
            request: The store request DTO

        Returns:
            CacheStoreResponse with storage confirmation

        Raises:
            HTTPException: If an error occurs during storage
        """
        try:
            key = self._cache.set(
                request.prompt,
                request.model,
                request.response,
                options=request.options,
                token_count=request.token_count,
                ttl=request.ttl_seconds,
                tags=request.tags,
            )
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to store entry: {e}",
            ) from e

        if self._history is not None:
            self._write_through(request)

        return CacheStoreResponse(
            success=True,
            key=key,
            message="Entry stored successfully",
        )

    def _write_through(self, request: StoreCacheRequest) -> None:
        now = time.time()
        ttl = request.ttl_seconds if request.ttl_seconds is not None else self._cache.default_ttl
        record = WarmupRecord(
            prompt=request.prompt,
            model=request.model,
            response=request.response,
            options=request.options,
            token_count=request.token_count,
            tags=request.tags,
            stored_at=now,
            expires_at=now + ttl,
        )
        try:
            self._history.append(record)  # type: ignore[union-attr]
        except redis.RedisError as e:
            logger.warning("History write-through failed", extra={"error": str(e)})

    async def invalidate(self, pattern: str | None = None, regex: bool = False) -> CacheInvalidateResponse:
        """Handle DELETE /cache requests.

        Args:
            pattern: Key substring (or regex when ``regex`` is set); None clears everything
            regex: Treat ``pattern`` as a regular expression

        Returns:
            CacheInvalidateResponse with the number of removed entries

        Raises:
            HTTPException: 400 for an invalid regex, 500 for other errors
        """
        compiled: str | re.Pattern[str] | None = pattern
        if pattern is not None and regex:
            try:
                compiled = re.compile(pattern)
            except re.error as e:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Invalid pattern: {e}",
                ) from e

        try:
            removed = self._cache.invalidate(compiled)

            return CacheInvalidateResponse(
                success=True,
                removed=removed,
                message="Cache cleared successfully" if pattern is None else "Matching entries invalidated",
            )

        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to invalidate cache: {e}",
            ) from e

    async def invalidate_tagged(self, request: InvalidateTagsRequest) -> CacheInvalidateResponse:
        """Handle POST /cache/invalidate-tags requests.

        Args:
            request: The tag invalidation request DTO

        Returns:
            CacheInvalidateResponse with the number of removed entries
        """
        removed = self._cache.invalidate_tagged(**request.tags)
        return CacheInvalidateResponse(
            success=True,
            removed=removed,
            message="Tagged entries invalidated",
        )

    async def cleanup(self) -> CacheInvalidateResponse:
        """Handle POST /cache/cleanup requests.

        Returns:
            CacheInvalidateResponse with the number of expired entries removed
        """
        removed = self._cache.cleanup()
        return CacheInvalidateResponse(
            success=True,
            removed=removed,
            message="Expired entries removed",
        )

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /stats requests.

        Returns:
            CacheStatsResponse with cache statistics

        Raises:
            HTTPException: If an error occurs while fetching stats
        """
        try:
            stats = self._cache.get_stats()

            return CacheStatsResponse(
                **stats.to_dict(),
                capacity=self._cache.capacity,
                threshold=self._cache.threshold,
                ttl_seconds=self._cache.default_ttl,
            )

        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to get stats: {e}",
            ) from e

    async def reset_stats(self) -> dict:
        """Handle POST /stats/reset requests."""
        self._cache.reset_stats()
        return {"message": "Cache statistics reset"}

    async def set_threshold(self, request: ThresholdRequest) -> dict:
        """Handle POST /cache/threshold requests.

        Raises:
            HTTPException: 400 if the threshold is outside 0-1
        """
        try:
            self._cache.set_threshold(request.threshold)
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e),
            ) from e

        return {
            "message": "Threshold updated",
            "threshold": request.threshold,
        }

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests.

        Returns:
            HealthCheckResponse; the in-memory cache is always healthy, the
            Redis history is only checked when persistence is on
        """
        history_healthy = self._history.health_check() if self._history is not None else None

        return HealthCheckResponse(
            status="degraded" if history_healthy is False else "healthy",
            cache_healthy=True,
            history_healthy=history_healthy,
        )
