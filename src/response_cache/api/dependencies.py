"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - One CacheService is created in the lifespan and stored in app.state
    - Dependency functions retrieve it from request.app.state
    - Clean separation, no global mutable state
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import Annotated

import redis
from fastapi import Depends, FastAPI, Request

from response_cache.config import settings
from response_cache.handlers import CacheHandler
from response_cache.repositories import RedisHistoryRepository
from response_cache.services import CacheService

logger = logging.getLogger(__name__)


def get_cache_service(request: Request) -> CacheService:
    """Dependency injection for CacheService from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The CacheService instance from app.state

    Raises:
        RuntimeError: If service is not initialized
    """
    service = getattr(request.app.state, "cache_service", None)
    if service is None:
        raise RuntimeError("CacheService not initialized. Check lifespan setup.")
    return service


def get_handler(request: Request) -> CacheHandler:
    """Dependency injection for CacheHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The CacheHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cache_handler", None)
    if handler is None:
        raise RuntimeError("CacheHandler not initialized. Check lifespan setup.")
    return handler


async def periodic_cleanup(cache_service: CacheService, interval: float) -> None:
    """Sweep expired entries every ``interval`` seconds until cancelled."""
    while True:
        await asyncio.sleep(interval)
        cache_service.cleanup()


def warm_from_history(cache_service: CacheService, history: RedisHistoryRepository) -> int:
    """Replay the Redis history into the cache; a failing Redis leaves it cold."""
    try:
        records = history.load(limit=settings.cache_warmup_limit)
    except redis.RedisError as e:
        logger.warning("Redis history unavailable, starting with a cold cache", extra={"error": str(e)})
        return 0
    return cache_service.warmup(records)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Service (cache engine) - stored in app.state.cache_service
    2. History (optional Redis warmup source) - stored in app.state.history
    3. Handler (HTTP endpoints) - stored in app.state.cache_handler

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Cleanup:
        Stops the periodic sweep and removes all services from app.state on shutdown
    """
    logging.basicConfig(level=settings.log_level)

    cache_service = CacheService.create()

    history: RedisHistoryRepository | None = None
    if settings.cache_persist:
        history = RedisHistoryRepository.create()
        warm_from_history(cache_service, history)

    cache_handler = CacheHandler(cache_service=cache_service, history=history)

    # Store in app.state (FastAPI pattern)
    app.state.cache_service = cache_service
    app.state.cache_handler = cache_handler
    app.state.history = history

    cleanup_task: asyncio.Task | None = None
    if settings.cache_cleanup_interval > 0:
        cleanup_task = asyncio.create_task(
            periodic_cleanup(cache_service, settings.cache_cleanup_interval)
        )

    logger.info(
        "Cache service initialized",
        extra={
            "capacity": cache_service.capacity,
            "threshold": cache_service.threshold,
            "persist": history is not None,
        },
    )

    yield

    if cleanup_task is not None:
        cleanup_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await cleanup_task

    # Cleanup - remove from app.state
    del app.state.cache_handler
    del app.state.cache_service
    del app.state.history
    logger.info("Cache service shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[CacheHandler, Depends(get_handler)]
ServiceDep = Annotated[CacheService, Depends(get_cache_service)]
