"""Time-to-live policy, enforced lazily at lookup time."""

import time
from collections.abc import Callable

from response_cache.config import settings
from response_cache.entities import CacheEntry

Clock = Callable[[], float]


class ExpiryPolicy:
    """Per-entry TTL with an injectable clock.

    There is no background thread: stores consult ``is_expired`` on read,
    and ``CacheService.cleanup`` sweeps on demand. A zero or negative TTL
    is legal and makes the entry stale on its next read.
    """

    def __init__(self, default_ttl: float | None = None, clock: Clock | None = None) -> None:
        """Initialize the policy.

        Args:
            default_ttl: Lifetime in seconds for entries stored without an
                explicit TTL. Defaults to settings.
            clock: Callable returning the current Unix time. Defaults to time.time.
        """
        self._default_ttl = default_ttl if default_ttl is not None else settings.cache_ttl
        self._clock = clock or time.time

    @property
    def default_ttl(self) -> float:
        """Get the default TTL in seconds."""
        return self._default_ttl

    def now(self) -> float:
        return self._clock()

    def expires_at(self, created_at: float, ttl: float | None = None) -> float:
        """Compute the expiry timestamp for an entry created at ``created_at``."""
        return created_at + (ttl if ttl is not None else self._default_ttl)

    def is_expired(self, entry: CacheEntry, now: float | None = None) -> bool:
        """Check whether an entry is stale at ``now`` (defaults to the clock)."""
        if now is None:
            now = self._clock()
        return now >= entry.expires_at
