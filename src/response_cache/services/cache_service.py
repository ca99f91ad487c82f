"""Cache service for core business logic.

This service orchestrates cache operations by coordinating the store
(bounded recency storage), the key deriver, the expiry policy, the
similarity index and the stats recorder. It performs no I/O: the caller
asks ``get`` before calling the upstream model and ``set`` afterwards.
"""

import logging
import math
import re
import threading
from collections.abc import Iterable
from typing import Any

from response_cache.config import settings
from response_cache.entities import CacheEntry, CacheLookup, CacheStatsSnapshot, WarmupRecord
from response_cache.protocols import CacheStore
from response_cache.repositories.lru_store import LRUStore
from response_cache.utils import decompress_text, maybe_compress

from .expiry_policy import Clock, ExpiryPolicy
from .key_deriver import KeyDeriver, fnv1a_32
from .similarity_index import SimilarityIndex
from .stats_recorder import StatsRecorder

logger = logging.getLogger(__name__)


class CacheService:
    """Core cache orchestration service.

    This service depends on the CacheStore PROTOCOL, not on a concrete
    store, so a different eviction strategy can be swapped in without
    changing the service code.

    Every public operation runs under one re-entrant lock, so a single
    instance can be shared between threads. Steady-state operations never
    raise: a failed lookup is reported as a miss.

    Example:
        ```python
        from response_cache.services import CacheService

        # Create with defaults (LRU store, settings-driven TTL and threshold)
        cache = CacheService.create()

        lookup = cache.get(prompt, "gemini-2.0-flash")
        if not lookup.hit:
            response = call_model(prompt)
            cache.set(prompt, "gemini-2.0-flash", response, tags={"project_id": "p1"})
        ```
    """

    def __init__(
        self,
        store: CacheStore,
        key_deriver: KeyDeriver,
        expiry: ExpiryPolicy,
        similarity: SimilarityIndex,
        enable_similarity: bool | None = None,
        enable_compression: bool | None = None,
        compression_min_length: int | None = None,
    ) -> None:
        """Initialize the cache service.

        Args:
            store: Bounded entry store (required). Must consult ``expiry`` on reads.
            key_deriver: Request to key mapping (required).
            expiry: TTL policy and clock (required).
            similarity: Near-duplicate matcher (required).
            enable_similarity: Scan for near-duplicates on exact misses. Defaults to settings.
            enable_compression: Store long responses compressed. Defaults to settings.
            compression_min_length: Minimum response length to compress. Defaults to settings.
        """
        self._store = store
        self._keys = key_deriver
        self._expiry = expiry
        self._similarity = similarity
        self._stats = StatsRecorder()
        self._lock = threading.RLock()
        self._enable_similarity = (
            enable_similarity if enable_similarity is not None else settings.cache_enable_similarity
        )
        self._enable_compression = (
            enable_compression if enable_compression is not None else settings.cache_enable_compression
        )
        self._compression_min_length = (
            compression_min_length
            if compression_min_length is not None
            else settings.cache_compression_min_length
        )

    @classmethod
    def create(
        cls,
        capacity: int | None = None,
        ttl: float | None = None,
        similarity_threshold: float | None = None,
        enable_similarity: bool | None = None,
        enable_compression: bool | None = None,
        compression_min_length: int | None = None,
        prefix_length: int | None = None,
        clock: Clock | None = None,
    ) -> "CacheService":
        """Factory method to create CacheService with sensible defaults.

        Like dict.fromkeys() or Path.home() - this is an alternative constructor
        that wires the default in-memory implementations together.

        Args:
            capacity: Maximum number of entries. If None, uses settings.
            ttl: Default time-to-live in seconds. If None, uses settings.
            similarity_threshold: Minimum Jaccard similarity (0-1). If None, uses settings.
            enable_similarity: If None, uses settings.
            enable_compression: If None, uses settings.
            compression_min_length: If None, uses settings.
            prefix_length: Normalized prompt length used for keys. If None, uses settings.
            clock: Callable returning Unix time. Defaults to time.time.

        Returns:
            Configured CacheService instance

        Example:
            ```python
            cache = CacheService.create(capacity=2, ttl=60, clock=fake_clock)
            ```
        """
        expiry = ExpiryPolicy(default_ttl=ttl, clock=clock)
        store = LRUStore.create(
            capacity=capacity if capacity is not None else settings.cache_max_entries,
            expiry=expiry,
        )
        return cls(
            store=store,
            key_deriver=KeyDeriver(prefix_length=prefix_length),
            expiry=expiry,
            similarity=SimilarityIndex(threshold=similarity_threshold),
            enable_similarity=enable_similarity,
            enable_compression=enable_compression,
            compression_min_length=compression_min_length,
        )

    def _unpack(self, entry: CacheEntry) -> str:
        return decompress_text(entry.response) if entry.compressed else entry.response

    def key_for(self, prompt: str, model: str, options: dict[str, Any] | None = None) -> str:
        """Return the cache key a request maps to."""
        return self._keys.derive(prompt, model, options)

    def get(
        self,
        prompt: str,
        model: str,
        options: dict[str, Any] | None = None,
    ) -> CacheLookup:
        """Look up a cached response.

        Business logic:
        1. Derive the key and try an exact lookup (expired entries are dropped)
        2. On a miss, scan live entries of the same model for a near-duplicate prompt
        3. Record the outcome in the stats

        Args:
            prompt: The prompt text
            model: The model identifier
            options: Request options that took part in the key

        Returns:
            CacheLookup describing the hit (with its source) or the miss
        """
        with self._lock:
            key = self._keys.derive(prompt, model, options)

            entry = self._store.get(key)
            if entry is not None:
                self._stats.record_exact_hit(entry.token_count)
                logger.debug(
                    "Cache hit",
                    extra={"cache_key": key, "access_count": entry.access_count},
                )
                return CacheLookup(hit=True, response=self._unpack(entry), source="exact", key=key)

            if self._enable_similarity:
                now = self._expiry.now()
                match = self._similarity.find(
                    self._keys.normalize(prompt),
                    model,
                    self._store.values(),
                    lambda candidate: self._expiry.is_expired(candidate, now),
                )
                if match is not None:
                    # Refresh recency and access counters; the store drops the
                    # entry if it went stale since the scan
                    promoted = self._store.get(match.key)
                    if promoted is not None:
                        self._stats.record_similarity_hit(promoted.token_count)
                        return CacheLookup(
                            hit=True,
                            response=self._unpack(promoted),
                            source="similarity",
                            key=promoted.key,
                        )

            self._stats.record_miss()
            logger.debug("Cache miss", extra={"cache_key": key})
            return CacheLookup.miss()

    def set(
        self,
        prompt: str,
        model: str,
        response: str,
        *,
        options: dict[str, Any] | None = None,
        token_count: int | None = None,
        ttl: float | None = None,
        tags: dict[str, Any] | None = None,
    ) -> str:
        """Store a fresh upstream response.

        Args:
            prompt: The prompt text that produced the response
            model: The model that produced the response
            response: The response text
            options: Request options that take part in the key
            token_count: Cost proxy; defaults to ceil(len(response) / 4)
            ttl: Lifetime in seconds; zero or negative expires on the next read
            tags: Metadata tags used for tag-based invalidation

        Returns:
            The key of the stored entry
        """
        with self._lock:
            key = self._keys.derive(prompt, model, options)
            now = self._expiry.now()

            if self._enable_compression:
                stored, compressed = maybe_compress(response, self._compression_min_length)
            else:
                stored, compressed = response, False

            metadata: dict[str, Any] = {
                "prompt_length": len(prompt),
                "response_length": len(response),
            }
            if tags:
                metadata.update({name: value for name, value in tags.items() if value is not None})

            entry = CacheEntry(
                key=key,
                prompt_hash=fnv1a_32(prompt),
                fingerprint=self._keys.normalize(prompt),
                response=stored,
                model=model,
                token_count=token_count if token_count is not None else math.ceil(len(response) / 4),
                created_at=now,
                expires_at=self._expiry.expires_at(now, ttl),
                last_accessed_at=now,
                compressed=compressed,
                metadata=metadata,
            )
            evicted = self._store.set(key, entry)

            logger.debug(
                "Cache set",
                extra={
                    "cache_key": key,
                    "compressed": compressed,
                    "evicted_key": evicted.key if evicted is not None else None,
                },
            )
            return key

    def invalidate(self, pattern: str | re.Pattern[str] | None = None) -> int:
        """Remove entries by key.

        Args:
            pattern: None clears everything; a string removes keys containing
                it; a compiled regex removes keys it matches (``search``).

        Returns:
            Number of entries removed
        """
        with self._lock:
            if pattern is None:
                count = self._store.clear()
                logger.info("Cache cleared", extra={"entries_removed": count})
                return count

            if isinstance(pattern, re.Pattern):
                doomed = [key for key in self._store.keys() if pattern.search(key)]
            else:
                needle = str(pattern)
                doomed = [key for key in self._store.keys() if needle in key]

            for key in doomed:
                self._store.remove(key)

            logger.info(
                "Cache entries invalidated",
                extra={"pattern": str(getattr(pattern, "pattern", pattern)), "entries_removed": len(doomed)},
            )
            return len(doomed)

    def invalidate_tagged(self, **tags: Any) -> int:
        """Remove entries whose metadata carries all of the given tag values.

        Example:
            ```python
            cache.invalidate_tagged(project_id="p1")
            cache.invalidate_tagged(project_id="p1", generation_type="chapter")
            ```

        Returns:
            Number of entries removed
        """
        if not tags:
            return 0

        with self._lock:
            doomed = [
                entry.key
                for entry in self._store.values()
                if all(entry.metadata.get(name) == value for name, value in tags.items())
            ]
            for key in doomed:
                self._store.remove(key)

            logger.info(
                "Cache entries invalidated by tag",
                extra={"tags": tags, "entries_removed": len(doomed)},
            )
            return len(doomed)

    def delete(self, prompt: str, model: str, options: dict[str, Any] | None = None) -> bool:
        """Delete the entry a request maps to.

        Returns:
            True if deleted, False otherwise
        """
        with self._lock:
            return self._store.remove(self._keys.derive(prompt, model, options))

    def delete_by_key(self, key: str) -> bool:
        """Delete a specific cache entry by key.

        Returns:
            True if deleted, False otherwise
        """
        with self._lock:
            return self._store.remove(key)

    def cleanup(self) -> int:
        """Remove all currently expired entries.

        Meant to be called by an external periodic scheduler; reads already
        drop expired entries lazily.

        Returns:
            Number of entries removed
        """
        with self._lock:
            now = self._expiry.now()
            expired = [
                entry.key for entry in self._store.values() if self._expiry.is_expired(entry, now)
            ]
            for key in expired:
                self._store.remove(key)

            if expired:
                logger.info("Expired entries cleaned up", extra={"count": len(expired)})
            return len(expired)

    def warmup(self, records: Iterable[WarmupRecord]) -> int:
        """Replay stored responses into the cache.

        Records are expected newest first (as ``WarmupSource.load`` returns
        them) and are replayed oldest first, so the newest ends up most
        recently used. Expired records are skipped; the rest keep their
        remaining lifetime.

        Args:
            records: Records to replay, newest first

        Returns:
            Number of entries stored
        """
        with self._lock:
            now = self._expiry.now()
            count = 0
            for record in reversed(list(records)):
                ttl = None
                if record.expires_at is not None:
                    ttl = record.expires_at - now
                    if ttl <= 0:
                        continue
                self.set(
                    record.prompt,
                    record.model,
                    record.response,
                    options=record.options,
                    token_count=record.token_count,
                    ttl=ttl,
                    tags=record.tags,
                )
                count += 1

            logger.info("Cache warmed up", extra={"entries_loaded": count, "size": len(self._store)})
            return count

    def get_stats(self) -> CacheStatsSnapshot:
        """Get cache statistics.

        Returns:
            Snapshot of counters, hit rate and current size
        """
        with self._lock:
            return self._stats.snapshot(size=len(self._store))

    def reset_stats(self) -> None:
        """Zero the counters without touching stored entries."""
        with self._lock:
            self._stats.reset()

    def reset(self) -> None:
        """Drop every entry and zero the counters."""
        with self._lock:
            self._store.clear()
            self._stats.reset()

    def set_threshold(self, threshold: float) -> None:
        """Update the similarity threshold.

        Args:
            threshold: New threshold value (0-1, higher = more strict)
        """
        with self._lock:
            self._similarity.set_threshold(threshold)

    @property
    def threshold(self) -> float:
        """Get current similarity threshold."""
        return self._similarity.threshold

    @property
    def similarity_enabled(self) -> bool:
        return self._enable_similarity

    @property
    def size(self) -> int:
        """Current number of entries in the cache."""
        return len(self._store)

    @property
    def capacity(self) -> int:
        return self._store.capacity

    @property
    def default_ttl(self) -> float:
        return self._expiry.default_ttl

    @property
    def store(self) -> CacheStore:
        """Get the underlying store (for testing)."""
        return self._store
