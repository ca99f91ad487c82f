"""Hit/miss accounting."""

from dataclasses import dataclass

from response_cache.entities import CacheStatsSnapshot


@dataclass
class StatsRecorder:
    """Track cache efficiency counters.

    Every lookup is recorded exactly once, as an exact hit, a similarity
    hit or a miss, so ``hits + misses == total_requests`` holds at all times.
    """

    hits: int = 0
    misses: int = 0
    memory_hits: int = 0
    similarity_hits: int = 0
    total_saved: int = 0
    total_requests: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        if self.total_requests == 0:
            return 0.0
        return self.hits / self.total_requests

    def record_exact_hit(self, token_count: int) -> None:
        """Record a hit served by the exact key."""
        self.total_requests += 1
        self.hits += 1
        self.memory_hits += 1
        self.total_saved += token_count

    def record_similarity_hit(self, token_count: int) -> None:
        """Record a hit served by a near-duplicate prompt."""
        self.total_requests += 1
        self.hits += 1
        self.similarity_hits += 1
        self.total_saved += token_count

    def record_miss(self) -> None:
        """Record a cache miss."""
        self.total_requests += 1
        self.misses += 1

    def reset(self) -> None:
        """Zero every counter."""
        self.hits = 0
        self.misses = 0
        self.memory_hits = 0
        self.similarity_hits = 0
        self.total_saved = 0
        self.total_requests = 0

    def snapshot(self, size: int) -> CacheStatsSnapshot:
        """Freeze the counters together with the current store size."""
        return CacheStatsSnapshot(
            hits=self.hits,
            misses=self.misses,
            memory_hits=self.memory_hits,
            similarity_hits=self.similarity_hits,
            total_saved=self.total_saved,
            total_requests=self.total_requests,
            hit_rate=self.hit_rate,
            size=size,
        )
