"""Cache statistics snapshot entity."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class CacheStatsSnapshot:
    """Point-in-time view of cache efficiency.

    ``hits + misses == total_requests`` and
    ``hits == memory_hits + similarity_hits`` always hold.
    """

    hits: int
    misses: int
    memory_hits: int
    similarity_hits: int
    total_saved: int
    total_requests: int
    hit_rate: float
    size: int

    def to_dict(self) -> dict[str, float | int]:
        """Convert the snapshot to a plain dictionary."""
        return asdict(self)
