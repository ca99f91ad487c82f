"""Domain entities for internal representation.

These are plain dataclasses used internally by services and
repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.

Entities should have:
- No JSON serialization logic
- No Pydantic validation
- No external dependencies
"""

from .cache_entry import CacheEntry
from .cache_lookup import CacheLookup, HitSource
from .cache_stats import CacheStatsSnapshot
from .warmup_record import WarmupRecord

__all__ = [
    "CacheEntry",
    "CacheLookup",
    "CacheStatsSnapshot",
    "HitSource",
    "WarmupRecord",
]
