"""Cache entry domain entity."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CacheEntry:
    """Domain entity for one cached response.

    Entries are created by ``CacheService.set`` and mutated only by a
    successful read (recency and access counters). They are not frozen for
    that reason.

    Attributes:
        key: Canonical cache key derived from (model, prompt, options)
        prompt_hash: FNV-1a fingerprint of the raw, unnormalized prompt
        fingerprint: Normalized, truncated prompt used for similarity scans
        response: The cached payload (compressed when ``compressed`` is set)
        model: Identifier of the model that generated the response
        token_count: Approximate output size, used for savings accounting
        created_at: Unix timestamp when the entry was stored
        expires_at: Unix timestamp after which the entry is stale
        access_count: Number of successful reads
        last_accessed_at: Unix timestamp of the latest read (or creation)
        compressed: Whether ``response`` must be decompressed before use
        metadata: Free-form tags (lengths, generation type, project, ...)
    """

    key: str
    prompt_hash: str
    fingerprint: str
    response: str
    model: str
    token_count: int
    created_at: float
    expires_at: float
    access_count: int = 0
    last_accessed_at: float = 0.0
    compressed: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def ttl(self) -> float:
        """Lifetime the entry was stored with, in seconds."""
        return self.expires_at - self.created_at
