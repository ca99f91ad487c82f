"""Cache lookup result entity."""

from dataclasses import dataclass
from typing import Literal

HitSource = Literal["exact", "similarity"]


@dataclass(frozen=True)
class CacheLookup:
    """Outcome of a single ``CacheService.get`` call.

    Attributes:
        hit: Whether a cached response was found
        response: The decompressed response text on a hit
        source: ``"exact"`` for a key match, ``"similarity"`` for a near-duplicate
        key: Key of the entry that served the hit
    """

    hit: bool
    response: str | None = None
    source: HitSource | None = None
    key: str | None = None

    @classmethod
    def miss(cls) -> "CacheLookup":
        return cls(hit=False)
