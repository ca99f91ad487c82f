"""Warmup source protocol.

Defines the interface for any durable store that can replay past
(prompt, model, response) triples into a fresh cache at process start.

Implementations can include:
- Redis list of JSON records (default, see ``RedisHistoryRepository``)
- A database table of generation history
- A JSON lines export
"""

from typing import Protocol, runtime_checkable

from response_cache.entities import WarmupRecord


@runtime_checkable
class WarmupSource(Protocol):
    """Protocol for durable warmup sources.

    Example:
        ```python
        from response_cache.protocols import WarmupSource

        source: WarmupSource = RedisHistoryRepository.create()
        cache.warmup(source.load(limit=500))
        ```
    """

    def load(self, limit: int | None = None) -> list[WarmupRecord]:
        """Load stored records, newest first.

        Args:
            limit: Maximum number of records to return (None for all)

        Returns:
            List of WarmupRecord, most recently stored first
        """
        ...
