"""Warmup record domain entity."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class WarmupRecord:
    """A past (prompt, model, response) triple replayed into the cache.

    Attributes:
        prompt: The prompt text as originally sent upstream
        model: The model that produced the response
        response: The uncompressed response text
        options: Request options that took part in the cache key
        token_count: Cost proxy recorded when the response was generated
        tags: Metadata tags (generation type, project, ...)
        stored_at: Unix timestamp when the record was written
        expires_at: Unix timestamp after which the record must not be replayed
    """

    prompt: str
    model: str
    response: str
    options: dict[str, Any] | None = None
    token_count: int | None = None
    tags: dict[str, Any] = field(default_factory=dict)
    stored_at: float = 0.0
    expires_at: float | None = None
