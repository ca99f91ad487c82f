"""Shared fixtures for the response cache tests."""

import pytest

from response_cache.entities import CacheEntry
from response_cache.services import CacheService, ExpiryPolicy

START = 1_000.0


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = START) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """A fake clock starting at a fixed timestamp."""
    return FakeClock()


@pytest.fixture
def expiry(clock):
    """Expiry policy with a 60 second default TTL on the fake clock."""
    return ExpiryPolicy(default_ttl=60, clock=clock)


@pytest.fixture
def make_entry(clock):
    """Factory for cache entries living 60 seconds from the fake clock."""

    def _make(key: str, model: str = "m1", ttl: float = 60, **overrides) -> CacheEntry:
        fields = {
            "key": key,
            "prompt_hash": f"hash-{key}",
            "fingerprint": key.lower(),
            "response": f"response {key}",
            "model": model,
            "token_count": 10,
            "created_at": clock.now,
            "expires_at": clock.now + ttl,
            "last_accessed_at": clock.now,
        }
        fields.update(overrides)
        return CacheEntry(**fields)

    return _make


@pytest.fixture
def cache(clock):
    """A small cache on the fake clock with compression off."""
    return CacheService.create(
        capacity=10,
        ttl=60,
        similarity_threshold=0.85,
        enable_similarity=True,
        enable_compression=False,
        prefix_length=500,
        clock=clock,
    )
