"""
Tests for the cache engine: lookups, eviction, expiry, similarity,
stats, invalidation, cleanup and warmup.
"""

import re
import threading

import pytest

from response_cache.entities import WarmupRecord
from response_cache.repositories import LRUStore
from response_cache.services import CacheService, ExpiryPolicy, KeyDeriver, SimilarityIndex

MODEL = "m1"


def test_read_after_write(cache):
    cache.set("Write chapter one", MODEL, "Once upon a time")

    lookup = cache.get("Write chapter one", MODEL)

    assert lookup.hit is True
    assert lookup.source == "exact"
    assert lookup.response == "Once upon a time"
    assert lookup.key == cache.key_for("Write chapter one", MODEL)


def test_miss_on_empty_cache(cache):
    lookup = cache.get("anything", MODEL)

    assert lookup.hit is False
    assert lookup.response is None
    assert lookup.source is None


def test_set_returns_key(cache):
    assert cache.set("p", MODEL, "r") == cache.key_for("p", MODEL)


def test_lru_eviction_order(clock):
    cache = CacheService.create(capacity=2, ttl=60, clock=clock, enable_compression=False)
    cache.set("alpha prompt", MODEL, "A")
    cache.set("bravo prompt", MODEL, "B")
    cache.set("charlie prompt", MODEL, "C")

    assert cache.get("alpha prompt", MODEL).hit is False
    assert cache.get("bravo prompt", MODEL).hit is True
    assert cache.get("charlie prompt", MODEL).hit is True


def test_read_between_sets_protects_entry(clock):
    cache = CacheService.create(capacity=2, ttl=60, clock=clock, enable_compression=False)
    cache.set("alpha prompt", MODEL, "A")
    cache.set("bravo prompt", MODEL, "B")
    cache.get("alpha prompt", MODEL)
    cache.set("charlie prompt", MODEL, "C")

    assert cache.get("bravo prompt", MODEL).hit is False
    assert cache.get("alpha prompt", MODEL).hit is True
    assert cache.get("charlie prompt", MODEL).hit is True


def test_size_never_exceeds_capacity(clock):
    cache = CacheService.create(capacity=3, ttl=60, clock=clock)
    for i in range(20):
        cache.set(f"prompt number {i}", MODEL, f"response {i}")
        assert cache.size <= 3


def test_capacity_is_coerced_to_one(clock):
    cache = CacheService.create(capacity=0, clock=clock)
    assert cache.capacity == 1


def test_ttl_boundary(cache, clock):
    cache.set("timed prompt", MODEL, "R", ttl=10)

    clock.advance(9.5)
    assert cache.get("timed prompt", MODEL).hit is True

    clock.advance(1.0)
    assert cache.get("timed prompt", MODEL).hit is False
    assert cache.size == 0


@pytest.mark.parametrize("ttl", [0, -5])
def test_non_positive_ttl_expires_on_next_read(cache, ttl):
    cache.set("short lived", MODEL, "R", ttl=ttl)

    assert cache.get("short lived", MODEL).hit is False
    assert cache.size == 0


def test_default_ttl_applies(cache, clock):
    cache.set("p", MODEL, "R")

    clock.advance(59)
    assert cache.get("p", MODEL).hit is True

    clock.advance(2)
    assert cache.get("p", MODEL).hit is False


def test_similarity_hit_on_spacing_variant(cache):
    cache.set("소설 챕터 1 써줘", MODEL, "R1")

    lookup = cache.get("소설 챕터 1 써 줘", MODEL)

    assert lookup.hit is True
    assert lookup.source == "similarity"
    assert lookup.response == "R1"


def test_similarity_miss_below_threshold(cache):
    cache.set("소설 챕터 1 써줘", MODEL, "R1")

    assert cache.get("소설 챕터 2 써줘", MODEL).hit is False


def test_similarity_requires_same_model(cache):
    cache.set("소설 챕터 1 써줘", MODEL, "R1")

    assert cache.get("소설 챕터 1 써 줘", "m2").hit is False


def test_similarity_can_be_disabled(clock):
    cache = CacheService.create(capacity=10, clock=clock, enable_similarity=False)
    cache.set("소설 챕터 1 써줘", MODEL, "R1")

    assert cache.get("소설 챕터 1 써 줘", MODEL).hit is False


def test_similarity_skips_expired_candidates(cache, clock):
    cache.set("소설 챕터 1 써줘", MODEL, "R1", ttl=5)
    clock.advance(6)

    assert cache.get("소설 챕터 1 써 줘", MODEL).hit is False


def test_similarity_returns_most_recent_qualifying_entry(clock):
    cache = CacheService.create(capacity=10, clock=clock, similarity_threshold=0.5)
    cache.set("a b c d", MODEL, "R-older")
    cache.set("a b c e f", MODEL, "R-newer")

    lookup = cache.get("a b c d e", MODEL)

    assert lookup.source == "similarity"
    assert lookup.response == "R-newer"


class StaleOnPromoteStore(LRUStore):
    """Store whose clock jumps past every TTL when a stored key is read."""

    def __init__(self, capacity, expiry, clock):
        super().__init__(capacity, expiry)
        self._clock = clock

    def get(self, key):
        if key in self:
            self._clock.advance(1_000)
        return super().get(key)


def test_similarity_match_expiring_before_promotion_is_a_miss(clock):
    expiry = ExpiryPolicy(default_ttl=60, clock=clock)
    cache = CacheService(
        store=StaleOnPromoteStore(10, expiry, clock),
        key_deriver=KeyDeriver(prefix_length=500),
        expiry=expiry,
        similarity=SimilarityIndex(threshold=0.85),
        enable_similarity=True,
        enable_compression=False,
    )
    cache.set("소설 챕터 1 써줘", MODEL, "R1")

    lookup = cache.get("소설 챕터 1 써 줘", MODEL)

    assert lookup.hit is False
    stats = cache.get_stats()
    assert stats.similarity_hits == 0
    assert stats.misses == 1
    assert stats.size == 0


def test_similarity_hit_refreshes_recency(clock):
    cache = CacheService.create(capacity=2, clock=clock)
    cache.set("a b c d e f g h i j", MODEL, "RX")
    cache.set("zzz", MODEL, "RY")

    assert cache.get("a b c d e f g h i j k", MODEL).source == "similarity"

    cache.set("another prompt", MODEL, "RZ")

    assert cache.get("zzz", MODEL).hit is False
    assert cache.get("a b c d e f g h i j", MODEL).source == "exact"


def test_options_partition_exact_keys(cache):
    cache.set("write a scene", MODEL, "warm", options={"temperature": 0.9})

    exact = cache.get("write a scene", MODEL, {"temperature": 0.9})
    near = cache.get("write a scene", MODEL)

    assert exact.source == "exact"
    assert near.source == "similarity"
    assert near.response == "warm"


def test_options_with_non_string_keys_are_cached(cache):
    options = {"safety": {1: "block", "mode": "strict"}, "stop": {("a", "b"): 1}}

    key = cache.set("p", MODEL, "R", options=options)
    lookup = cache.get("p", MODEL, options)

    assert lookup.source == "exact"
    assert lookup.key == key


def test_stats_consistency(cache):
    cache.set("known prompt", MODEL, "0123456789")  # 10 chars -> 3 tokens
    cache.set("소설 챕터 1 써줘", MODEL, "R1", token_count=50)

    cache.get("known prompt", MODEL)
    cache.get("unknown", MODEL)
    cache.get("소설 챕터 1 써 줘", MODEL)
    cache.get("nothing here", MODEL)
    cache.get("known prompt", MODEL)

    stats = cache.get_stats()
    assert stats.total_requests == 5
    assert stats.hits + stats.misses == 5
    assert stats.hits == stats.memory_hits + stats.similarity_hits
    assert stats.memory_hits == 2
    assert stats.similarity_hits == 1
    assert stats.misses == 2
    assert stats.hit_rate == pytest.approx(3 / 5)
    assert stats.total_saved == 3 + 3 + 50
    assert stats.size == 2


def test_hit_rate_is_zero_without_requests(cache):
    stats = cache.get_stats()
    assert stats.hit_rate == 0.0
    assert stats.total_requests == 0


def test_reset_stats_keeps_entries(cache):
    cache.set("p", MODEL, "R")
    cache.get("p", MODEL)

    cache.reset_stats()

    stats = cache.get_stats()
    assert stats.hits == 0 and stats.total_requests == 0
    assert stats.size == 1


def test_reset_drops_entries_and_stats(cache):
    cache.set("p", MODEL, "R")
    cache.get("p", MODEL)

    cache.reset()

    assert cache.get_stats().to_dict() == {
        "hits": 0,
        "misses": 0,
        "memory_hits": 0,
        "similarity_hits": 0,
        "total_saved": 0,
        "total_requests": 0,
        "hit_rate": 0.0,
        "size": 0,
    }


def test_invalidate_all(cache):
    cache.set("first prompt", MODEL, "R1")
    cache.set("second prompt", MODEL, "R2")

    assert cache.invalidate() == 2
    assert cache.get_stats().size == 0
    assert cache.get("first prompt", MODEL).hit is False
    assert cache.invalidate() == 0


def test_invalidate_by_substring(cache):
    key = cache.set("first prompt", MODEL, "R1")
    cache.set("second prompt", MODEL, "R2")

    assert cache.invalidate(key) == 1
    assert cache.get("first prompt", MODEL).hit is False
    assert cache.get("second prompt", MODEL).hit is True


def test_invalidate_by_regex(cache):
    key = cache.set("first prompt", MODEL, "R1")
    cache.set("second prompt", MODEL, "R2")

    assert cache.invalidate(re.compile(f"^{key}$")) == 1
    assert key not in cache.store
    assert cache.size == 1


def test_invalidate_without_match(cache):
    cache.set("first prompt", MODEL, "R1")

    assert cache.invalidate("not-hex") == 0
    assert cache.size == 1


def test_invalidate_tagged(cache):
    cache.set("chapter one", MODEL, "R1", tags={"project_id": "p1", "generation_type": "chapter"})
    cache.set("chapter two", MODEL, "R2", tags={"project_id": "p1", "generation_type": "dialogue"})
    cache.set("chapter three", MODEL, "R3", tags={"project_id": "p2"})

    assert cache.invalidate_tagged(project_id="p1", generation_type="chapter") == 1
    assert cache.invalidate_tagged(project_id="p1") == 1
    assert cache.invalidate_tagged() == 0
    assert cache.size == 1


def test_metadata_records_lengths_and_tags(cache):
    key = cache.set("prompt", MODEL, "response", tags={"project_id": "p1", "generation_type": None})

    metadata = cache.store.peek(key).metadata
    assert metadata == {"prompt_length": 6, "response_length": 8, "project_id": "p1"}


def test_delete(cache):
    cache.set("p", MODEL, "R")

    assert cache.delete("p", MODEL) is True
    assert cache.delete("p", MODEL) is False
    assert cache.delete_by_key("missing") is False


def test_cleanup_removes_only_expired(cache, clock):
    for i in range(3):
        cache.set(f"short {i}", MODEL, "R", ttl=10)
    cache.set("long", MODEL, "R", ttl=100)

    clock.advance(50)

    assert cache.cleanup() == 3
    assert cache.size == 1
    assert cache.cleanup() == 0


def test_compression_round_trip(clock):
    cache = CacheService.create(
        capacity=10,
        clock=clock,
        enable_compression=True,
        compression_min_length=10,
    )
    text = "비가 내렸다.  " * 200
    key = cache.set("long scene", MODEL, text)

    assert cache.store.peek(key).compressed is True
    assert cache.get("long scene", MODEL).response == text


def test_short_responses_are_not_compressed(clock):
    cache = CacheService.create(capacity=10, clock=clock, enable_compression=True, compression_min_length=1024)
    key = cache.set("p", MODEL, "short")

    assert cache.store.peek(key).compressed is False


def test_warmup_replays_oldest_first(clock):
    cache = CacheService.create(capacity=2, clock=clock)
    records = [
        WarmupRecord(prompt="third", model=MODEL, response="R3", stored_at=3),
        WarmupRecord(prompt="second", model=MODEL, response="R2", stored_at=2),
        WarmupRecord(prompt="first", model=MODEL, response="R1", stored_at=1),
    ]

    assert cache.warmup(records) == 3

    assert cache.store.keys() == [cache.key_for("third", MODEL), cache.key_for("second", MODEL)]
    assert cache.get_stats().total_requests == 0


def test_warmup_skips_expired_and_keeps_remaining_ttl(cache, clock):
    records = [
        WarmupRecord(prompt="fresh", model=MODEL, response="R1", expires_at=clock.now + 30),
        WarmupRecord(prompt="stale", model=MODEL, response="R2", expires_at=clock.now - 1),
        WarmupRecord(prompt="tagged", model=MODEL, response="R3", token_count=7, tags={"project_id": "p1"}),
    ]

    assert cache.warmup(records) == 2

    assert cache.store.peek(cache.key_for("fresh", MODEL)).expires_at == clock.now + 30
    assert cache.key_for("stale", MODEL) not in cache.store
    tagged = cache.store.peek(cache.key_for("tagged", MODEL))
    assert tagged.token_count == 7
    assert tagged.metadata["project_id"] == "p1"


def test_set_threshold_validation(cache):
    with pytest.raises(ValueError):
        cache.set_threshold(2.0)

    cache.set_threshold(0.5)
    assert cache.threshold == 0.5


def test_concurrent_access_keeps_invariants():
    cache = CacheService.create(capacity=8)

    def worker(worker_id: int) -> None:
        for i in range(200):
            prompt = f"worker {worker_id} prompt {i % 12}"
            if i % 3 == 0:
                cache.set(prompt, MODEL, f"R{i}")
            else:
                cache.get(prompt, MODEL)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    stats = cache.get_stats()
    assert stats.hits + stats.misses == stats.total_requests == 4 * 200 - 4 * 67
    assert stats.size <= 8
    assert len(cache.store.keys()) == stats.size
