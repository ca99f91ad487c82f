#!/usr/bin/env python3
"""
Demo script for the response cache.

This script demonstrates exact hits, near-duplicate hits, LRU eviction,
TTL expiry and threshold tuning with sample novel-writing prompts.
"""

from response_cache import CacheService
from response_cache.evaluator import CacheEvaluator, QueryPair

MODEL = "gemini-2.0-flash"


class DemoClock:
    """Manually advanced clock so expiry can be shown without sleeping."""

    def __init__(self) -> None:
        self.now = 1_700_000_000.0

    def __call__(self) -> float:
        return self.now


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def show(cache: CacheService, prompt: str) -> None:
    lookup = cache.get(prompt, MODEL)
    if lookup.hit:
        print(f"  ✓ {lookup.source.upper():<10} {prompt!r} -> {lookup.response[:60]!r}")
    else:
        print(f"  ✗ MISS       {prompt!r}")


def demo_basic_cache() -> None:
    """Demonstrate exact and near-duplicate hits."""
    print_section("Exact and Similarity Hits")

    cache = CacheService.create(capacity=10)

    pairs = [
        ("소설 챕터 1 써줘", "비가 내리는 서울의 밤, 주인공은 오래된 편지를 발견한다."),
        ("Describe the villain's hideout in detail", "A damp lighthouse at the edge of the map..."),
        ("Write a dialogue between the two sisters", "\"You never told me,\" said Mina..."),
    ]

    print("\n📝 Storing sample responses...")
    for prompt, response in pairs:
        cache.set(prompt, MODEL, response, tags={"project_id": "demo"})
        print(f"  ✓ Stored: {prompt}")

    print("\n🔍 Lookups:")
    show(cache, "소설 챕터 1 써줘")
    show(cache, "소설 챕터 1 써 줘")
    show(cache, "Describe the villain's hideout, in detail!")
    show(cache, "Write a poem about autumn")

    print(f"\n📊 Stats: {cache.get_stats().to_dict()}")


def demo_eviction_and_expiry() -> None:
    """Demonstrate LRU eviction and TTL expiry."""
    print_section("Eviction and Expiry")

    clock = DemoClock()
    cache = CacheService.create(capacity=2, ttl=60, clock=clock, enable_similarity=False)

    cache.set("A", MODEL, "response A")
    cache.set("B", MODEL, "response B")
    cache.get("A", MODEL)  # refresh A, so B is now least recently used
    cache.set("C", MODEL, "response C")

    print("\n🔍 After set(A), set(B), get(A), set(C) with capacity 2:")
    for prompt in ("A", "B", "C"):
        show(cache, prompt)

    clock.now += 61
    print("\n⏱  61 seconds later:")
    show(cache, "A")
    print(f"  Expired entries swept: {cache.cleanup()}")


def demo_threshold_sweep() -> None:
    """Sweep the similarity threshold over a handful of labelled pairs."""
    print_section("Threshold Sweep")

    pairs = [
        QueryPair("소설 챕터 1 써 줘", "소설 챕터 1 써줘", should_match=True),
        QueryPair("write chapter one of the novel now", "write chapter one of the novel", should_match=True),
        QueryPair("소설 챕터 2 써줘", "소설 챕터 1 써줘", should_match=False),
        QueryPair("describe the hero", "describe the villain", should_match=False),
    ]

    evaluator = CacheEvaluator()
    evaluator.sweep_thresholds(pairs, min_threshold=0.5, max_threshold=1.0, steps=6)
    evaluator.print_summary()


def main() -> None:
    demo_basic_cache()
    demo_eviction_and_expiry()
    demo_threshold_sweep()


if __name__ == "__main__":
    main()
