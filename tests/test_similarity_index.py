"""
Tests for near-duplicate prompt matching.
"""

import pytest

from response_cache.services import KeyDeriver, SimilarityIndex, jaccard


@pytest.fixture
def index():
    return SimilarityIndex(threshold=0.85)


@pytest.fixture
def normalize():
    return KeyDeriver(prefix_length=500).normalize


def test_jaccard_basics():
    assert jaccard({"a", "b"}, {"a", "b"}) == 1.0
    assert jaccard({"a", "b", "c"}, {"a", "b", "d"}) == 0.5
    assert jaccard({"a"}, {"b"}) == 0.0
    assert jaccard(set(), set()) == 0.0


def test_spacing_variants_are_identical(index, normalize):
    score = index.similarity(normalize("소설 챕터 1 써줘"), normalize("소설 챕터 1 써 줘"))
    assert score == 1.0


def test_token_overlap_score(index, normalize):
    score = index.similarity(normalize("소설 챕터 2 써줘"), normalize("소설 챕터 1 써줘"))
    assert score == pytest.approx(0.6)


def test_empty_fingerprints_do_not_match(index):
    assert index.similarity("", "") == 0.0


def test_find_skips_other_models_and_expired(index, make_entry):
    other_model = make_entry("A", model="m2", fingerprint="a b c")
    expired = make_entry("B", fingerprint="a b c")
    live = make_entry("C", fingerprint="a b c")

    match = index.find(
        "a b c",
        "m1",
        [other_model, expired, live],
        lambda entry: entry is expired,
    )

    assert match is live


def test_find_returns_first_qualifying_not_best(make_entry):
    index = SimilarityIndex(threshold=0.5)
    newer = make_entry("NEW", fingerprint="a b c e f")  # 4/6 against the query
    older = make_entry("OLD", fingerprint="a b c d")  # 4/5 against the query

    match = index.find("a b c d e", "m1", [newer, older], lambda entry: False)

    assert match is newer


def test_find_returns_none_below_threshold(index, make_entry):
    candidate = make_entry("A", fingerprint="describe the villain")
    assert index.find("describe the hero", "m1", [candidate], lambda entry: False) is None


def test_threshold_bounds():
    with pytest.raises(ValueError):
        SimilarityIndex(threshold=1.5)

    index = SimilarityIndex(threshold=0.85)
    with pytest.raises(ValueError):
        index.set_threshold(-0.1)

    index.set_threshold(0.9)
    assert index.threshold == 0.9
