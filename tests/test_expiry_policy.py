"""
Tests for the lazy TTL policy.
"""

from response_cache.services import ExpiryPolicy


def test_expires_at_uses_default_ttl(expiry):
    assert expiry.expires_at(100.0) == 160.0


def test_expires_at_uses_override(expiry):
    assert expiry.expires_at(100.0, ttl=10) == 110.0


def test_entry_expires_exactly_at_deadline(expiry, make_entry, clock):
    entry = make_entry("A", ttl=10)

    clock.advance(9.5)
    assert expiry.is_expired(entry) is False

    clock.now = entry.expires_at
    assert expiry.is_expired(entry) is True


def test_zero_and_negative_ttl_are_immediately_stale(expiry, make_entry):
    assert expiry.is_expired(make_entry("A", ttl=0)) is True
    assert expiry.is_expired(make_entry("B", ttl=-5)) is True


def test_explicit_now_overrides_clock(expiry, make_entry, clock):
    entry = make_entry("A", ttl=10)
    assert expiry.is_expired(entry, now=clock.now + 11) is True
    assert expiry.is_expired(entry, now=clock.now) is False


def test_uses_injected_clock(clock):
    policy = ExpiryPolicy(default_ttl=1, clock=clock)
    assert policy.now() == clock.now
    assert policy.default_ttl == 1
