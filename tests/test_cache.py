"""Tests for the bounded TTL cache."""

from __future__ import annotations

import pytest

from poke_battle.clients.cache import TTLCache


def test_entry_expires_after_ttl(clock) -> None:
    cache = TTLCache(ttl=60, clock=clock)
    cache.put("pokemon/pikachu", {"id": 25})

    clock.advance(59)
    assert cache.get("pokemon/pikachu") == {"id": 25}

    clock.advance(1)
    assert cache.get("pokemon/pikachu") is None
    # Stale entries stay until overwritten.
    assert cache.size() == 1


def test_put_overwrites_stale_entry(clock) -> None:
    cache = TTLCache(ttl=10, clock=clock)
    cache.put("k", 1)
    clock.advance(20)
    cache.put("k", 2)
    assert cache.get("k") == 2


def test_least_recently_used_entry_is_evicted(clock) -> None:
    cache = TTLCache(ttl=60, max_entries=2, clock=clock)
    cache.put("a", 1)
    cache.put("b", 2)
    cache.get("a")
    cache.put("c", 3)

    assert "a" in cache
    assert "b" not in cache
    assert cache.size() == 2


def test_clear_and_invalid_capacity(clock) -> None:
    cache = TTLCache(clock=clock)
    cache.put("a", 1)
    cache.clear()
    assert cache.size() == 0
    with pytest.raises(ValueError):
        TTLCache(max_entries=0)
