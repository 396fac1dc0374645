"""
Tests for the in-process TTL cache store.
"""

import threading

import pytest

from property_search.protocols import CacheStore
from property_search.repositories import InMemoryCacheStore


@pytest.fixture
def store(clock):
    return InMemoryCacheStore(default_ttl_ms=1_000, max_size=3, cleanup_interval_ms=10_000, clock=clock)


def test_satisfies_protocol(store):
    assert isinstance(store, CacheStore)


def test_get_missing_is_none(store):
    assert store.get("missing") is None
    assert store.get_stats()["misses"] == 1


def test_set_then_get(store):
    store.set("k", [1, 2, 3])
    assert store.get("k") == [1, 2, 3]


def test_entry_live_before_ttl(store, clock):
    store.set("k", "v", ttl_ms=100)
    clock.advance_ms(99)

    assert store.get("k") == "v"


def test_entry_expires_at_ttl(store, clock):
    store.set("k", "v", ttl_ms=100)
    clock.advance_ms(100)

    assert store.get("k") is None
    assert len(store) == 0


def test_overwrite_resets_expiry(store, clock):
    store.set("k", "old", ttl_ms=100)
    clock.advance_ms(80)
    store.set("k", "new", ttl_ms=100)
    clock.advance_ms(80)

    assert store.get("k") == "new"


def test_zero_ttl_is_immediately_stale(store):
    store.set("k", "v", ttl_ms=0)
    assert store.get("k") is None


def test_negative_ttl_raises(store):
    with pytest.raises(ValueError):
        store.set("k", "v", ttl_ms=-1)


def test_lru_eviction(store):
    store.set("a", 1)
    store.set("b", 2)
    store.set("c", 3)
    store.get("a")  # a becomes most recently used

    store.set("d", 4)

    assert store.get("b") is None
    assert store.get("a") == 1
    assert store.get("c") == 3
    assert store.get("d") == 4


def test_access_count_and_last_accessed(store, clock):
    store.set("k", "v", query="flat", filters={"bhk": 2})
    clock.advance_ms(10)
    store.get("k")
    store.get("k")

    (entry,) = store.entries()
    assert entry.access_count == 2
    assert entry.last_accessed == clock.now
    assert entry.query == "flat"
    assert entry.filters == {"bhk": 2}


def test_entries_skip_expired(store, clock):
    store.set("short", 1, ttl_ms=10)
    store.set("long", 2, ttl_ms=1_000)
    clock.advance_ms(20)

    assert [e.key for e in store.entries()] == ["long"]


def test_sweep_expired(store, clock):
    store.set("a", 1, ttl_ms=10)
    store.set("b", 2, ttl_ms=10)
    store.set("c", 3, ttl_ms=1_000)
    clock.advance_ms(20)

    assert store.sweep_expired() == 2
    assert len(store) == 1


def test_opportunistic_sweep_on_write(store, clock):
    store.set("a", 1, ttl_ms=10)
    clock.advance_ms(10_000)

    store.set("b", 2)

    assert len(store) == 1


def test_delete_and_clear(store):
    store.set("a", 1)
    store.set("b", 2)
    store.get("a")

    assert store.delete("a") is True
    assert store.delete("a") is False
    assert store.clear() == 1
    assert store.get_stats()["hits"] == 0


def test_delete_where(store):
    store.set("a", 1, query="mumbai flat")
    store.set("b", 2, query="pune villa")

    assert store.delete_where(lambda e: "mumbai" in e.query) == 1
    assert store.get("b") == 2


def test_hit_rate(store):
    store.set("k", "v")
    store.get("k")
    store.get("missing")

    stats = store.get_stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["hit_rate"] == 0.5


def test_invalid_construction():
    with pytest.raises(ValueError):
        InMemoryCacheStore(default_ttl_ms=-1)
    with pytest.raises(ValueError):
        InMemoryCacheStore(default_ttl_ms=100, max_size=0)


def test_concurrent_writers_publish_whole_entries():
    store = InMemoryCacheStore(default_ttl_ms=60_000, max_size=1_000)
    errors = []

    def writer(worker: int) -> None:
        for i in range(200):
            value = (worker, i, [worker] * 10)
            store.set(f"key-{i % 20}", value)
            read = store.get(f"key-{i % 20}")
            if read is not None and read[2] != [read[0]] * 10:
                errors.append(read)

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(store) == 20
