"""Tests for the LRU RecencyCache."""

from __future__ import annotations

import threading

import pytest

from kubesentry.cache.recency import DEFAULT_CAPACITY, RecencyCache


class TestSeen:
    def test_first_call_returns_false(self) -> None:
        cache = RecencyCache(capacity=3)
        assert cache.seen("a") is False

    def test_second_call_returns_true(self) -> None:
        cache = RecencyCache(capacity=3)
        cache.seen("a")
        assert cache.seen("a") is True

    def test_tuple_keys(self) -> None:
        cache = RecencyCache(capacity=3)
        assert cache.seen(("uid-1", "web")) is False
        assert cache.seen(("uid-1", "web")) is True
        assert cache.seen(("uid-1", "sidecar")) is False

    def test_default_capacity(self) -> None:
        assert RecencyCache().capacity == DEFAULT_CAPACITY == 500


class TestEviction:
    def test_n_plus_one_evicts_least_recently_used(self) -> None:
        cache = RecencyCache(capacity=3)
        for key in ("a", "b", "c", "d"):
            cache.seen(key)

        assert len(cache) == 3
        assert "a" not in cache
        assert "b" in cache
        assert "c" in cache
        assert "d" in cache

    def test_refresh_protects_key_from_next_eviction(self) -> None:
        cache = RecencyCache(capacity=3)
        for key in ("a", "b", "c"):
            cache.seen(key)

        assert cache.seen("a") is True
        cache.seen("d")

        assert "a" in cache
        assert "b" not in cache

    def test_evicted_key_is_new_again(self) -> None:
        cache = RecencyCache(capacity=1)
        cache.seen("a")
        cache.seen("b")
        assert cache.seen("a") is False

    def test_size_never_exceeds_capacity(self) -> None:
        cache = RecencyCache(capacity=10)
        for i in range(1000):
            cache.seen(i)
        assert len(cache) == 10


class TestInspection:
    def test_contains_does_not_refresh(self) -> None:
        cache = RecencyCache(capacity=2)
        cache.seen("a")
        cache.seen("b")
        assert "a" in cache
        cache.seen("c")
        assert "a" not in cache


class TestValidation:
    def test_zero_capacity_rejected(self) -> None:
        with pytest.raises(ValueError, match="capacity"):
            RecencyCache(capacity=0)


class TestConcurrency:
    def test_concurrent_seen_keeps_bound_and_counts(self) -> None:
        cache = RecencyCache(capacity=50)
        first_seen: list[int] = []
        lock = threading.Lock()

        def worker(offset: int) -> None:
            for i in range(200):
                if not cache.seen(i % 40):
                    with lock:
                        first_seen.append(i % 40)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(cache) == 40
        # Each of the 40 keys is reported as new exactly once.
        assert sorted(first_seen) == list(range(40))
