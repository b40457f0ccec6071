from datetime import date

import numpy as np
import pytest

from kirana_admin.core.cache import QueryCache, compute_data_hash


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return QueryCache({}, clock=clock)


class Loader:
    def __init__(self, *values):
        self.values = list(values)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        value = self.values.pop(0)
        if isinstance(value, Exception):
            raise value
        return value


class TestFetch:

    def test_served_from_cache_while_fresh(self, cache, clock):
        load = Loader("first", "second")

        assert cache.fetch(("categories",), load, stale_seconds=300) == "first"
        clock.advance(299)
        assert cache.fetch(("categories",), load, stale_seconds=300) == "first"
        assert load.calls == 1

    def test_refetched_once_stale(self, cache, clock):
        load = Loader("first", "second")

        cache.fetch(("categories",), load, stale_seconds=300)
        clock.advance(300)
        assert cache.fetch(("categories",), load, stale_seconds=300) == "second"
        assert load.calls == 2

    def test_zero_stale_time_always_refetches(self, cache):
        load = Loader(1, 2)
        assert cache.fetch(("dashboard", "stats"), load) == 1
        assert cache.fetch(("dashboard", "stats"), load) == 2

    def test_disabled_query_does_not_load(self, cache):
        load = Loader("never")
        assert cache.fetch(("customers", "search", "a"), load, enabled=False) is None
        assert load.calls == 0
        assert ("customers", "search", "a") not in cache

    def test_errors_propagate_and_are_not_cached(self, cache):
        load = Loader(RuntimeError("down"), "ok")

        with pytest.raises(RuntimeError):
            cache.fetch(("orders", "list"), load, stale_seconds=60)
        assert ("orders", "list") not in cache
        assert cache.fetch(("orders", "list"), load, stale_seconds=60) == "ok"
        assert cache.stats.errors == 1

    def test_keys_are_normalised_to_tuples(self, cache):
        cache.fetch(["profile", "current"], Loader("me"), stale_seconds=60)
        assert cache.get(("profile", "current")) == "me"


class TestQuery:

    def test_reports_data_and_freshness(self, cache):
        load = Loader(["a"])

        first = cache.query(("products", "list"), load, stale_seconds=60)
        assert first.data == ["a"]
        assert first.from_cache is False
        assert first.fetched_at == 1000.0

        second = cache.query(("products", "list"), load, stale_seconds=60)
        assert second.from_cache is True
        assert load.calls == 1

    def test_captures_errors(self, cache):
        state = cache.query(("reportData", "weekly"), Loader(RuntimeError("boom")))

        assert state.is_error
        assert str(state.error) == "boom"
        assert state.data is None

    def test_disabled(self, cache):
        state = cache.query(("x",), Loader("never"), enabled=False)
        assert state.data is None and not state.is_error


class TestInvalidate:

    def test_prefix_invalidation(self, cache):
        cache.set(("orders", "list", "abc"), [])
        cache.set(("orders", "detail", "order-1"), {})
        cache.set(("orders", "detail", "order-1", "history"), [])
        cache.set(("dashboard", "stats"), {})

        assert cache.invalidate("orders", "detail") == 2
        assert ("orders", "list", "abc") in cache
        assert cache.invalidate("orders") == 1
        assert len(cache) == 1
        assert cache.stats.invalidations == 3

    def test_unknown_prefix(self, cache):
        cache.set(("customers", "list"), [])
        assert cache.invalidate("customer") == 0
        assert len(cache) == 1

    def test_clear(self, cache):
        cache.set(("a",), 1)
        cache.set(("b",), 2)
        cache.clear()
        assert len(cache) == 0


class TestStats:

    def test_hit_rate(self, cache):
        load = Loader(1)
        cache.fetch(("k",), load, stale_seconds=60)
        cache.fetch(("k",), load, stale_seconds=60)
        cache.fetch(("k",), load, stale_seconds=60)

        stats = cache.stats.to_dict()
        assert stats["hits"] == 2
        assert stats["misses"] == 1
        assert stats["hit_rate"] == "66.67%"

    def test_stats_live_in_store(self, clock):
        store = {}
        QueryCache(store, clock=clock).fetch(("k",), Loader(1), stale_seconds=60)
        assert QueryCache(store, clock=clock).get(("k",)) == 1
        assert store[QueryCache.STATS_KEY].misses == 1


def test_data_hash_ignores_key_order():
    assert compute_data_hash({"a": 1, "b": 2}) == compute_data_hash({"b": 2, "a": 1})
    assert len(compute_data_hash({"a": 1})) == 16


def test_data_hash_normalises_numpy_and_dates():
    assert compute_data_hash({"day": date(2024, 1, 5), "count": np.int64(3)}) == (
        compute_data_hash({"day": "2024-01-05", "count": 3})
    )
