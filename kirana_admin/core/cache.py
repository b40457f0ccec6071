"""
Query cache for the Kiranawala Admin Panel.

Every read the UI performs goes through a ``QueryCache``: a result is stored
under a tuple key such as ``("orders", <filters-hash>)`` together with the
time it was fetched. A read is served from the cache while it is younger than
its stale time; mutations drop whole key families with ``invalidate`` so the
next rerun refetches from Supabase.

The cache lives in a plain mutable mapping. In the app that mapping is
Streamlit session state, so each browser session has its own cache.
"""

import hashlib
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, MutableMapping, Optional, Tuple

from .utils import make_json_serializable

logger = logging.getLogger(__name__)

QueryKey = Tuple[Hashable, ...]


def compute_data_hash(data: Any) -> str:
    """
    Compute a hash of the data for use inside cache keys.

    Args:
        data: Any data structure; numpy, pandas and date values are converted first

    Returns:
        16-character MD5 hash string
    """
    json_str = json.dumps(make_json_serializable(data), sort_keys=True)
    return hashlib.md5(json_str.encode()).hexdigest()[:16]


@dataclass
class CacheEntry:
    """A single cached query result."""
    key: QueryKey
    value: Any
    fetched_at: float
    stale_seconds: float
    hit_count: int = 0

    def is_stale(self, now: float) -> bool:
        """An entry with no stale time is refetched on every read."""
        return (now - self.fetched_at) >= self.stale_seconds

    def age(self, now: float) -> float:
        return now - self.fetched_at


@dataclass
class CacheStats:
    """Statistics for cache performance monitoring."""
    hits: int = 0
    misses: int = 0
    invalidations: int = 0
    errors: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'hits': self.hits,
            'misses': self.misses,
            'invalidations': self.invalidations,
            'errors': self.errors,
            'hit_rate': f"{self.hit_rate:.2%}",
        }


@dataclass
class QueryState:
    """Result of a cached read, as handed to the UI."""
    data: Any = None
    error: Optional[Exception] = None
    from_cache: bool = False
    fetched_at: Optional[float] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


class QueryCache:
    """
    Key/value cache with per-query staleness and prefix invalidation.
    """

    ENTRIES_KEY = "_query_cache_entries"
    STATS_KEY = "_query_cache_stats"

    def __init__(
        self,
        store: MutableMapping[str, Any],
        clock: Callable[[], float] = time.monotonic,
    ):
        self._store = store
        self._clock = clock

    @property
    def _entries(self) -> Dict[QueryKey, CacheEntry]:
        if self.ENTRIES_KEY not in self._store:
            self._store[self.ENTRIES_KEY] = {}
        return self._store[self.ENTRIES_KEY]

    @property
    def stats(self) -> CacheStats:
        if self.STATS_KEY not in self._store:
            self._store[self.STATS_KEY] = CacheStats()
        return self._store[self.STATS_KEY]

    def get(self, key: QueryKey, default: Any = None) -> Any:
        """Return the cached value for ``key`` regardless of staleness."""
        entry = self._entries.get(tuple(key))
        return entry.value if entry is not None else default

    def set(self, key: QueryKey, value: Any, stale_seconds: float = 0) -> None:
        key = tuple(key)
        self._entries[key] = CacheEntry(
            key=key,
            value=value,
            fetched_at=self._clock(),
            stale_seconds=stale_seconds,
        )

    def is_fresh(self, key: QueryKey) -> bool:
        entry = self._entries.get(tuple(key))
        return entry is not None and not entry.is_stale(self._clock())

    def fetch(
        self,
        key: QueryKey,
        fn: Callable[[], Any],
        stale_seconds: float = 0,
        enabled: bool = True,
    ) -> Any:
        """
        Return the value for ``key``, calling ``fn`` when missing or stale.

        Args:
            key: Tuple cache key; the leading elements form its family
            fn: Zero-argument loader
            stale_seconds: How long a fetched value is served without refetching
            enabled: When False nothing is fetched and None is returned

        Returns:
            The cached or freshly loaded value. Exceptions raised by ``fn``
            propagate and nothing is cached.
        """
        if not enabled:
            return None

        key = tuple(key)
        now = self._clock()
        entry = self._entries.get(key)

        if entry is not None and not entry.is_stale(now):
            entry.hit_count += 1
            self.stats.hits += 1
            return entry.value

        self.stats.misses += 1
        try:
            value = fn()
        except Exception:
            self.stats.errors += 1
            raise

        self._entries[key] = CacheEntry(
            key=key,
            value=value,
            fetched_at=self._clock(),
            stale_seconds=stale_seconds,
        )
        return value

    def query(
        self,
        key: QueryKey,
        fn: Callable[[], Any],
        stale_seconds: float = 0,
        enabled: bool = True,
    ) -> QueryState:
        """Like ``fetch`` but captures loader errors in a ``QueryState``."""
        if not enabled:
            return QueryState()

        was_fresh = self.is_fresh(key)
        try:
            data = self.fetch(key, fn, stale_seconds=stale_seconds)
        except Exception as e:
            logger.error("Query %s failed: %s", key, e)
            return QueryState(error=e)

        entry = self._entries.get(tuple(key))
        return QueryState(
            data=data,
            from_cache=was_fresh,
            fetched_at=entry.fetched_at if entry else None,
        )

    def invalidate(self, *prefix: Hashable) -> int:
        """
        Drop every entry whose key starts with ``prefix``.

        Returns:
            Number of entries removed
        """
        entries = self._entries
        doomed = [k for k in entries if k[:len(prefix)] == prefix]
        for key in doomed:
            del entries[key]

        self.stats.invalidations += len(doomed)
        if doomed:
            logger.debug("Invalidated %d cache entries for %s", len(doomed), prefix)
        return len(doomed)

    def clear(self) -> None:
        self._store[self.ENTRIES_KEY] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: QueryKey) -> bool:
        return tuple(key) in self._entries


def get_query_cache() -> QueryCache:
    """Return the query cache bound to the current Streamlit session."""
    import streamlit as st
    return QueryCache(st.session_state)


def clear_all_caches() -> None:
    """
    Clear the session query cache.
    Call this when user requests a manual refresh.
    """
    get_query_cache().clear()
