"""Search cache service.

Holds prior search results and suggestion lists for a freshness window and
keeps a bounded log of query response times. The service never fetches data
itself: callers probe, and on a miss compute and populate.
"""

import json
import logging
import re
import time
from collections.abc import Callable, Mapping
from typing import Any

from property_search.config import Settings, settings as default_settings
from property_search.entities import MatchResult
from property_search.models import PerformanceLog
from property_search.protocols import CacheStore
from property_search.repositories import InMemoryCacheStore

logger = logging.getLogger(__name__)


def normalize_query(query: str) -> str:
    """Normalize query text for cache keys (case and whitespace only)."""
    return " ".join(query.casefold().split())


def canonical_filters(filters: Mapping[str, Any] | None) -> dict[str, Any]:
    """Drop unset filters and order the rest by key.

    Keys are compared as strings, so mixed key types never fail to sort.
    """
    filters = filters or {}
    return {str(key): filters[key] for key in sorted(filters, key=str) if filters[key] is not None}


def make_cache_key(query: str, filters: Mapping[str, Any] | None = None) -> str:
    """Derive the canonical cache key for a search.

    The same logical search always yields the same key, regardless of filter
    ordering, letter case or surrounding whitespace in the query.

    Args:
        query: The query text
        filters: Filter mapping. None values are treated as unset.

    Returns:
        Key of the form "<normalized query>:<sorted filters as JSON>"
    """
    if not isinstance(query, str):
        raise TypeError(f"query must be a string, got {type(query).__name__}")
    encoded = json.dumps(canonical_filters(filters), sort_keys=True, separators=(",", ":"), default=str)
    return f"{normalize_query(query)}:{encoded}"


class SearchCacheService:
    """In-process search cache.

    Two stores with their own TTLs and sizes:
    - search: ranked search results keyed by query and filters
    - suggestions: suggestion lists keyed by query only

    Example:
        ```python
        from property_search.services import SearchCacheService

        cache = SearchCacheService.create()
        hit = cache.get_cached_search_results("flat", {"bhk": 2})
        if hit is None:
            results = search_records("flat", candidates)
            cache.cache_search_results("flat", {"bhk": 2}, results)
        ```
    """

    def __init__(
        self,
        search_store: CacheStore,
        suggestion_store: CacheStore,
        performance_log: PerformanceLog,
        search_ttl_ms: int,
        suggestion_ttl_ms: int,
    ) -> None:
        """Initialize the cache service.

        Args:
            search_store: Store for search results.
            suggestion_store: Store for suggestion lists.
            performance_log: Bounded response-time log.
            search_ttl_ms: Default TTL for search results.
            suggestion_ttl_ms: Default TTL for suggestions.
        """
        self._search = search_store
        self._suggestions = suggestion_store
        self._performance = performance_log
        self._search_ttl_ms = search_ttl_ms
        self._suggestion_ttl_ms = suggestion_ttl_ms

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        clock: Callable[[], float] | None = None,
    ) -> "SearchCacheService":
        """Factory method to create an isolated SearchCacheService.

        Args:
            settings: TTLs and sizes. If None, uses the environment settings.
            clock: Time source in seconds, shared by all stores. Defaults to time.time.

        Returns:
            Configured SearchCacheService instance
        """
        settings = settings or default_settings

        def store(name: str, ttl_ms: int, max_size: int) -> InMemoryCacheStore:
            return InMemoryCacheStore(
                default_ttl_ms=ttl_ms,
                max_size=max_size,
                cleanup_interval_ms=settings.cache_cleanup_interval_ms,
                clock=clock,
                name=name,
            )

        performance_log = PerformanceLog(
            max_samples=settings.performance_max_samples,
            clock=clock or time.time,
        )

        return cls(
            search_store=store("search", settings.search_cache_ttl_ms, settings.search_cache_max_size),
            suggestion_store=store(
                "suggestions",
                settings.suggestion_cache_ttl_ms,
                settings.suggestion_cache_max_size,
            ),
            performance_log=performance_log,
            search_ttl_ms=settings.search_cache_ttl_ms,
            suggestion_ttl_ms=settings.suggestion_cache_ttl_ms,
        )

    def get_cached_search_results(
        self,
        query: str,
        filters: Mapping[str, Any] | None = None,
    ) -> list[MatchResult] | None:
        """Get cached search results.

        Args:
            query: The query text
            filters: Filter mapping

        Returns:
            The cached results, or None when absent or expired
        """
        cached = self._search.get(make_cache_key(query, filters))
        return None if cached is None else list(cached)

    def cache_search_results(
        self,
        query: str,
        filters: Mapping[str, Any] | None,
        results: list[MatchResult],
        ttl_ms: int | None = None,
    ) -> None:
        """Cache search results, replacing any entry for the same search.

        Args:
            query: The query text
            filters: Filter mapping
            results: Ranked results to cache
            ttl_ms: Time-to-live in milliseconds. Defaults to the search TTL.

        Raises:
            ValueError: If ttl_ms is negative
        """
        ttl = self._search_ttl_ms if ttl_ms is None else ttl_ms
        if ttl < 0:
            raise ValueError(f"ttl_ms must not be negative, got {ttl}")
        self._search.set(
            make_cache_key(query, filters),
            tuple(results),
            ttl_ms=ttl,
            query=query,
            filters=canonical_filters(filters),
        )

    def get_cached_suggestions(self, query: str) -> list[str] | None:
        """Get cached suggestions for a query.

        Args:
            query: The query text

        Returns:
            The cached suggestion strings, or None when absent or expired
        """
        cached = self._suggestions.get(make_cache_key(query))
        return None if cached is None else list(cached)

    def cache_suggestions(self, query: str, suggestions: list[str]) -> None:
        """Cache suggestion strings for a query with the suggestion TTL.

        Args:
            query: The query text
            suggestions: Suggestion strings, best first
        """
        self._suggestions.set(
            make_cache_key(query),
            tuple(suggestions),
            ttl_ms=self._suggestion_ttl_ms,
            query=query,
        )

    def record_query_performance(self, query: str, response_time_ms: int) -> None:
        """Record how long a query took. Never raises.

        Args:
            query: The query text
            response_time_ms: Response time in milliseconds
        """
        self._performance.record(query, response_time_ms)

    def get_cache_stats(self) -> dict[str, dict]:
        """Get statistics for every store.

        Returns:
            Mapping of store name to hits, misses, size and hit rate. The
            search entry also carries total queries and average response time
        """
        performance = self._performance.to_dict()
        search_stats = self._search.get_stats()
        search_stats["total_queries"] = performance["total_queries"]
        search_stats["average_response_time_ms"] = performance["avg_response_time_ms"]
        return {
            "search": search_stats,
            "suggestions": self._suggestions.get_stats(),
        }

    def performance_summary(self) -> dict[str, float | int | None]:
        """Summarize recorded response times."""
        return self._performance.to_dict()

    def get_popular_searches(self, limit: int = 10) -> list[dict[str, Any]]:
        """Live cached searches ordered by hit count, most popular first.

        Args:
            limit: Maximum number of searches to return

        Returns:
            List of dicts with query, filters, access_count and last_accessed
        """
        entries = sorted(self._search.entries(), key=lambda e: e.access_count, reverse=True)
        return [
            {
                "query": entry.query,
                "filters": dict(entry.filters),
                "access_count": entry.access_count,
                "last_accessed": entry.last_accessed,
            }
            for entry in entries[:limit]
        ]

    def get_recent_searches(self, limit: int = 10) -> list[dict[str, Any]]:
        """Live cached searches ordered by creation time, newest first.

        Args:
            limit: Maximum number of searches to return

        Returns:
            List of dicts with query, filters and timestamp
        """
        entries = sorted(self._search.entries(), key=lambda e: e.created_at, reverse=True)
        return [
            {"query": entry.query, "filters": dict(entry.filters), "timestamp": entry.created_at}
            for entry in entries[:limit]
        ]

    def invalidate_query(self, query: str, filters: Mapping[str, Any] | None = None) -> bool:
        """Drop the cached search and suggestions for a query.

        Returns:
            True if anything was removed
        """
        removed_search = self._search.delete(make_cache_key(query, filters))
        removed_suggestions = self._suggestions.delete(make_cache_key(query))
        return removed_search or removed_suggestions

    def invalidate_pattern(self, pattern: str | re.Pattern[str]) -> int:
        """Drop every cached search whose original query matches pattern.

        Args:
            pattern: Regular expression, searched (not fully matched)

        Returns:
            Number of search entries removed
        """
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
        count = self._search.delete_where(lambda entry: compiled.search(entry.query) is not None)
        logger.info("Invalidated %d cached searches matching %s", count, compiled.pattern)
        return count

    def sweep_expired(self) -> int:
        """Remove expired entries from every store.

        Returns:
            Total number of entries removed
        """
        return sum(
            store.sweep_expired() for store in (self._search, self._suggestions)
        )

    def clear_all(self) -> int:
        """Clear every store and the performance log.

        Returns:
            Number of entries removed
        """
        count = self._search.clear() + self._suggestions.clear()
        self._performance.reset()
        return count

    @property
    def search_ttl_ms(self) -> int:
        """Default TTL for search results."""
        return self._search_ttl_ms

    @property
    def suggestion_ttl_ms(self) -> int:
        """Default TTL for suggestions."""
        return self._suggestion_ttl_ms

    @property
    def search_store(self) -> CacheStore:
        """Get the underlying search store (for testing)."""
        return self._search
