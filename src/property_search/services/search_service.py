"""Property search service.

Orchestrates a search request: cache probe, candidate retrieval, fuzzy
ranking, structured filtering, cache population and latency recording.

Retrieval and ranking are strictly separate stages. The source only narrows
candidates by structured criteria (location); text relevance is decided by
the fuzzy matcher alone.
"""

import logging
import math
import time
from datetime import datetime, timezone
from typing import Any

from property_search.config import Settings, settings as default_settings
from property_search.entities import MatchResult, PropertyRecord
from property_search.matcher import (
    REAL_ESTATE_DICTIONARY,
    auto_correct_query,
    generate_suggestions,
    search_records,
    suggestion_category,
)
from property_search.models import RankedSuggestion, SearchOutcome, SuggestionOutcome
from property_search.protocols import PropertySource
from property_search.services.search_cache_service import SearchCacheService

logger = logging.getLogger(__name__)

ANY_BHK = "any"

# Suggestions are ranked and cached as a pool, responses are sliced from it
SUGGESTION_POOL_SIZE = 50
SUGGESTION_PROPERTY_LIMIT = 50
SUGGESTION_LOCATION_LIMIT = 30
TREND_LIMIT = 5

POPULAR_SEARCHES: tuple[str, ...] = (
    "2 BHK apartment",
    "3 BHK villa",
    "Ready to move",
    "Under 50L",
    "Swimming pool",
    "Mumbai",
    "Bangalore",
    "Delhi NCR",
)
PROPERTY_TYPES: tuple[str, ...] = ("Apartment", "House", "Villa", "Penthouse", "Commercial", "Land")
AMENITIES: tuple[str, ...] = ("Swimming Pool", "Gym", "Parking", "Garden", "Clubhouse", "Playground")


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def parse_bhk(bhk: str | int | None) -> int | None:
    """Parse a bhk filter value. "Any" and empty values disable the filter.

    Raises:
        ValueError: If the value is neither "Any" nor a positive integer
    """
    if bhk is None or (isinstance(bhk, str) and bhk.strip().lower() in ("", ANY_BHK)):
        return None
    value = int(bhk)
    if value < 1:
        raise ValueError(f"bhk must be a positive integer, got {bhk}")
    return value


def matches_structured_filters(
    record: PropertyRecord,
    bhk: int | None = None,
    min_price: int | None = None,
    max_price: int | None = None,
) -> bool:
    """Check a property against the bedroom and price filters.

    A price filter keeps properties whose lowest configured price lies in
    [min_price, max_price]; properties without any price are dropped when a
    price filter is set.
    """
    if bhk is not None and not record.has_bhk(bhk):
        return False

    if min_price is not None or max_price is not None:
        lowest = record.lowest_price
        if lowest is None:
            return False
        low = min_price if min_price is not None else 0
        high = max_price if max_price is not None else math.inf
        if not low <= lowest <= high:
            return False

    return True


class PropertySearchService:
    """Search orchestration over a property source and the search cache.

    Example:
        ```python
        service = PropertySearchService.create(
            source=InMemoryPropertyRepository.from_json_file("properties.json"),
            cache=SearchCacheService.create(),
        )
        outcome = service.search("3 bhk mumbai", limit=10)
        outcome.cache_hit, outcome.response_time_ms
        ```
    """

    def __init__(
        self,
        source: PropertySource,
        cache: SearchCacheService,
        search_threshold: float | None = None,
        suggestion_threshold: float | None = None,
    ) -> None:
        """Initialize the search service.

        Args:
            source: Candidate retrieval (required).
            cache: Search cache (required).
            search_threshold: Minimum fuzzy score for search results. Defaults to settings.
            suggestion_threshold: Minimum fuzzy score for suggestions. Defaults to settings.
        """
        self._source = source
        self._cache = cache
        self._search_threshold = (
            default_settings.search_fuzzy_threshold if search_threshold is None else search_threshold
        )
        self._suggestion_threshold = (
            default_settings.suggestion_fuzzy_threshold
            if suggestion_threshold is None
            else suggestion_threshold
        )

    @classmethod
    def create(
        cls,
        source: PropertySource,
        cache: SearchCacheService,
        settings: Settings | None = None,
    ) -> "PropertySearchService":
        """Factory method taking thresholds from settings.

        Args:
            source: Candidate retrieval (required).
            cache: Search cache (required).
            settings: If None, uses the environment settings.

        Returns:
            Configured PropertySearchService instance
        """
        settings = settings or default_settings
        return cls(
            source=source,
            cache=cache,
            search_threshold=settings.search_fuzzy_threshold,
            suggestion_threshold=settings.suggestion_fuzzy_threshold,
        )

    def search(
        self,
        query: str = "",
        location: str | None = None,
        bhk: str | int | None = None,
        min_price: int | None = None,
        max_price: int | None = None,
        limit: int = 20,
    ) -> SearchOutcome:
        """Search active properties.

        Business logic:
        1. Probe the cache with the canonical key of query and filters
        2. On miss, fetch candidates for the location from the source
        3. Rank by fuzzy relevance when there is query text
        4. Apply bedroom and price filters, then truncate to limit
        5. Cache the results and record the response time

        Args:
            query: Free-text query. Blank means browse without ranking.
            location: Location id passed to retrieval
            bhk: Bedroom count filter, "Any" to disable
            min_price: Minimum of the lowest configured price
            max_price: Maximum of the lowest configured price
            limit: Maximum number of results

        Returns:
            SearchOutcome with results and cache/latency metadata

        Raises:
            ValueError: If bhk, prices or limit are invalid
        """
        start = time.perf_counter()
        query = query or ""
        bhk_value = parse_bhk(bhk)
        if limit < 0:
            raise ValueError(f"limit must not be negative, got {limit}")
        if min_price is not None and max_price is not None and min_price > max_price:
            raise ValueError("min_price must not exceed max_price")

        fuzzy = bool(query.strip())
        filters: dict[str, Any] = {
            "location": location,
            "bhk": bhk_value,
            "min_price": min_price,
            "max_price": max_price,
            "limit": limit,
        }

        cached = self._cache.get_cached_search_results(query, filters)
        if cached is not None:
            elapsed = _elapsed_ms(start)
            self._cache.record_query_performance(query, elapsed)
            return SearchOutcome(results=cached, cache_hit=True, response_time_ms=elapsed, fuzzy=fuzzy)

        logger.debug("Search cache miss for %r %s", query, filters)
        candidates = self._source.fetch_active_properties(location_id=location)

        if fuzzy:
            ranked = search_records(
                query,
                candidates,
                threshold=self._search_threshold,
                max_results=len(candidates),
            )
        else:
            ranked = [MatchResult(record=candidate, score=0.0) for candidate in candidates]

        results = [
            match
            for match in ranked
            if matches_structured_filters(match.record, bhk_value, min_price, max_price)
        ][:limit]

        self._cache.cache_search_results(query, filters, results)
        elapsed = _elapsed_ms(start)
        self._cache.record_query_performance(query, elapsed)
        return SearchOutcome(results=results, cache_hit=False, response_time_ms=elapsed, fuzzy=fuzzy)

    def suggest(self, query: str, limit: int = 10) -> SuggestionOutcome:
        """Suggest search phrases for a partial or misspelled query.

        Args:
            query: The text typed so far
            limit: Maximum number of suggestions

        Returns:
            SuggestionOutcome with ranked suggestions and an auto-corrected query
        """
        start = time.perf_counter()
        if not query.strip():
            return SuggestionOutcome(suggestions=[], cache_hit=False, response_time_ms=0, corrected_query=query)

        corrected = auto_correct_query(query, REAL_ESTATE_DICTIONARY)
        cached = self._cache.get_cached_suggestions(query)
        if cached is not None:
            suggestions = [
                RankedSuggestion(text=text, category=suggestion_category(text))
                for text in cached[:limit]
            ]
            return SuggestionOutcome(
                suggestions=suggestions,
                cache_hit=True,
                response_time_ms=_elapsed_ms(start),
                corrected_query=corrected,
            )

        ranked = generate_suggestions(
            query,
            self.build_suggestion_dictionary(),
            threshold=self._suggestion_threshold,
            max_results=SUGGESTION_POOL_SIZE,
        )
        self._cache.cache_suggestions(query, [s.suggestion for s in ranked])

        suggestions = [
            RankedSuggestion(
                text=s.suggestion,
                category=suggestion_category(s.suggestion),
                score=s.score,
                type=s.type,
            )
            for s in ranked[:limit]
        ]
        return SuggestionOutcome(
            suggestions=suggestions,
            cache_hit=False,
            response_time_ms=_elapsed_ms(start),
            corrected_query=corrected,
        )

    def build_suggestion_dictionary(self) -> list[str]:
        """Collect suggestion candidates from listings, locations and fixed phrases.

        Returns:
            Unique suggestion strings in source order
        """
        candidates: list[str] = []

        for record in self._source.fetch_active_properties()[:SUGGESTION_PROPERTY_LIMIT]:
            if record.title:
                candidates.append(record.title)
                if record.property_type:
                    candidates.append(f"{record.property_type} in {record.title}")

        for location in self._source.fetch_active_locations()[:SUGGESTION_LOCATION_LIMIT]:
            candidates.append(location.name)
            if location.description:
                candidates.append(f"{location.name} - {location.description}")

        candidates.extend(POPULAR_SEARCHES)
        for property_type in PROPERTY_TYPES:
            candidates.extend(
                (f"{property_type} Properties", f"{property_type} for sale", f"{property_type} for rent")
            )
        for amenity in AMENITIES:
            candidates.extend((f"Properties with {amenity}", f"{amenity} facilities"))
        candidates.extend(REAL_ESTATE_DICTIONARY)

        return list(dict.fromkeys(candidates))

    def record_search_event(
        self,
        query: str,
        response_time_ms: int | None,
        filters: dict[str, Any] | None = None,
        result_count: int | None = None,
        user_id: str | None = None,
    ) -> None:
        """Record a client-reported search for analytics."""
        logger.info(
            "Search analytics: query=%r filters=%s response_time_ms=%s result_count=%s user_id=%s",
            query,
            filters or {},
            response_time_ms,
            result_count,
            user_id,
        )
        if response_time_ms is not None:
            self._cache.record_query_performance(query, response_time_ms)

    def analytics(self, limit: int = 20) -> dict[str, Any]:
        """Build the search analytics report.

        Args:
            limit: Maximum number of popular and recent searches

        Returns:
            Dict with cache stats, popular and recent searches, trends and
            performance metrics
        """
        stats = self._cache.get_cache_stats()
        popular = self._cache.get_popular_searches(limit)
        recent = self._cache.get_recent_searches(limit)
        performance = self._cache.performance_summary()

        return {
            "cache_stats": stats,
            "popular_searches": popular,
            "recent_searches": recent,
            "search_trends": search_trends(popular, recent),
            "performance_metrics": {
                "average_response_time_ms": performance["avg_response_time_ms"],
                "hit_rate": stats["search"]["hit_rate"],
                "total_queries": performance["total_queries"],
                "cache_size": stats["search"]["size"],
                "window_max_response_time_ms": performance["window_max_response_time_ms"],
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    def is_healthy(self) -> bool:
        """Check if the property source is reachable."""
        try:
            return self._source.health_check()
        except Exception:
            logger.exception("Property source health check failed")
            return False

    @property
    def cache(self) -> SearchCacheService:
        """Get the underlying cache service."""
        return self._cache


def search_trends(popular: list[dict[str, Any]], recent: list[dict[str, Any]]) -> dict[str, list[str]]:
    """Compare popular and recent searches.

    - trending_up: recent searches that have also been served from cache
    - trending_down: popular searches no longer among the recent ones
    - new_trends: recent searches not among the popular ones

    Each list holds at most five queries.
    """
    popular_queries = {item["query"] for item in popular}
    recent_queries = {item["query"] for item in recent}

    trending_up = [
        item["query"]
        for item in popular
        if item["access_count"] > 0 and item["query"] in recent_queries
    ]
    trending_down = [item["query"] for item in popular if item["query"] not in recent_queries]
    new_trends = [item["query"] for item in recent if item["query"] not in popular_queries]

    return {
        "trending_up": trending_up[:TREND_LIMIT],
        "trending_down": trending_down[:TREND_LIMIT],
        "new_trends": new_trends[:TREND_LIMIT],
    }
