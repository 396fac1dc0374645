"""HTTP handlers for search operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, headers and error handling.
"""

import logging
import re

from fastapi import HTTPException, Response, status

from property_search.config import Settings, settings as default_settings
from property_search.dto import (
    AnalyticsResponse,
    CacheStatsResponse,
    ConfigurationItem,
    HealthCheckResponse,
    InvalidateCacheRequest,
    InvalidateCacheResponse,
    PropertyMatchItem,
    SearchEventRequest,
    SearchRequest,
    SearchResponse,
    SuggestionItem,
    SuggestionRequest,
    SuggestionsResponse,
)
from property_search.entities import MatchResult
from property_search.services import PropertySearchService

logger = logging.getLogger(__name__)


def to_property_item(match: MatchResult, fuzzy: bool) -> PropertyMatchItem:
    """Convert a match result to its API representation."""
    record = match.record
    return PropertyMatchItem(
        id=record.id,
        slug=record.slug,
        title=record.title,
        description=record.description,
        location=record.location,
        property_type=record.property_type,
        status=record.status,
        created_at=record.created_at,
        configurations=[
            ConfigurationItem(
                id=c.id,
                bhk=c.bhk,
                price=c.price,
                area=c.area,
                bedrooms=c.bedrooms,
                bathrooms=c.bathrooms,
                ready_by=c.ready_by,
            )
            for c in record.configurations
        ],
        fuzzy_score=match.score if fuzzy else None,
        matched_fields=list(match.matched_fields),
    )


class SearchHandler:
    """HTTP handlers for search operations.

    This handler delegates business logic to PropertySearchService
    and handles HTTP-specific concerns like:
    - Converting results to DTOs
    - Setting X-Cache, X-Response-Time and Cache-Control headers
    - Error handling and responses

    Example:
        ```python
        handler = SearchHandler(search_service=search_service)

        @app.get("/properties/search", response_model=SearchResponse)
        def search(params: Annotated[SearchRequest, Query()], response: Response):
            return handler.search(params, response)
        ```
    """

    def __init__(self, search_service: PropertySearchService, settings: Settings | None = None) -> None:
        """Initialize the search handler.

        Args:
            search_service: The search service for business logic (required).
            settings: Used for Cache-Control max-age values. Defaults to settings.
        """
        self._search = search_service
        self._settings = settings or default_settings

    def search(self, request: SearchRequest, response: Response) -> SearchResponse:
        """Handle GET /properties/search requests.

        Args:
            request: The search request DTO
            response: Response used to set observability headers

        Returns:
            SearchResponse with ranked properties

        Raises:
            HTTPException: 400 for invalid filters, 500 for unexpected errors
        """
        try:
            outcome = self._search.search(
                query=request.search,
                location=request.location,
                bhk=request.bhk,
                min_price=request.min_price,
                max_price=request.max_price,
                limit=request.limit,
            )
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except Exception as e:
            logger.exception("Search failed")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to search properties: {e}",
            ) from e

        response.headers["Cache-Control"] = f"public, max-age={self._settings.search_cache_max_age_seconds}"
        response.headers["X-Cache"] = "HIT" if outcome.cache_hit else "MISS"
        response.headers["X-Response-Time"] = str(outcome.response_time_ms)
        response.headers["X-Fuzzy-Search"] = "enabled" if outcome.fuzzy else "disabled"

        return SearchResponse(
            properties=[to_property_item(match, outcome.fuzzy) for match in outcome.results],
            total=outcome.total,
            cached=outcome.cache_hit,
            search_time_ms=outcome.response_time_ms,
            fuzzy_search=outcome.fuzzy,
        )

    def suggestions(self, request: SuggestionRequest, response: Response) -> SuggestionsResponse:
        """Handle GET /search/suggestions requests."""
        try:
            outcome = self._search.suggest(request.q, limit=request.limit)
        except Exception as e:
            logger.exception("Suggestions failed")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to generate suggestions: {e}",
            ) from e

        response.headers["Cache-Control"] = f"public, max-age={self._settings.suggestion_cache_max_age_seconds}"
        response.headers["X-Cache"] = "HIT" if outcome.cache_hit else "MISS"
        response.headers["X-Response-Time"] = str(outcome.response_time_ms)

        return SuggestionsResponse(
            query=request.q,
            suggestions=[
                SuggestionItem(text=s.text, category=s.category, score=s.score, type=s.type)
                for s in outcome.suggestions
            ],
            total=len(outcome.suggestions),
            cached=outcome.cache_hit,
            search_time_ms=outcome.response_time_ms,
            corrected_query=outcome.corrected_query,
        )

    def analytics(self, response: Response) -> AnalyticsResponse:
        """Handle GET /search/analytics requests."""
        try:
            report = self._search.analytics()
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to build analytics: {e}",
            ) from e

        response.headers["Cache-Control"] = "no-cache"
        return AnalyticsResponse(**report)

    def record_search_event(self, request: SearchEventRequest) -> dict:
        """Handle POST /search/analytics requests."""
        self._search.record_search_event(
            query=request.query,
            response_time_ms=request.response_time_ms,
            filters=request.filters,
            result_count=request.result_count,
            user_id=request.user_id,
        )
        return {"success": True}

    def get_stats(self) -> CacheStatsResponse:
        """Handle GET /cache/stats requests."""
        cache = self._search.cache
        stats = cache.get_cache_stats()
        return CacheStatsResponse(
            search=stats["search"],
            suggestions=stats["suggestions"],
            performance=cache.performance_summary(),
        )

    def invalidate(self, request: InvalidateCacheRequest) -> InvalidateCacheResponse:
        """Handle POST /cache/invalidate requests.

        Raises:
            HTTPException: 400 if the pattern is not a valid regular expression
        """
        cache = self._search.cache
        count = 0

        if request.query is not None:
            count += int(cache.invalidate_query(request.query, request.filters))

        if request.pattern is not None:
            try:
                count += cache.invalidate_pattern(request.pattern)
            except re.error as e:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Invalid pattern: {e}",
                ) from e

        return InvalidateCacheResponse(
            success=True,
            deleted_count=count,
            message=f"Invalidated {count} cache entries",
        )

    def clear_cache(self) -> InvalidateCacheResponse:
        """Handle DELETE /cache requests."""
        count = self._search.cache.clear_all()
        return InvalidateCacheResponse(
            success=True,
            deleted_count=count,
            message="Cache cleared successfully",
        )

    def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        source_healthy = self._search.is_healthy()
        return HealthCheckResponse(
            status="healthy" if source_healthy else "unhealthy",
            cache_healthy=True,
            source_healthy=source_healthy,
        )
