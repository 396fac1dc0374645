"""Response DTOs for API endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ConfigurationItem(BaseModel):
    """Unit configuration of a property."""

    id: str
    bhk: int
    price: int | None = None
    area: float | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    ready_by: str | None = None


class PropertyMatchItem(BaseModel):
    """Single property in a search response."""

    id: str = Field(..., description="Property identifier")
    slug: str | None = Field(None, description="URL slug")
    title: str = Field("", description="Listing title")
    description: str = Field("", description="Listing description")
    location: str = Field("", description="Location name")
    property_type: str = Field("", description="Property type")
    status: str = Field("active", description="Listing status")
    created_at: datetime | None = Field(None, description="Listing creation time")
    configurations: list[ConfigurationItem] = Field(default_factory=list)
    fuzzy_score: float | None = Field(
        None,
        description="Relevance score (1 = exact match), null when browsing without text",
        ge=0.0,
        le=1.0,
    )
    matched_fields: list[str] = Field(
        default_factory=list,
        description="Fields that contributed to the score, in declared order",
    )


class SearchResponse(BaseModel):
    """Response DTO for property search."""

    properties: list[PropertyMatchItem] = Field(default_factory=list)
    total: int = Field(..., description="Number of properties returned", ge=0)
    cached: bool = Field(..., description="Whether the results came from cache")
    search_time_ms: int = Field(..., description="Time taken to answer in milliseconds", ge=0)
    fuzzy_search: bool = Field(..., description="Whether text relevance ranking was applied")


class SuggestionItem(BaseModel):
    """Single suggestion item."""

    text: str = Field(..., description="Suggested search phrase")
    category: str = Field(..., description="property_type, location, configuration, amenity, status or general")
    score: float | None = Field(None, description="Similarity, null when served from cache", ge=0.0, le=1.0)
    type: str | None = Field(None, description="exact, prefix, partial or fuzzy; null when served from cache")


class SuggestionsResponse(BaseModel):
    """Response DTO for search suggestions."""

    query: str = Field(..., description="The original query")
    suggestions: list[SuggestionItem] = Field(default_factory=list)
    total: int = Field(..., ge=0)
    cached: bool = Field(..., description="Whether the suggestions came from cache")
    search_time_ms: int = Field(..., ge=0)
    corrected_query: str = Field(..., description="Query with common misspellings corrected")


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    search: dict[str, Any] = Field(..., description="Search result store statistics")
    suggestions: dict[str, Any] = Field(..., description="Suggestion store statistics")
    performance: dict[str, Any] = Field(..., description="Query response time summary")


class AnalyticsResponse(BaseModel):
    """Response DTO for search analytics."""

    cache_stats: dict[str, dict[str, Any]]
    popular_searches: list[dict[str, Any]]
    recent_searches: list[dict[str, Any]]
    search_trends: dict[str, list[str]]
    performance_metrics: dict[str, Any]
    timestamp: str


class InvalidateCacheResponse(BaseModel):
    """Response DTO for cache invalidation and clearing."""

    success: bool = Field(..., description="Whether the operation succeeded")
    deleted_count: int = Field(..., description="Number of entries removed", ge=0)
    message: str = Field(..., description="Human-readable status message")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_healthy: bool = Field(..., description="Whether the in-process cache is usable")
    source_healthy: bool = Field(..., description="Whether the property source is reachable")
