"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import (
    InvalidateCacheRequest,
    SearchEventRequest,
    SearchRequest,
    SuggestionRequest,
)
from .responses import (
    AnalyticsResponse,
    CacheStatsResponse,
    ConfigurationItem,
    HealthCheckResponse,
    InvalidateCacheResponse,
    PropertyMatchItem,
    SearchResponse,
    SuggestionItem,
    SuggestionsResponse,
)

__all__ = [
    "SearchRequest",
    "SuggestionRequest",
    "SearchEventRequest",
    "InvalidateCacheRequest",
    "ConfigurationItem",
    "PropertyMatchItem",
    "SearchResponse",
    "SuggestionItem",
    "SuggestionsResponse",
    "CacheStatsResponse",
    "AnalyticsResponse",
    "InvalidateCacheResponse",
    "HealthCheckResponse",
]
