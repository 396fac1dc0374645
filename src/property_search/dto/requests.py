"""Request DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field, model_validator


class SearchRequest(BaseModel):
    """Query parameters for GET /properties/search.

    The handler will convert this to internal calls to the service layer.
    """

    search: str = Field("", description="Free-text query, blank to browse", max_length=200)
    location: str | None = Field(None, description="Location id to restrict candidates to")
    bhk: str | None = Field(None, description="Bedroom count, or 'Any'")
    min_price: int | None = Field(None, description="Minimum lowest price", ge=0)
    max_price: int | None = Field(None, description="Maximum lowest price", ge=0)
    limit: int = Field(20, description="Maximum number of results", ge=1, le=100)


class SuggestionRequest(BaseModel):
    """Query parameters for GET /search/suggestions."""

    q: str = Field("", description="Text typed so far", max_length=200)
    limit: int = Field(10, description="Maximum number of suggestions", ge=1, le=50)


class SearchEventRequest(BaseModel):
    """Request DTO for a client-reported search (POST /search/analytics)."""

    query: str = Field(..., description="The query that was searched")
    filters: dict[str, Any] = Field(default_factory=dict, description="Filters used")
    response_time_ms: int | None = Field(None, description="Observed response time", ge=0)
    result_count: int | None = Field(None, description="Number of results shown", ge=0)
    user_id: str | None = Field(None, description="Optional user identifier")


class InvalidateCacheRequest(BaseModel):
    """Request DTO for invalidating cache entries.

    Either a query (with its filters) or a regular expression pattern over
    cached queries must be given.
    """

    query: str | None = Field(None, description="Invalidate this exact search")
    filters: dict[str, Any] | None = Field(None, description="Filters of the search to invalidate")
    pattern: str | None = Field(None, description="Regex matched against cached queries")

    @model_validator(mode="after")
    def require_target(self) -> "InvalidateCacheRequest":
        if self.query is None and self.pattern is None:
            raise ValueError("either query or pattern is required")
        return self
