import logging
from typing import Annotated, Any

from fastapi import FastAPI, Query, Response
from fastapi.middleware.cors import CORSMiddleware

from property_search.api.dependencies import HandlerDep, lifespan
from property_search.config import Settings, settings as default_settings
from property_search.dto import (
    AnalyticsResponse,
    CacheStatsResponse,
    HealthCheckResponse,
    InvalidateCacheRequest,
    InvalidateCacheResponse,
    SearchEventRequest,
    SearchRequest,
    SearchResponse,
    SuggestionRequest,
    SuggestionsResponse,
)
from property_search.protocols import PropertySource

API_VERSION = "0.1.0"
API_DESCRIPTION = "Fuzzy property search with an in-process result and suggestion cache"


def create_app(
    property_source: PropertySource | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        property_source: Candidate source. If None, built from settings at startup.
        settings: Application settings. If None, uses the environment settings.

    Returns:
        Configured FastAPI app
    """
    settings = settings or default_settings
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Property Search API",
        description=API_DESCRIPTION,
        version=API_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.property_source = property_source

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Cache", "X-Response-Time", "X-Fuzzy-Search"],
    )

    @app.get("/")
    def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Property Search API",
            "version": API_VERSION,
            "description": API_DESCRIPTION,
            "endpoints": {
                "search": "/properties/search",
                "suggestions": "/search/suggestions",
                "analytics": "/search/analytics",
                "cache": "/cache",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return handler.health_check()

    @app.get("/properties/search", response_model=SearchResponse)
    def search_properties(
        params: Annotated[SearchRequest, Query()],
        response: Response,
        handler: HandlerDep,
    ) -> SearchResponse:
        """Search active properties with fuzzy relevance ranking.

        Sets X-Cache (HIT/MISS), X-Response-Time and X-Fuzzy-Search headers.
        """
        return handler.search(params, response)

    @app.get("/search/suggestions", response_model=SuggestionsResponse)
    def search_suggestions(
        params: Annotated[SuggestionRequest, Query()],
        response: Response,
        handler: HandlerDep,
    ) -> SuggestionsResponse:
        """Suggest search phrases for partial or misspelled input."""
        return handler.suggestions(params, response)

    @app.get("/search/analytics", response_model=AnalyticsResponse)
    def search_analytics(response: Response, handler: HandlerDep) -> AnalyticsResponse:
        """Cache statistics, popular and recent searches, trends and latency."""
        return handler.analytics(response)

    @app.post("/search/analytics", response_model=dict[str, bool])
    def record_search_event(request: SearchEventRequest, handler: HandlerDep) -> dict:
        """Record a client-reported search and its response time."""
        return handler.record_search_event(request)

    @app.get("/cache/stats", response_model=CacheStatsResponse)
    def cache_stats(handler: HandlerDep) -> CacheStatsResponse:
        """Get cache statistics."""
        return handler.get_stats()

    @app.post("/cache/invalidate", response_model=InvalidateCacheResponse)
    def invalidate_cache(request: InvalidateCacheRequest, handler: HandlerDep) -> InvalidateCacheResponse:
        """Invalidate one search or every search whose query matches a pattern."""
        return handler.invalidate(request)

    @app.delete("/cache", response_model=InvalidateCacheResponse)
    def clear_cache(handler: HandlerDep) -> InvalidateCacheResponse:
        """Clear all cached searches, suggestions and performance samples."""
        return handler.clear_cache()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "property_search.api.app:app",
        host=default_settings.api_host,
        port=default_settings.api_port,
        reload=default_settings.api_reload,
    )
