"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from property_search.config import Settings
from property_search.handlers import SearchHandler
from property_search.protocols import PropertySource
from property_search.repositories import InMemoryPropertyRepository
from property_search.services import PropertySearchService, SearchCacheService

logger = logging.getLogger(__name__)


def get_search_service(request: Request) -> PropertySearchService:
    """Dependency injection for PropertySearchService from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The PropertySearchService instance from app.state

    Raises:
        RuntimeError: If service is not initialized
    """
    service = getattr(request.app.state, "search_service", None)
    if service is None:
        raise RuntimeError("PropertySearchService not initialized. Check lifespan setup.")
    return service


def get_handler(request: Request) -> SearchHandler:
    """Dependency injection for SearchHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The SearchHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "search_handler", None)
    if handler is None:
        raise RuntimeError("SearchHandler not initialized. Check lifespan setup.")
    return handler


def build_property_source(settings: Settings) -> PropertySource:
    """Create the property source configured by settings.

    Loads the JSON fixture at PROPERTY_DATA_PATH when set, otherwise starts
    with an empty in-memory repository.
    """
    if settings.property_data_path:
        return InMemoryPropertyRepository.from_json_file(settings.property_data_path)
    logger.warning("PROPERTY_DATA_PATH not set, starting with an empty property source")
    return InMemoryPropertyRepository()


async def sweep_periodically(cache: SearchCacheService, interval_ms: int) -> None:
    """Remove expired cache entries every interval until cancelled."""
    while True:
        await asyncio.sleep(interval_ms / 1000)
        removed = cache.sweep_expired()
        if removed:
            logger.info("Swept %d expired cache entries", removed)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Property source - app.state.property_source if preset, else from settings
    2. Cache service - explicitly constructed, one per app
    3. Search service - stored in app.state.search_service
    4. Handler (HTTP endpoints) - stored in app.state.search_handler

    Also runs a background task sweeping expired cache entries.

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Cleanup:
        Cancels the sweeper and removes all services from app.state on shutdown
    """
    settings: Settings = app.state.settings

    source = getattr(app.state, "property_source", None) or build_property_source(settings)
    cache_service = SearchCacheService.create(settings=settings)
    search_service = PropertySearchService.create(source=source, cache=cache_service, settings=settings)
    search_handler = SearchHandler(search_service=search_service, settings=settings)

    # Store in app.state (FastAPI pattern)
    app.state.property_source = source
    app.state.cache_service = cache_service
    app.state.search_service = search_service
    app.state.search_handler = search_handler

    sweeper = asyncio.create_task(sweep_periodically(cache_service, settings.cache_cleanup_interval_ms))

    logger.info("Search service initialized")
    logger.info(
        "Search cache TTL: %d ms, suggestion cache TTL: %d ms",
        settings.search_cache_ttl_ms,
        settings.suggestion_cache_ttl_ms,
    )
    logger.info(
        "Fuzzy thresholds: search %.2f, suggestions %.2f",
        settings.search_fuzzy_threshold,
        settings.suggestion_fuzzy_threshold,
    )

    yield

    sweeper.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweeper

    # Cleanup - remove from app.state
    del app.state.search_handler
    del app.state.search_service
    del app.state.cache_service
    del app.state.property_source
    logger.info("Search service shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[SearchHandler, Depends(get_handler)]
ServiceDep = Annotated[PropertySearchService, Depends(get_search_service)]
