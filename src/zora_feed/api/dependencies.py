"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - One SWRCache per feed, built once in the lifespan
    - Handlers stored in app.state.feed_handlers, keyed by feed name
    - Dependency functions retrieve them from request.app.state
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Callable

from fastapi import FastAPI, Request

from zora_feed.config import Settings
from zora_feed.handlers import FeedHandler
from zora_feed.protocols import UpstreamClient
from zora_feed.repositories import ZoraClient, coin_posts_operation, market_cap_operation
from zora_feed.services import SWRCache

logger = logging.getLogger(__name__)

MARKET_CAP_FEED = "zora-marketcap"
POSTS_FEED = "walletconnect-posts"


def build_feeds(settings: Settings, client: UpstreamClient) -> dict[str, SWRCache[Any]]:
    """Create one cache per feed, all sharing the configured timings.

    Args:
        settings: Application settings
        client: Upstream API client used by every fetch operation

    Returns:
        Mapping of feed name to its cache
    """
    cache_settings = settings.cache_settings()
    return {
        MARKET_CAP_FEED: SWRCache.create(
            operation=market_cap_operation(client, settings.target_handle),
            settings=cache_settings,
            name=MARKET_CAP_FEED,
        ),
        POSTS_FEED: SWRCache.create(
            operation=coin_posts_operation(client, settings.posts_coin_address, settings.chain_id),
            settings=cache_settings,
            name=POSTS_FEED,
        ),
    }


def get_feed_handlers(request: Request) -> dict[str, FeedHandler]:
    """Dependency injection for all feed handlers from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        Mapping of feed name to handler

    Raises:
        RuntimeError: If handlers are not initialized
    """
    handlers = getattr(request.app.state, "feed_handlers", None)
    if handlers is None:
        raise RuntimeError("Feed handlers not initialized. Check lifespan setup.")
    return handlers


def feed_handler(name: str) -> Callable[[Request], FeedHandler]:
    """Build a dependency returning the handler of one feed."""

    def get_handler(request: Request) -> FeedHandler:
        return get_feed_handlers(request)[name]

    return get_handler


def create_lifespan(settings: Settings, feeds: dict[str, SWRCache[Any]] | None = None):
    """Create the lifespan context manager for the app.

    Args:
        settings: Application settings
        feeds: Pre-built caches keyed by feed name. If None, caches backed by
            a ZoraClient are created and the client is closed on shutdown.

    Returns:
        Lifespan context manager for FastAPI
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client: ZoraClient | None = None
        caches = feeds
        if caches is None:
            client = ZoraClient.create(api_key=settings.zora_api_key, base_url=settings.zora_base_url)
            caches = build_feeds(settings, client)

        upstream_configured = bool(settings.zora_api_key)
        if not upstream_configured:
            logger.warning("ZORA_API_KEY not set; feed requests will fail")

        app.state.settings = settings
        app.state.feed_handlers = {
            name: FeedHandler(cache=cache, upstream_configured=upstream_configured)
            for name, cache in caches.items()
        }
        logger.info(
            "Feeds ready: %s (fresh %dms, stale +%dms, timeout %dms, retries %d)",
            ", ".join(caches),
            settings.fresh_ttl_ms,
            settings.stale_extension_ms,
            settings.fetch_timeout_ms,
            settings.max_retries,
        )

        yield

        del app.state.feed_handlers
        del app.state.settings
        if client is not None:
            await client.close()
        logger.info("Feeds shut down")

    return lifespan
