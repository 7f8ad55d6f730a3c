"""Zora Feed - stale-while-revalidate cached feeds from the Zora coins API.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (FetchOperation, UpstreamClient)
    - services: Cache core (SWRCache, RetryingTimedFetcher)
    - repositories: Upstream access and fetch operations
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from zora_feed.config import CacheSettings
    from zora_feed.services import SWRCache

    cache = SWRCache.create(operation=load_data, settings=CacheSettings())
    result = await cache.get()  # CacheResult(value=..., source=SourceTag.LIVE)
    ```

For HTTP API:
    ```python
    from zora_feed.api.app import app
    ```
"""

from zora_feed.config import CacheSettings, Settings, get_settings
from zora_feed.entities import CacheEntry, CacheResult, CacheStats, MarketCapSnapshot, Post, SourceTag
from zora_feed.exceptions import FeedError, FetchFailed, FetchTimeout, UpstreamError
from zora_feed.handlers import FeedHandler
from zora_feed.protocols import FetchOperation, UpstreamClient
from zora_feed.repositories import ZoraClient, coin_posts_operation, market_cap_operation
from zora_feed.services import RetryingTimedFetcher, SWRCache

__all__ = [
    # Configuration
    "CacheSettings",
    "Settings",
    "get_settings",
    # Protocols (interfaces)
    "FetchOperation",
    "UpstreamClient",
    # Services (cache core)
    "RetryingTimedFetcher",
    "SWRCache",
    # Handlers (HTTP)
    "FeedHandler",
    # Repositories (upstream access)
    "ZoraClient",
    "coin_posts_operation",
    "market_cap_operation",
    # Entities (domain models)
    "CacheEntry",
    "CacheResult",
    "CacheStats",
    "SourceTag",
    "MarketCapSnapshot",
    "Post",
    # Errors
    "FeedError",
    "FetchFailed",
    "FetchTimeout",
    "UpstreamError",
]
