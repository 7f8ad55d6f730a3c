"""Service layer: the cache core.

Architecture:
    Handler -> SWRCache -> RetryingTimedFetcher -> fetch operation
    (HTTP)  -> (freshness) -> (timeout/retry)   -> (upstream)

Usage:
    ```python
    from zora_feed.services import SWRCache

    cache = SWRCache.create(operation=load_market_cap, settings=settings.cache_settings())
    result = await cache.get()
    ```
"""

from .fetcher import RetryingTimedFetcher
from .swr_cache import SWRCache

__all__ = [
    "RetryingTimedFetcher",
    "SWRCache",
]
