"""HTTP handlers for feed requests.

Handlers convert cache results into DTOs and decide what the client sees
when upstream is down.
"""

import dataclasses
import logging
import time
from typing import Any

from fastapi import HTTPException, status

from zora_feed.dto import FeedMeta, FeedResponse
from zora_feed.exceptions import FetchFailed
from zora_feed.services import SWRCache

logger = logging.getLogger(__name__)

FALLBACK_SOURCE = "fallback"


def to_payload(value: Any) -> Any:
    """Convert entity dataclasses (or lists of them) to JSON-ready data."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, list):
        return [to_payload(item) for item in value]
    return value


class FeedHandler:
    """HTTP handler for one cached feed.

    On a failed fetch, the last value the cache ever held is served as a
    degraded fallback; only when nothing was ever fetched does the request
    fail.

    Example:
        ```python
        handler = FeedHandler(cache=market_cap_cache, upstream_configured=True)

        @app.get("/api/zora-marketcap", response_model=FeedResponse)
        async def market_cap():
            return await handler.get_feed()
        ```
    """

    def __init__(self, cache: SWRCache, upstream_configured: bool = True) -> None:
        """Initialize the feed handler.

        Args:
            cache: The cache serving this feed (required).
            upstream_configured: False when the upstream API key is missing.
        """
        self._cache = cache
        self._upstream_configured = upstream_configured

    @property
    def name(self) -> str:
        return self._cache.name

    @property
    def cache(self) -> SWRCache:
        return self._cache

    @property
    def cache_control(self) -> str:
        """Cache-Control header mirroring the in-process freshness windows."""
        fresh_s = int(self._cache.fresh_ttl_ms // 1000)
        stale_s = int(self._cache.stale_extension_ms // 1000)
        return f"public, s-maxage={fresh_s}, stale-while-revalidate={stale_s}"

    async def get_feed(self) -> FeedResponse:
        """Handle GET requests for the feed.

        Returns:
            FeedResponse with the data and how it was served

        Raises:
            HTTPException: 500 if upstream is not configured, or if the fetch
                failed and there is nothing cached to fall back to
        """
        if not self._upstream_configured:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={
                    "error": "Server misconfiguration",
                    "message": "ZORA_API_KEY not set",
                },
            )

        start_time = time.perf_counter()
        try:
            result = await self._cache.get()
        except FetchFailed as e:
            return self._fallback(e)

        duration_ms = (time.perf_counter() - start_time) * 1000
        return FeedResponse(
            success=True,
            data=to_payload(result.value),
            meta=FeedMeta(
                source=result.source.value,
                feed=self.name,
                duration_ms=duration_ms,
                cache_ttl_ms=self._cache.fresh_ttl_ms,
            ),
        )

    def _fallback(self, error: FetchFailed) -> FeedResponse:
        last_known = self._cache.peek()
        if last_known is None:
            logger.error("%s: fetch failed with nothing cached: %s", self.name, error.cause)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={
                    "success": False,
                    "error": f"Failed to fetch {self.name}",
                    "message": str(error.cause),
                },
            ) from error

        logger.warning("%s: serving last known value after error: %s", self.name, error.cause)
        return FeedResponse(
            success=True,
            data=to_payload(last_known),
            meta=FeedMeta(source=FALLBACK_SOURCE, feed=self.name, error=str(error.cause)),
        )
