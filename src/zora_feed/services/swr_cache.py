"""Single-flight stale-while-revalidate cache.

One instance holds exactly one cached value for one upstream resource. All
state changes happen between await points on the event loop, so no locks
are needed; the entry is replaced wholesale and the in-flight handle is
cleared in the same synchronous step.
"""

import asyncio
import logging
import time
from functools import partial
from typing import Callable, Generic, TypeVar

from zora_feed.config import CacheSettings
from zora_feed.entities import CacheEntry, CacheResult, CacheStats, SourceTag
from zora_feed.exceptions import FetchFailed
from zora_feed.protocols import FetchOperation
from zora_feed.services.fetcher import RetryingTimedFetcher

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SWRCache(Generic[T]):
    """Serve one upstream resource with fresh and stale windows.

    ``get()`` is the only entry point:

    - fresh hit: cached value, no fetch
    - stale hit: cached value, background refresh started if none is running
    - join: a fetch is already running, wait for it and return its result
    - miss: foreground fetch, install and return it

    At most one fetch runs at any time, whether started by a miss or by a
    stale hit. A foreground failure raises ``FetchFailed``. A background
    failure is logged, the cached value stays as it was, and callers that
    were waiting on it retry as a miss.

    Example:
        ```python
        cache = SWRCache.create(operation=load_market_cap, settings=CacheSettings())
        result = await cache.get()
        print(result.value, result.source)
        ```
    """

    def __init__(
        self,
        operation: FetchOperation[T],
        fetcher: RetryingTimedFetcher,
        fresh_ttl_ms: float,
        stale_extension_ms: float,
        name: str = "feed",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            operation: Zero-argument coroutine function fetching fresh data.
            fetcher: Runs the operation with timeout and retries.
            fresh_ttl_ms: How long a value is served without background work.
            stale_extension_ms: How much longer it is served while a refresh runs.
            name: Label used in logs and stats.
            clock: Monotonic clock returning seconds.
        """
        if fresh_ttl_ms < 0 or stale_extension_ms < 0:
            raise ValueError("TTLs must be non-negative")

        self._operation = operation
        self._fetcher = fetcher
        self._fresh_ttl = fresh_ttl_ms / 1000
        self._stale_extension = stale_extension_ms / 1000
        self._name = name
        self._clock = clock

        self._entry: CacheEntry[T] | None = None
        self._inflight: asyncio.Task[T] | None = None
        self._inflight_background = False
        self._stats = CacheStats()

    @classmethod
    def create(
        cls,
        operation: FetchOperation[T],
        settings: CacheSettings,
        name: str = "feed",
    ) -> "SWRCache[T]":
        """Factory method wiring a fetcher from cache settings.

        Args:
            operation: Zero-argument coroutine function fetching fresh data
            settings: Cache timings
            name: Label used in logs and stats

        Returns:
            Configured SWRCache
        """
        return cls(
            operation=operation,
            fetcher=RetryingTimedFetcher.create(settings),
            fresh_ttl_ms=settings.fresh_ttl_ms,
            stale_extension_ms=settings.stale_extension_ms,
            name=name,
        )

    async def get(self) -> CacheResult[T]:
        """Return the current value and where it came from.

        Returns:
            CacheResult with the value and its SourceTag

        Raises:
            FetchFailed: If this call waited on a foreground fetch and it failed
        """
        while True:
            now = self._clock()
            entry = self._entry

            if entry is not None and entry.is_fresh(now):
                return self._served(entry.value, SourceTag.FRESH)

            if entry is not None and entry.is_servable(now):
                if self._inflight is None:
                    logger.debug("%s: stale, starting background revalidation", self._name)
                    self._start_fetch(background=True)
                return self._served(entry.value, SourceTag.STALE)

            if self._inflight is not None:
                if self._inflight_background:
                    # A failed background refresh never reaches callers: look again as a miss.
                    try:
                        value = await asyncio.shield(self._inflight)
                    except Exception:
                        continue
                else:
                    value = await self._wait(self._inflight)
                return self._served(value, SourceTag.REVALIDATED)

            value = await self._wait(self._start_fetch(background=False))
            return self._served(value, SourceTag.LIVE)

    def peek(self) -> T | None:
        """Return the last successfully fetched value, however old, or None."""
        return self._entry.value if self._entry is not None else None

    @property
    def has_value(self) -> bool:
        return self._entry is not None

    @property
    def is_fetching(self) -> bool:
        return self._inflight is not None

    @property
    def name(self) -> str:
        return self._name

    @property
    def fresh_ttl_ms(self) -> float:
        return self._fresh_ttl * 1000

    @property
    def stale_extension_ms(self) -> float:
        return self._stale_extension * 1000

    @property
    def stats(self) -> CacheStats:
        return self._stats

    def _served(self, value: T, source: SourceTag) -> CacheResult[T]:
        self._stats.record(source)
        return CacheResult(value=value, source=source)

    def _start_fetch(self, background: bool) -> "asyncio.Task[T]":
        task = asyncio.ensure_future(self._fetch_and_install())
        task.add_done_callback(partial(self._on_fetch_done, background=background))
        self._inflight = task
        self._inflight_background = background
        return task

    async def _fetch_and_install(self) -> T:
        try:
            value = await self._fetcher.fetch(self._operation, label=self._name)
        except BaseException:
            self._inflight = None
            raise
        self._update_cache(value)
        return value

    def _update_cache(self, value: T) -> None:
        """Install a freshly fetched value; the only mutator of the entry."""
        now = self._clock()
        fresh_until = now + self._fresh_ttl
        self._entry = CacheEntry(
            value=value,
            fresh_until=fresh_until,
            stale_until=fresh_until + self._stale_extension,
        )
        self._inflight = None
        logger.debug("%s: cache updated, fresh for %.1fs", self._name, self._fresh_ttl)

    async def _wait(self, task: "asyncio.Task[T]") -> T:
        # shield: a cancelled caller must not cancel the fetch other callers share
        try:
            return await asyncio.shield(task)
        except Exception as e:
            self._stats.failed_requests += 1
            raise FetchFailed(e) from e

    def _on_fetch_done(self, task: "asyncio.Task[T]", background: bool) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is None:
            return
        if background:
            self._stats.background_failures += 1
            logger.error("%s: background revalidation failed: %s", self._name, error)
        else:
            self._stats.fetch_failures += 1
