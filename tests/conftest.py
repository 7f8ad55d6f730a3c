"""
Shared fixtures for zora-feed tests.

Provides a controllable clock and a sleep that records backoff delays
instead of waiting, so cache timing can be tested deterministically.
"""

import asyncio
import random

import pytest

from zora_feed.services import RetryingTimedFetcher, SWRCache


class FakeClock:
    """Monotonic clock driven by the test, in seconds."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def set_ms(self, ms: float) -> None:
        self.now = ms / 1000


class RecordingSleep:
    """Stand-in for asyncio.sleep that only records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        await asyncio.sleep(0)


async def drain(cache: SWRCache) -> None:
    """Wait until the cache has no fetch in flight and callbacks have run."""
    while cache.is_fetching:
        await asyncio.sleep(0.001)
    await asyncio.sleep(0)
    await asyncio.sleep(0)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def make_fetcher(recording_sleep):
    """Build fetchers that never really sleep between retries."""

    def factory(timeout_ms: float = 1000, max_retries: int = 2, backoff_base_ms: float = 250):
        return RetryingTimedFetcher(
            timeout_ms=timeout_ms,
            max_retries=max_retries,
            backoff_base_ms=backoff_base_ms,
            sleep=recording_sleep,
            rng=random.Random(42),
        )

    return factory


@pytest.fixture
def make_cache(clock, make_fetcher):
    """Build caches on the fake clock with 30s fresh / 60s stale windows by default."""

    def factory(
        operation,
        fresh_ttl_ms: float = 30_000,
        stale_extension_ms: float = 60_000,
        **fetcher_kwargs,
    ):
        return SWRCache(
            operation=operation,
            fetcher=make_fetcher(**fetcher_kwargs),
            fresh_ttl_ms=fresh_ttl_ms,
            stale_extension_ms=stale_extension_ms,
            name="test-feed",
            clock=clock,
        )

    return factory
