"""
Tests for RetryingTimedFetcher.
"""

import asyncio
import random
from unittest.mock import AsyncMock

import pytest

from zora_feed.config import CacheSettings
from zora_feed.exceptions import FetchTimeout, UpstreamError
from zora_feed.services import RetryingTimedFetcher


@pytest.mark.asyncio
async def test_success_on_first_attempt(make_fetcher, recording_sleep):
    """A successful attempt returns immediately without retries."""
    operation = AsyncMock(return_value="A")
    fetcher = make_fetcher()

    assert await fetcher.fetch(operation) == "A"
    assert operation.await_count == 1
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_permanent_failure_makes_max_retries_plus_one_attempts(make_fetcher, recording_sleep):
    """A failing operation is tried max_retries + 1 times, then the error propagates."""
    operation = AsyncMock(side_effect=RuntimeError("boom"))
    fetcher = make_fetcher(max_retries=2)

    with pytest.raises(UpstreamError, match="boom") as exc_info:
        await fetcher.fetch(operation)

    assert operation.await_count == 3
    assert len(recording_sleep.delays) == 2
    assert isinstance(exc_info.value.__cause__, RuntimeError)


@pytest.mark.asyncio
async def test_zero_retries_means_single_attempt(make_fetcher, recording_sleep):
    """With max_retries=0 there is exactly one attempt and no backoff."""
    operation = AsyncMock(side_effect=RuntimeError("boom"))
    fetcher = make_fetcher(max_retries=0)

    with pytest.raises(UpstreamError):
        await fetcher.fetch(operation)

    assert operation.await_count == 1
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_recovers_after_transient_failures(make_fetcher):
    """A later attempt's success is returned and no further attempts are made."""
    operation = AsyncMock(side_effect=[RuntimeError("one"), RuntimeError("two"), "ok", "unused"])
    fetcher = make_fetcher(max_retries=3)

    assert await fetcher.fetch(operation) == "ok"
    assert operation.await_count == 3


@pytest.mark.asyncio
async def test_backoff_delays_between_attempts(make_fetcher, recording_sleep):
    """Delay before attempt i+1 lies in [base * 2**i, base * 2**i + 100) ms."""
    operation = AsyncMock(side_effect=RuntimeError("down"))
    fetcher = make_fetcher(max_retries=2, backoff_base_ms=250)

    with pytest.raises(UpstreamError):
        await fetcher.fetch(operation)

    first, second = recording_sleep.delays
    assert 0.250 <= first < 0.350
    assert 0.500 <= second < 0.600


def test_backoff_delay_bounds_hold_for_many_draws():
    """Jitter never pushes a delay outside its window."""
    fetcher = RetryingTimedFetcher(
        timeout_ms=1000, max_retries=5, backoff_base_ms=100, rng=random.Random(7)
    )

    for attempt in range(5):
        low = 100 * 2**attempt
        for _ in range(200):
            delay = fetcher.backoff_delay_ms(attempt)
            assert low <= delay < low + 100


@pytest.mark.asyncio
async def test_timeout_fails_attempt(make_fetcher):
    """An attempt slower than the deadline fails with FetchTimeout."""

    async def slow():
        await asyncio.sleep(1)
        return "too late"

    fetcher = make_fetcher(timeout_ms=20, max_retries=0)

    with pytest.raises(FetchTimeout):
        await fetcher.fetch(slow)


@pytest.mark.asyncio
async def test_late_result_is_discarded_and_retry_result_returned(make_fetcher):
    """A timed-out attempt's result never surfaces; the retry's own result does."""
    calls = []
    first_cancelled = asyncio.Event()

    async def operation():
        calls.append(len(calls))
        if len(calls) == 1:
            try:
                await asyncio.sleep(1)
            except asyncio.CancelledError:
                first_cancelled.set()
                raise
            return "late"
        return "fresh"

    fetcher = make_fetcher(timeout_ms=20, max_retries=1)

    assert await fetcher.fetch(operation) == "fresh"
    assert len(calls) == 2
    assert first_cancelled.is_set()


@pytest.mark.asyncio
async def test_upstream_error_is_not_rewrapped(make_fetcher):
    """An UpstreamError raised by the operation propagates as-is."""
    error = UpstreamError("Profile not found")
    operation = AsyncMock(side_effect=error)
    fetcher = make_fetcher(max_retries=0)

    with pytest.raises(UpstreamError) as exc_info:
        await fetcher.fetch(operation)

    assert exc_info.value is error


def test_create_from_settings():
    """Factory picks up timeout and retry count from cache settings."""
    fetcher = RetryingTimedFetcher.create(
        CacheSettings(fetch_timeout_ms=5000, max_retries=4, backoff_base_ms=100)
    )

    assert fetcher.timeout_ms == 5000
    assert fetcher.max_retries == 4


@pytest.mark.parametrize("kwargs", [{"timeout_ms": 0}, {"max_retries": -1}])
def test_rejects_invalid_configuration(kwargs):
    """Non-positive timeouts and negative retry counts are rejected."""
    config = {"timeout_ms": 1000, "max_retries": 2, "backoff_base_ms": 250, **kwargs}

    with pytest.raises(ValueError):
        RetryingTimedFetcher(**config)
