"""Timeout-bounded, retried upstream fetch.

Wraps any fetch operation with a hard per-attempt deadline and bounded
exponential backoff between attempts.
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable, TypeVar

from zora_feed.config import CacheSettings
from zora_feed.exceptions import FeedError, FetchTimeout, UpstreamError
from zora_feed.protocols import FetchOperation

logger = logging.getLogger(__name__)

T = TypeVar("T")

JITTER_MS = 100.0


class RetryingTimedFetcher:
    """Run a fetch operation with a timeout and exponential-backoff retries.

    The fetcher holds configuration only; it never mutates shared state, so
    one instance can serve any number of concurrent fetches.

    Example:
        ```python
        fetcher = RetryingTimedFetcher(timeout_ms=8000, max_retries=2, backoff_base_ms=250)
        profile = await fetcher.fetch(load_profile, label="getProfile:propaganda")
        ```
    """

    def __init__(
        self,
        timeout_ms: float,
        max_retries: int,
        backoff_base_ms: float,
        sleep: Callable[[float], Awaitable[None]] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            timeout_ms: Deadline for a single attempt.
            max_retries: Attempts allowed beyond the first.
            backoff_base_ms: Base delay; attempt ``i`` waits ``base * 2**i`` plus jitter.
            sleep: Coroutine function taking seconds. Defaults to asyncio.sleep.
            rng: Random source for jitter. Defaults to the module-level generator.
        """
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        if max_retries < 0:
            raise ValueError("max_retries must be non-negative")

        self._timeout_ms = timeout_ms
        self._max_retries = max_retries
        self._backoff_base_ms = backoff_base_ms
        self._sleep = sleep or asyncio.sleep
        self._rng = rng or random.Random()

    @classmethod
    def create(cls, settings: CacheSettings) -> "RetryingTimedFetcher":
        """Factory method building a fetcher from cache settings.

        Args:
            settings: Cache timings

        Returns:
            Configured RetryingTimedFetcher
        """
        return cls(
            timeout_ms=settings.fetch_timeout_ms,
            max_retries=settings.max_retries,
            backoff_base_ms=settings.backoff_base_ms,
        )

    @property
    def timeout_ms(self) -> float:
        return self._timeout_ms

    @property
    def max_retries(self) -> int:
        return self._max_retries

    def backoff_delay_ms(self, attempt: int) -> float:
        """Delay before the attempt following ``attempt`` (zero-based).

        Returns a value in ``[base * 2**attempt, base * 2**attempt + 100)``.
        """
        return self._backoff_base_ms * (2**attempt) + self._rng.random() * JITTER_MS

    async def fetch(self, operation: FetchOperation[T], label: str = "op") -> T:
        """Run ``operation`` until it succeeds or retries are exhausted.

        Args:
            operation: Zero-argument coroutine function producing the payload
            label: Name used in log messages

        Returns:
            The result of the first successful attempt

        Raises:
            FetchTimeout: If the last attempt timed out
            UpstreamError: If the last attempt raised any other error
        """
        attempt = 0
        while True:
            try:
                result = await self._attempt(operation)
            except FeedError as e:
                if attempt >= self._max_retries:
                    logger.error(
                        "%s failed after %d attempt(s): %s", label, attempt + 1, e
                    )
                    raise

                delay_ms = self.backoff_delay_ms(attempt)
                logger.warning(
                    "%s attempt %d failed (%s), retrying in %.0fms",
                    label,
                    attempt + 1,
                    e,
                    delay_ms,
                )
                await self._sleep(delay_ms / 1000)
                attempt += 1
                continue

            if attempt > 0:
                logger.info("%s succeeded on attempt %d", label, attempt + 1)
            return result

    async def _attempt(self, operation: FetchOperation[T]) -> T:
        """Run one attempt against the per-attempt deadline.

        ``wait_for`` cancels the operation when the deadline passes, so a late
        result can never be returned for a timed-out attempt.
        """
        try:
            return await asyncio.wait_for(operation(), timeout=self._timeout_ms / 1000)
        except asyncio.TimeoutError as e:
            raise FetchTimeout(self._timeout_ms) from e
        except UpstreamError:
            raise
        except Exception as e:
            raise UpstreamError(str(e) or type(e).__name__) from e
