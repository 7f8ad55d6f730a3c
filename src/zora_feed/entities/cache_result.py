"""Cache lookup results and counters."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class SourceTag(str, Enum):
    """Where the value returned by ``SWRCache.get()`` came from."""

    FRESH = "fresh"
    STALE = "stale"
    REVALIDATED = "revalidated"
    LIVE = "live"


@dataclass(frozen=True)
class CacheResult(Generic[T]):
    """A value together with the cache state it was served from."""

    value: T
    source: SourceTag


@dataclass
class CacheStats:
    """Track how requests against one cache were served.

    Attributes:
        failed_requests: Callers that received FetchFailed
        fetch_failures: Foreground fetches that failed, once per fetch however
            many callers shared it
        background_failures: Background refreshes that failed
    """

    fresh_hits: int = 0
    stale_hits: int = 0
    revalidated: int = 0
    live_fetches: int = 0
    failed_requests: int = 0
    fetch_failures: int = 0
    background_failures: int = 0

    @property
    def total_requests(self) -> int:
        return (
            self.fresh_hits
            + self.stale_hits
            + self.revalidated
            + self.live_fetches
            + self.failed_requests
        )

    @property
    def hit_rate(self) -> float:
        """Share of requests answered from cache without waiting on upstream."""
        if self.total_requests == 0:
            return 0.0
        return (self.fresh_hits + self.stale_hits) / self.total_requests

    def record(self, source: SourceTag) -> None:
        if source is SourceTag.FRESH:
            self.fresh_hits += 1
        elif source is SourceTag.STALE:
            self.stale_hits += 1
        elif source is SourceTag.REVALIDATED:
            self.revalidated += 1
        else:
            self.live_fetches += 1

    def to_dict(self) -> dict[str, float | int]:
        """Convert counters to dictionary."""
        return {
            "total_requests": self.total_requests,
            "fresh_hits": self.fresh_hits,
            "stale_hits": self.stale_hits,
            "revalidated": self.revalidated,
            "live_fetches": self.live_fetches,
            "failed_requests": self.failed_requests,
            "fetch_failures": self.fetch_failures,
            "background_failures": self.background_failures,
            "hit_rate": self.hit_rate,
        }
