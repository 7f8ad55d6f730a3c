"""Cache entry domain entity."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """The single cached value of an SWR cache and its freshness windows.

    Entries are immutable; the cache replaces the whole entry on every
    successful fetch so readers never see a value paired with old deadlines.

    Attributes:
        value: The last successfully fetched payload
        fresh_until: Clock reading after which the value is stale
        stale_until: Clock reading after which the value must not be served
    """

    value: T
    fresh_until: float
    stale_until: float

    def __post_init__(self) -> None:
        if self.fresh_until > self.stale_until:
            raise ValueError("fresh_until must not be later than stale_until")

    def is_fresh(self, now: float) -> bool:
        return now < self.fresh_until

    def is_servable(self, now: float) -> bool:
        return now < self.stale_until
