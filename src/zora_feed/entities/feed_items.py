"""Payload entities produced by the upstream fetch operations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MarketCapSnapshot:
    """Market data for a tracked creator profile.

    Attributes:
        handle: The profile handle that was looked up
        market_cap: Market cap as reported upstream (string or number), if known
        symbol: Coin symbol, if known
        price: Coin price, if known
        timestamp: Unix timestamp (ms) at which the snapshot was taken
    """

    handle: str
    market_cap: str | float | None
    symbol: str | None
    price: str | float | None
    timestamp: int


@dataclass(frozen=True)
class Post:
    """A single comment posted on a coin."""

    user: str | None
    content: str | None
    timestamp: int | str | None
