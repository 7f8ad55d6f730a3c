"""Fetch operations for the feeds served by this service.

Each factory returns a zero-argument coroutine function suitable for
``SWRCache``. Response-shape differences between SDK/API versions are
handled here by probing the known field locations in order; the cache never
sees them.
"""

import time
from typing import Any, Awaitable, Callable, Iterable

from zora_feed.entities import MarketCapSnapshot, Post
from zora_feed.exceptions import UpstreamError
from zora_feed.protocols import UpstreamClient

# Field locations, newest shape last. v0.3.x put market data on the profile
# itself, v0.4.x nests it under the creator coin.
MARKET_CAP_PATHS = (("marketCap",), ("coin", "marketCap"), ("creatorCoin", "marketCap"))
SYMBOL_PATHS = (("symbol",), ("coin", "symbol"), ("creatorCoin", "symbol"))
PRICE_PATHS = (("price",), ("coin", "price"), ("creatorCoin", "price"))


def dig(data: Any, path: Iterable[str]) -> Any:
    """Follow ``path`` through nested dicts, returning None at the first gap."""
    for key in path:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def first_present(data: Any, paths: Iterable[tuple[str, ...]]) -> Any:
    """Return the first non-empty value found at any of ``paths``."""
    for path in paths:
        value = dig(data, path)
        if value not in (None, ""):
            return value
    return None


def unwrap(body: dict[str, Any], key: str) -> Any:
    """Read ``key`` from a response body that may or may not be wrapped in ``data``."""
    if key in body:
        return body[key]
    return dig(body, ("data", key))


def parse_market_cap(body: dict[str, Any], handle: str) -> MarketCapSnapshot:
    """Build a snapshot from a profile response.

    Raises:
        UpstreamError: If the response has no profile
    """
    profile = unwrap(body, "profile")
    if not profile:
        raise UpstreamError("Profile not found")

    return MarketCapSnapshot(
        handle=handle,
        market_cap=first_present(profile, MARKET_CAP_PATHS),
        symbol=first_present(profile, SYMBOL_PATHS),
        price=first_present(profile, PRICE_PATHS),
        timestamp=int(time.time() * 1000),
    )


def parse_posts(body: dict[str, Any]) -> list[Post]:
    """Flatten coin comments into posts; a coin with no comments yields []."""
    edges = dig(unwrap(body, "zora20Token"), ("zoraComments", "edges")) or []

    posts = []
    for edge in edges:
        node = (edge or {}).get("node") or {}
        posts.append(
            Post(
                user=dig(node, ("userProfile", "handle")) or node.get("userAddress"),
                content=node.get("comment"),
                timestamp=node.get("timestamp"),
            )
        )
    return posts


def market_cap_operation(
    client: UpstreamClient, handle: str
) -> Callable[[], Awaitable[MarketCapSnapshot]]:
    """Create the fetch operation for a profile's market cap.

    Args:
        client: Upstream API client
        handle: Profile handle to track

    Returns:
        Coroutine function fetching a fresh MarketCapSnapshot
    """

    async def fetch_market_cap() -> MarketCapSnapshot:
        body = await client.get_profile(handle)
        return parse_market_cap(body, handle)

    return fetch_market_cap


def coin_posts_operation(
    client: UpstreamClient, address: str, chain: int
) -> Callable[[], Awaitable[list[Post]]]:
    """Create the fetch operation for a coin's comment feed.

    Args:
        client: Upstream API client
        address: Coin contract address
        chain: Chain id

    Returns:
        Coroutine function fetching the current list of posts
    """

    async def fetch_posts() -> list[Post]:
        body = await client.get_coin(address, chain)
        return parse_posts(body)

    return fetch_posts
