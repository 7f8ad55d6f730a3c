"""
Tests for the feed fetch operations and response parsing.
"""

from unittest.mock import AsyncMock

import pytest

from zora_feed.entities import MarketCapSnapshot, Post
from zora_feed.exceptions import UpstreamError
from zora_feed.repositories import coin_posts_operation, market_cap_operation
from zora_feed.repositories.operations import dig, first_present, parse_market_cap, parse_posts


def test_parse_market_cap_flat_profile():
    """Older responses carry market data directly on the profile."""
    body = {"profile": {"marketCap": "1200.5", "symbol": "PROP", "price": "0.01"}}

    snapshot = parse_market_cap(body, "propaganda")

    assert snapshot.handle == "propaganda"
    assert snapshot.market_cap == "1200.5"
    assert snapshot.symbol == "PROP"
    assert snapshot.price == "0.01"
    assert snapshot.timestamp > 0


@pytest.mark.parametrize("coin_key", ["coin", "creatorCoin"])
def test_parse_market_cap_nested_coin(coin_key):
    """Newer responses nest market data under the coin."""
    body = {"data": {"profile": {coin_key: {"marketCap": 99, "symbol": "X", "price": 2}}}}

    snapshot = parse_market_cap(body, "someone")

    assert (snapshot.market_cap, snapshot.symbol, snapshot.price) == (99, "X", 2)


def test_parse_market_cap_missing_fields_are_none():
    """A profile without market data still yields a snapshot."""
    snapshot = parse_market_cap({"profile": {"handle": "quiet"}}, "quiet")

    assert snapshot.market_cap is None
    assert snapshot.symbol is None
    assert snapshot.price is None


def test_parse_market_cap_without_profile_raises():
    """A missing profile is an upstream error."""
    with pytest.raises(UpstreamError, match="Profile not found"):
        parse_market_cap({"profile": None}, "ghost")


def test_parse_posts_prefers_handle_over_address():
    """Post authors fall back from profile handle to wallet address."""
    body = {
        "zora20Token": {
            "zoraComments": {
                "edges": [
                    {
                        "node": {
                            "userProfile": {"handle": "alice"},
                            "userAddress": "0xa",
                            "comment": "gm",
                            "timestamp": 1700000000,
                        }
                    },
                    {
                        "node": {
                            "userProfile": None,
                            "userAddress": "0xb",
                            "comment": "wagmi",
                            "timestamp": 1700000100,
                        }
                    },
                ]
            }
        }
    }

    posts = parse_posts(body)

    assert posts == [
        Post(user="alice", content="gm", timestamp=1700000000),
        Post(user="0xb", content="wagmi", timestamp=1700000100),
    ]


def test_parse_posts_without_comments_is_empty():
    """Missing token or comments produce an empty feed."""
    assert parse_posts({}) == []
    assert parse_posts({"data": {"zora20Token": {"zoraComments": None}}}) == []


def test_dig_and_first_present():
    """Path helpers stop at gaps and skip empty values."""
    data = {"a": {"b": ""}, "c": {"d": 5}}

    assert dig(data, ("a", "b", "x")) is None
    assert first_present(data, (("a", "b"), ("c", "d"))) == 5


@pytest.mark.asyncio
async def test_market_cap_operation_calls_client():
    """The market cap operation looks up the configured handle."""
    client = AsyncMock()
    client.get_profile.return_value = {"profile": {"marketCap": "10"}}

    operation = market_cap_operation(client, "propaganda")
    snapshot = await operation()

    client.get_profile.assert_awaited_once_with("propaganda")
    assert isinstance(snapshot, MarketCapSnapshot)
    assert snapshot.market_cap == "10"


@pytest.mark.asyncio
async def test_coin_posts_operation_calls_client():
    """The posts operation fetches the configured coin on the configured chain."""
    client = AsyncMock()
    client.get_coin.return_value = {"zora20Token": {"zoraComments": {"edges": []}}}

    operation = coin_posts_operation(client, "0xcoin", 8453)

    assert await operation() == []
    client.get_coin.assert_awaited_once_with("0xcoin", 8453)
