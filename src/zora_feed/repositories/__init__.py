"""Repository layer for upstream data access.

This layer hides the Zora API behind the UpstreamClient protocol and turns
its responses into domain entities. The cache only ever sees the fetch
operations built here.
"""

from zora_feed.protocols import UpstreamClient

from .operations import coin_posts_operation, market_cap_operation
from .zora_client import ZoraClient

__all__ = [
    "UpstreamClient",
    "ZoraClient",
    "coin_posts_operation",
    "market_cap_operation",
]
