"""Handler layer for HTTP endpoints.

Handlers depend on the cache (service layer), never on the upstream client.

Architecture:
    Handler -> SWRCache -> fetch operation
    (HTTP)  -> (Caching) -> (Upstream)
"""

from .feed_handler import FeedHandler

__all__ = [
    "FeedHandler",
]
