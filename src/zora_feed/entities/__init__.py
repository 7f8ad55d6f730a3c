"""Domain entities for internal representation.

These are plain dataclasses used by services, repositories and handlers.
They are NOT used for API contracts - use DTOs from the dto package for that.
"""

from .cache_entry import CacheEntry
from .cache_result import CacheResult, CacheStats, SourceTag
from .feed_items import MarketCapSnapshot, Post

__all__ = [
    "CacheEntry",
    "CacheResult",
    "CacheStats",
    "SourceTag",
    "MarketCapSnapshot",
    "Post",
]
