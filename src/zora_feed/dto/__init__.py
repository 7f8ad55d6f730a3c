"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
Internal domain logic should use entities from the entities package.
"""

from .responses import (
    FeedMeta,
    FeedResponse,
    FeedStatsResponse,
    HealthCheckResponse,
)

__all__ = [
    "FeedMeta",
    "FeedResponse",
    "FeedStatsResponse",
    "HealthCheckResponse",
]
