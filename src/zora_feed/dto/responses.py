"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class FeedMeta(BaseModel):
    """How a feed response was produced."""

    source: str = Field(
        ...,
        description="Cache state the data was served from: fresh, stale, revalidated, live or fallback",
    )
    feed: str = Field(..., description="Name of the feed")
    duration_ms: float | None = Field(None, description="Time spent serving the request", ge=0.0)
    cache_ttl_ms: float | None = Field(None, description="Freshness window of the cache", ge=0.0)
    error: str | None = Field(None, description="Upstream error when serving a fallback")


class FeedResponse(BaseModel):
    """Response DTO for a feed request."""

    success: bool = Field(..., description="Whether data is included")
    data: Any = Field(..., description="The feed payload")
    meta: FeedMeta


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'degraded'")
    upstream_configured: bool = Field(..., description="Whether an upstream API key is set")
    feeds: dict[str, bool] = Field(
        default_factory=dict,
        description="Per feed, whether a value has been cached yet",
    )


class FeedStatsResponse(BaseModel):
    """Response DTO for per-feed cache statistics."""

    feeds: dict[str, dict[str, float | int]] = Field(default_factory=dict)
