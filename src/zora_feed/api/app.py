from typing import Annotated, Any

from fastapi import APIRouter, Depends, FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware

from zora_feed.api.dependencies import (
    MARKET_CAP_FEED,
    POSTS_FEED,
    create_lifespan,
    feed_handler,
    get_feed_handlers,
)
from zora_feed.config import Settings, configure_logging, get_settings
from zora_feed.dto import FeedResponse, FeedStatsResponse, HealthCheckResponse
from zora_feed.handlers import FeedHandler
from zora_feed.services import SWRCache

MarketCapHandler = Annotated[FeedHandler, Depends(feed_handler(MARKET_CAP_FEED))]
PostsHandler = Annotated[FeedHandler, Depends(feed_handler(POSTS_FEED))]
HandlersDep = Annotated[dict[str, FeedHandler], Depends(get_feed_handlers)]

router = APIRouter()


@router.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Zora Feed API",
        "version": "0.1.0",
        "description": "Stale-while-revalidate cached feeds from the Zora coins API",
        "endpoints": {
            "market_cap": f"/api/{MARKET_CAP_FEED}",
            "posts": f"/api/{POSTS_FEED}",
            "stats": "/stats",
            "health": "/health",
        },
    }


def no_content(handler: FeedHandler) -> Response:
    return Response(
        status_code=status.HTTP_204_NO_CONTENT,
        headers={"Cache-Control": handler.cache_control},
    )


# Registered before the GET routes so HEAD never reaches a feed fetch.
@router.api_route(f"/api/{MARKET_CAP_FEED}", methods=["OPTIONS", "HEAD"], include_in_schema=False)
async def market_cap_preflight(handler: MarketCapHandler) -> Response:
    return no_content(handler)


@router.api_route(f"/api/{POSTS_FEED}", methods=["OPTIONS", "HEAD"], include_in_schema=False)
async def coin_posts_preflight(handler: PostsHandler) -> Response:
    return no_content(handler)


@router.get(f"/api/{MARKET_CAP_FEED}", response_model=FeedResponse)
async def market_cap(handler: MarketCapHandler, response: Response) -> FeedResponse:
    """Market cap, symbol and price of the tracked profile."""
    response.headers["Cache-Control"] = handler.cache_control
    return await handler.get_feed()


@router.get(f"/api/{POSTS_FEED}", response_model=FeedResponse)
async def coin_posts(handler: PostsHandler, response: Response) -> FeedResponse:
    """Comments posted on the tracked coin."""
    response.headers["Cache-Control"] = handler.cache_control
    return await handler.get_feed()


@router.get("/health", response_model=HealthCheckResponse)
async def health(request: Request, handlers: HandlersDep) -> HealthCheckResponse:
    """Health check endpoint."""
    settings: Settings = request.app.state.settings
    configured = bool(settings.zora_api_key)
    return HealthCheckResponse(
        status="healthy" if configured else "degraded",
        upstream_configured=configured,
        feeds={name: handler.cache.has_value for name, handler in handlers.items()},
    )


@router.get("/stats", response_model=FeedStatsResponse)
async def stats(handlers: HandlersDep) -> FeedStatsResponse:
    """Get per-feed cache statistics."""
    return FeedStatsResponse(
        feeds={name: handler.cache.stats.to_dict() for name, handler in handlers.items()}
    )


def create_app(
    settings: Settings | None = None,
    feeds: dict[str, SWRCache[Any]] | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Application settings. Defaults to environment settings.
        feeds: Pre-built caches keyed by feed name (used by tests).

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Zora Feed API",
        description="Stale-while-revalidate cached feeds from the Zora coins API",
        version="0.1.0",
        lifespan=create_lifespan(settings, feeds),
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=list(settings.allowed_origins),
        allow_methods=["GET", "OPTIONS", "HEAD"],
        allow_headers=["Content-Type"],
    )
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "zora_feed.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
