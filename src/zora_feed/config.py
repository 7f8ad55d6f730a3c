import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

DEFAULT_ALLOWED_ORIGINS = (
    "https://app-landing-page-da9939-9d27738bf8d68dc.webflow.io",
    "https://app.zora.co",
    "https://app-landing-page-da9939.webflow.io",
)


def _split_origins(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return DEFAULT_ALLOWED_ORIGINS
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


@dataclass(frozen=True)
class CacheSettings:
    """Timing knobs for one stale-while-revalidate cache.

    All durations are in milliseconds.
    """

    fresh_ttl_ms: int = 30_000
    stale_extension_ms: int = 60_000
    fetch_timeout_ms: int = 8_000
    max_retries: int = 2
    backoff_base_ms: int = 250

    def __post_init__(self) -> None:
        if self.fresh_ttl_ms < 0 or self.stale_extension_ms < 0:
            raise ValueError("Cache TTLs must be non-negative")
        if self.fetch_timeout_ms <= 0:
            raise ValueError("FETCH_TIMEOUT_MS must be positive")
        if self.max_retries < 0:
            raise ValueError("FETCH_MAX_RETRIES must be non-negative")
        if self.backoff_base_ms < 0:
            raise ValueError("BACKOFF_BASE_MS must be non-negative")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Upstream
    zora_api_key: str | None = os.getenv("ZORA_API_KEY")
    zora_base_url: str = os.getenv("ZORA_API_BASE_URL", "https://api-sdk.zora.engineering")
    target_handle: str = os.getenv("TARGET_HANDLE", "propaganda")
    posts_coin_address: str = os.getenv(
        "POSTS_COIN_ADDRESS", "0xb5330c936723d19954035e23a20570b511f47636"  # walletconnect coin
    )
    chain_id: int = int(os.getenv("CHAIN_ID", "8453"))  # Base mainnet

    # CORS
    allowed_origins: tuple[str, ...] = field(
        default_factory=lambda: _split_origins(os.getenv("ALLOWED_ORIGINS"))
    )

    # Fetch and cache
    fetch_timeout_ms: int = int(os.getenv("FETCH_TIMEOUT_MS", "8000"))
    max_retries: int = int(os.getenv("FETCH_MAX_RETRIES", "2"))
    backoff_base_ms: int = int(os.getenv("BACKOFF_BASE_MS", "250"))
    fresh_ttl_ms: int = int(os.getenv("CACHE_FRESH_TTL_MS", "30000"))
    stale_extension_ms: int = int(os.getenv("CACHE_STALE_EXTENSION_MS", "60000"))

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not self.allowed_origins:
            raise ValueError("ALLOWED_ORIGINS must contain at least one origin")

        # Raises ValueError on bad cache timings
        self.cache_settings()

    def cache_settings(self) -> CacheSettings:
        """Build the cache timings shared by every feed."""
        return CacheSettings(
            fresh_ttl_ms=self.fresh_ttl_ms,
            stale_extension_ms=self.stale_extension_ms,
            fetch_timeout_ms=self.fetch_timeout_ms,
            max_retries=self.max_retries,
            backoff_base_ms=self.backoff_base_ms,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the service process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
