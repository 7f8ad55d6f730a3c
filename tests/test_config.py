"""
Tests for settings and cache configuration.
"""

import pytest

from zora_feed.config import DEFAULT_ALLOWED_ORIGINS, CacheSettings, Settings, _split_origins


def test_cache_settings_defaults():
    """Defaults mirror the production deployment."""
    settings = CacheSettings()

    assert settings.fresh_ttl_ms == 30_000
    assert settings.stale_extension_ms == 60_000
    assert settings.fetch_timeout_ms == 8_000
    assert settings.max_retries == 2
    assert settings.backoff_base_ms == 250


@pytest.mark.parametrize(
    "kwargs",
    [
        {"fresh_ttl_ms": -1},
        {"stale_extension_ms": -1},
        {"fetch_timeout_ms": 0},
        {"max_retries": -1},
        {"backoff_base_ms": -5},
    ],
)
def test_cache_settings_validation(kwargs):
    """Negative durations and non-positive timeouts are rejected."""
    with pytest.raises(ValueError):
        CacheSettings(**kwargs)


def test_settings_build_cache_settings():
    """Settings hand their timings to the cache core."""
    settings = Settings(fresh_ttl_ms=1_000, stale_extension_ms=2_000, max_retries=0)

    cache_settings = settings.cache_settings()

    assert cache_settings.fresh_ttl_ms == 1_000
    assert cache_settings.stale_extension_ms == 2_000
    assert cache_settings.max_retries == 0


def test_settings_reject_bad_timings():
    """Invalid cache timings fail at settings construction."""
    with pytest.raises(ValueError):
        Settings(fetch_timeout_ms=0)


def test_settings_require_an_origin():
    """At least one CORS origin is required."""
    with pytest.raises(ValueError):
        Settings(allowed_origins=())


def test_split_origins():
    """Comma separated origins are trimmed; empty input uses the defaults."""
    assert _split_origins(" https://a.test , https://b.test,") == ("https://a.test", "https://b.test")
    assert _split_origins(None) == DEFAULT_ALLOWED_ORIGINS
