#!/usr/bin/env python3
"""
Demo script for the stale-while-revalidate cache.

Runs the cache against a simulated upstream with short windows so every
cache state (live, fresh, stale, revalidated, failure) shows up in a few
seconds. Pass --live to query the real Zora API instead (needs ZORA_API_KEY).
"""

import argparse
import asyncio
import random
import time

from zora_feed import (
    CacheSettings,
    FetchFailed,
    SWRCache,
    ZoraClient,
    get_settings,
    market_cap_operation,
)
from zora_feed.config import configure_logging


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


class SimulatedUpstream:
    """Upstream that is slow, counts calls, and can be switched off."""

    def __init__(self, latency: float = 0.2):
        self.latency = latency
        self.calls = 0
        self.healthy = True

    async def __call__(self) -> dict:
        self.calls += 1
        await asyncio.sleep(self.latency)
        if not self.healthy:
            raise ConnectionError("upstream unavailable")
        return {"version": self.calls, "price": round(random.uniform(0.9, 1.1), 4)}


async def show(cache: SWRCache, label: str) -> None:
    start = time.perf_counter()
    try:
        result = await cache.get()
        elapsed_ms = (time.perf_counter() - start) * 1000
        print(f"  {label:<28} {result.source.value:<12} {result.value}  ({elapsed_ms:.0f}ms)")
    except FetchFailed as e:
        elapsed_ms = (time.perf_counter() - start) * 1000
        print(f"  {label:<28} FAILED       {e.cause}  ({elapsed_ms:.0f}ms)")


async def demo_simulated() -> None:
    """Walk through every cache state with a fake upstream."""
    print_section("Simulated upstream (fresh 1s, stale +2s)")

    upstream = SimulatedUpstream()
    cache = SWRCache.create(
        operation=upstream,
        settings=CacheSettings(
            fresh_ttl_ms=1_000,
            stale_extension_ms=2_000,
            fetch_timeout_ms=500,
            max_retries=2,
            backoff_base_ms=100,
        ),
        name="demo",
    )

    await show(cache, "cold start")
    await show(cache, "immediately after")

    await asyncio.sleep(1.2)
    await show(cache, "after freshness expired")
    await show(cache, "while refresh runs")
    await asyncio.sleep(0.3)
    await show(cache, "after refresh landed")

    print("\n  Concurrent callers on an expired entry:")
    await asyncio.sleep(3.1)
    calls_before = upstream.calls
    await asyncio.gather(*(show(cache, f"caller {i}") for i in range(3)))
    print(f"  upstream calls for 3 callers: {upstream.calls - calls_before}")

    print("\n  Upstream goes down:")
    upstream.healthy = False
    await asyncio.sleep(3.1)
    await show(cache, "expired, upstream down")
    print(f"  last known value kept: {cache.peek()}")

    print(f"\n  Stats: {cache.stats.to_dict()}")


async def demo_live() -> None:
    """Query the real market cap feed twice."""
    settings = get_settings()
    print_section(f"Live Zora API (handle: {settings.target_handle})")

    client = ZoraClient.create()
    cache = SWRCache.create(
        operation=market_cap_operation(client, settings.target_handle),
        settings=settings.cache_settings(),
        name="zora-marketcap",
    )
    try:
        await show(cache, "first request")
        await show(cache, "second request")
    finally:
        await client.close()


def main() -> None:
    """Run the demo."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--live", action="store_true", help="query the real Zora API")
    args = parser.parse_args()

    configure_logging("WARNING")
    print("\n🚀 SWR Cache Demo")

    asyncio.run(demo_live() if args.live else demo_simulated())

    print("\n" + "=" * 70)
    print("✅ Demo completed!")
    print("=" * 70)


if __name__ == "__main__":
    main()
