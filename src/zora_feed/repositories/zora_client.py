"""Zora coins API client.

Talks to the same REST endpoints the Zora coins SDK wraps. Only the calls the
feeds need are implemented.

Requirements:
    - An API key from https://zora.co/settings/developer (sent as ``api-key``)
"""

from typing import Any

import httpx

from zora_feed.config import get_settings
from zora_feed.exceptions import UpstreamError


class ZoraClient:
    """httpx-based implementation of the UpstreamClient protocol.

    This class satisfies the UpstreamClient protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        client = ZoraClient.create(api_key="...")
        profile = await client.get_profile("propaganda")
        await client.close()
        ```
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Zora API key. Defaults to settings.zora_api_key.
            base_url: API base URL. Defaults to settings.zora_base_url.
            timeout: Transport-level timeout in seconds. Per-attempt deadlines
                are enforced separately by the fetcher.
            transport: Optional httpx transport (used by tests).
        """
        settings = get_settings()
        self._api_key = api_key if api_key is not None else settings.zora_api_key
        self._base_url = (base_url or settings.zora_base_url).rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def create(
        cls,
        api_key: str | None = None,
        base_url: str | None = None,
    ) -> "ZoraClient":
        """Factory method to create a ZoraClient with defaults from settings.

        Args:
            api_key: API key. If None, uses settings.
            base_url: API URL. If None, uses settings.

        Returns:
            Configured ZoraClient
        """
        return cls(api_key=api_key, base_url=base_url)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self._api_key:
                headers["api-key"] = self._api_key
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                timeout=self._timeout,
                transport=self._transport,
                limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
            )
        return self._client

    async def get_profile(self, identifier: str) -> dict[str, Any]:
        """Fetch a creator profile.

        Args:
            identifier: Profile handle or wallet address

        Returns:
            The decoded JSON body, e.g. ``{"profile": {...}}``

        Raises:
            UpstreamError: If the request fails or the body is not JSON
        """
        return await self._get("/profile", {"identifier": identifier})

    async def get_coin(self, address: str, chain: int) -> dict[str, Any]:
        """Fetch a coin and its comments.

        Args:
            address: Coin contract address
            chain: Chain id (8453 for Base)

        Returns:
            The decoded JSON body, e.g. ``{"zora20Token": {...}}``

        Raises:
            UpstreamError: If the request fails or the body is not JSON
        """
        return await self._get("/coin", {"address": address, "chain": chain})

    async def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self.client.get(path, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                f"Zora API returned {e.response.status_code} for {path}"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Zora API error: {e}") from e
        except ValueError as e:
            raise UpstreamError(f"Zora API returned invalid JSON for {path}") from e

        if not isinstance(data, dict):
            raise UpstreamError(f"Unexpected response format: {data!r}")
        return data

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
