"""Upstream API client protocol."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class UpstreamClient(Protocol):
    """Protocol for the coin/profile API used by the feed operations.

    Example:
        ```python
        client: UpstreamClient = ZoraClient.create(api_key="...")
        profile = await client.get_profile("propaganda")
        ```
    """

    async def get_profile(self, identifier: str) -> dict[str, Any]:
        """Fetch a creator profile.

        Args:
            identifier: Profile handle or wallet address

        Returns:
            The decoded JSON response
        """
        ...

    async def get_coin(self, address: str, chain: int) -> dict[str, Any]:
        """Fetch a coin, including its comments.

        Args:
            address: Coin contract address
            chain: Chain id

        Returns:
            The decoded JSON response
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
