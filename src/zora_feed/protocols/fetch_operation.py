"""Fetch operation protocol.

A fetch operation is the only thing the cache knows about upstream: a
zero-argument coroutine function that either returns a fresh payload or
raises.
"""

from typing import Awaitable, Protocol, TypeVar

T_co = TypeVar("T_co", covariant=True)


class FetchOperation(Protocol[T_co]):
    """Protocol for "go get fresh data from upstream".

    Any ``async def`` taking no arguments satisfies it, as does an
    ``AsyncMock`` in tests.

    Example:
        ```python
        async def load_profile() -> dict:
            return await client.get_profile("propaganda")

        cache = SWRCache(operation=load_profile, ...)
        ```
    """

    def __call__(self) -> Awaitable[T_co]:
        """Start one fetch.

        Returns:
            Awaitable resolving to the fresh payload

        Raises:
            Exception: Any error; the fetcher treats it as a failed attempt
        """
        ...
