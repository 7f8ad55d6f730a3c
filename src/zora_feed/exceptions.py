"""Error taxonomy for upstream fetches.

``FetchTimeout`` and ``UpstreamError`` describe a single failed attempt and
are retried by the fetcher. ``FetchFailed`` is terminal and is only raised
to callers of ``SWRCache.get()`` when a foreground fetch gives up.
"""


class FeedError(Exception):
    """Base class for all feed errors."""


class FetchTimeout(FeedError):
    """An attempt exceeded its deadline."""

    def __init__(self, timeout_ms: float) -> None:
        super().__init__(f"Timeout after {timeout_ms:g}ms")
        self.timeout_ms = timeout_ms


class UpstreamError(FeedError):
    """The upstream fetch operation failed for any reason other than a timeout."""


class FetchFailed(FeedError):
    """All attempts of a foreground fetch were exhausted.

    Attributes:
        cause: The error raised by the last attempt
    """

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Fetch failed: {cause}")
        self.cause = cause
