"""Protocol interfaces for swappable implementations.

Protocols enable:
- Plugging any upstream into the cache as an opaque fetch operation
- Unit testing with fake clients and operations
- Clear separation between cache logic and upstream specifics
"""

from .fetch_operation import FetchOperation
from .upstream_client import UpstreamClient

__all__ = [
    "FetchOperation",
    "UpstreamClient",
]
