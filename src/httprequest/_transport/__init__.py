from ._base import Transport, TransportListener
from ._cache import CachedResponse, ResponseCache
from ._httpx_transport import HttpxTransport

__all__ = [
    "CachedResponse",
    "HttpxTransport",
    "ResponseCache",
    "Transport",
    "TransportListener",
]
