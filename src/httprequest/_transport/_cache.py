import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional

from .._utils.constants import DEFAULT_CACHE_SIZE, HEADER_CACHE_CONTROL
from ..models.request import HttpMethod, MaterializedRequest
from ..models.response import ResponseHead


@dataclass(frozen=True)
class CachedResponse:
    head: ResponseHead
    body: bytes


class ResponseCache:
    """In-memory LRU store of successful GET responses, keyed by URL."""

    def __init__(self, max_entries: int = DEFAULT_CACHE_SIZE) -> None:
        self._max_entries = max_entries
        self._entries: OrderedDict[str, CachedResponse] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, request: MaterializedRequest) -> Optional[CachedResponse]:
        if request.method is not HttpMethod.GET:
            return None
        with self._lock:
            entry = self._entries.get(request.url)
            if entry is not None:
                self._entries.move_to_end(request.url)
            return entry

    def store(
        self, request: MaterializedRequest, head: ResponseHead, body: bytes
    ) -> bool:
        """Keep ``body`` for later cache reads; returns False when not cacheable."""
        if not self.is_cacheable(request, head):
            return False
        with self._lock:
            self._entries[request.url] = CachedResponse(head=head, body=body)
            self._entries.move_to_end(request.url)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)
        return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    @staticmethod
    def is_cacheable(request: MaterializedRequest, head: ResponseHead) -> bool:
        if request.method is not HttpMethod.GET or not head.is_success:
            return False
        directives = [
            value for name, value in request.headers.items()
            if name.lower() == HEADER_CACHE_CONTROL.lower()
        ]
        directives.extend(
            value for name, value in head.headers
            if name.lower() == HEADER_CACHE_CONTROL.lower()
        )
        return not any("no-store" in value.lower() for value in directives)
