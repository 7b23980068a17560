from abc import ABC, abstractmethod
from typing import Optional, Protocol

from ..models.request import MaterializedRequest
from ..models.response import ResponseHead


class TransportListener(Protocol):
    """Receives the byte-level events of one transport task.

    A transport calls these from its own worker context, in order, and ends
    every task with exactly one ``on_complete``.
    """

    def on_bytes_sent(self, count: int, expected: int) -> None: ...

    def on_response(self, head: ResponseHead) -> None: ...

    def on_bytes_received(self, chunk: bytes, count: int, expected: int) -> None: ...

    def on_complete(self, error: Optional[BaseException]) -> None: ...


class Transport(ABC):
    @abstractmethod
    def start(self, request: MaterializedRequest, listener: TransportListener) -> None:
        """Schedule ``request`` and return without waiting for it.

        Raises:
            RuntimeError: the transport no longer accepts work.
        """

    def close(self) -> None:
        """Release the transport's resources."""

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
