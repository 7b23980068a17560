import threading
from typing import Generic, Optional, TypeVar

from ._serialization import ResponseDecoder
from ._task._callbacks import CallbackSet, CallbackSink
from ._task._runner import RunnerVariant, TaskRunner
from ._transport._base import Transport
from ._transport._httpx_transport import HttpxTransport
from .models.errors import RunnerStateError
from .models.request import RequestSpec

T = TypeVar("T")


class HttpRequest(Generic[T]):
    """A declared request: one spec, one set of callbacks, up to two runners.

    ``start`` dispatches a network runner unless the declaration is
    cache-only (a cache handler and neither a success nor a completion
    handler), and a cache-only runner whenever a cache handler is set. The
    two run concurrently on the transport and share one sink. Failures of the
    cache-only runner are only reported when no network runner was
    dispatched, so an empty cache never preempts the network result.
    """

    def __init__(
        self,
        spec: RequestSpec[T],
        callbacks: Optional[CallbackSet[T]] = None,
        transport: Optional[Transport] = None,
        decoder: Optional[ResponseDecoder] = None,
    ) -> None:
        self.spec = spec
        self.callbacks = callbacks or CallbackSet()
        self._transport = transport
        self._decoder = decoder
        self._lock = threading.Lock()
        self._runners: Optional[list[TaskRunner[T]]] = None

    @property
    def runners(self) -> list[TaskRunner[T]]:
        return list(self._runners or [])

    @property
    def started(self) -> bool:
        return self._runners is not None

    def start(self) -> list[TaskRunner[T]]:
        with self._lock:
            if self._runners is not None:
                raise RunnerStateError("Request has already been started")
            self._runners = self._build_runners()

        for runner in self._runners:
            runner.dispatch()
        return self.runners

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until every dispatched runner reached a terminal state."""
        return all(runner.wait(timeout) for runner in self.runners)

    def _build_runners(self) -> list[TaskRunner[T]]:
        transport = self._transport or _default_transport()
        sink = CallbackSink(self.callbacks)
        network = self.callbacks.wants_network

        runners = []
        if self.callbacks.cache is not None:
            runners.append(
                TaskRunner(
                    self.spec,
                    sink,
                    transport,
                    variant=RunnerVariant.CACHE_ONLY,
                    decoder=self._decoder,
                    report_errors=not network,
                )
            )
        if network:
            runners.append(
                TaskRunner(
                    self.spec,
                    sink,
                    transport,
                    variant=RunnerVariant.NETWORK,
                    decoder=self._decoder,
                )
            )
        return runners


_default: Optional[Transport] = None
_default_lock = threading.Lock()


def _default_transport() -> Transport:
    global _default
    with _default_lock:
        if _default is None:
            _default = HttpxTransport()
        return _default
