"""Callback slots and the queue discipline used to deliver them.

Handlers never run on a transport thread: every delivery is posted to the
request's queue. The default queue is a single process-wide worker thread,
so deliveries for one request run one at a time, in the order posted.
"""

import asyncio
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import Any, Callable, Generic, Optional, Protocol, TypeVar

from .._utils.constants import LOGGER_NAME
from ..models.response import Response

T = TypeVar("T")

logger = getLogger(LOGGER_NAME)


class CallbackQueue(Protocol):
    """Anything that runs ``fn(*args)`` later; ``concurrent.futures.Executor`` fits."""

    def submit(self, fn: Callable[..., Any], /, *args: Any) -> Any: ...


class EventLoopQueue:
    """Deliver callbacks on an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop or asyncio.get_running_loop()

    def submit(self, fn: Callable[..., Any], /, *args: Any) -> None:
        self._loop.call_soon_threadsafe(fn, *args)


_main_queue: Optional[ThreadPoolExecutor] = None
_main_queue_lock = threading.Lock()


def main_queue() -> ThreadPoolExecutor:
    """The default delivery queue: one serial worker shared by all requests."""
    global _main_queue
    with _main_queue_lock:
        if _main_queue is None:
            _main_queue = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="httprequest-main"
            )
        return _main_queue


@dataclass(frozen=True)
class CallbackSet(Generic[T]):
    success: Optional[Callable[[Response[T]], Any]] = None
    failure: Optional[Callable[[BaseException], Any]] = None
    completion: Optional[
        Callable[[Optional[Response[T]], Optional[BaseException]], Any]
    ] = None
    cache: Optional[Callable[[Response[T]], Any]] = None
    progress: Optional[Callable[[float, float], Any]] = None
    queue: Optional[CallbackQueue] = None

    @property
    def wants_network(self) -> bool:
        """False for a cache-only declaration: a cache handler and nothing to receive a network result."""
        return self.cache is None or self.success is not None or self.completion is not None

    def with_defaults(
        self, failure: Optional[Callable[[BaseException], Any]] = None
    ) -> "CallbackSet[T]":
        if self.failure is None and failure is not None:
            return replace(self, failure=failure)
        return self


@dataclass
class CallbackSink(Generic[T]):
    """Posts deliveries for one declared request to its queue.

    Shared by the cache-only and network runners of that request. The
    success, failure and completion slots are claimed under a lock, so each
    fires at most once no matter which runner finishes first.
    """

    callbacks: CallbackSet[T]
    _claimed: set[str] = field(default_factory=set, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def queue(self) -> CallbackQueue:
        return self.callbacks.queue or main_queue()

    def progress(self, sent: float, received: float) -> None:
        if self.callbacks.progress is not None:
            self._post([(self.callbacks.progress, (sent, received))])

    def cache(self, response: Response[T]) -> None:
        if self.callbacks.cache is not None:
            self._post([(self.callbacks.cache, (response,))])

    def success(self, response: Response[T]) -> None:
        self._post(
            self._claim(
                ("success", (response,)),
                ("completion", (response, None)),
            )
        )

    def failure(self, error: BaseException) -> None:
        self._post(
            self._claim(
                ("failure", (error,)),
                ("completion", (None, error)),
            )
        )

    def _claim(self, *slots: tuple[str, tuple]) -> list[tuple[Callable, tuple]]:
        calls = []
        with self._lock:
            for name, args in slots:
                handler = getattr(self.callbacks, name)
                if handler is None or name in self._claimed:
                    continue
                self._claimed.add(name)
                calls.append((handler, args))
        return calls

    def _post(self, calls: list[tuple[Callable, tuple]]) -> None:
        if calls:
            self.queue.submit(_invoke_all, calls)


def _invoke_all(calls: list[tuple[Callable, tuple]]) -> None:
    for handler, args in calls:
        try:
            handler(*args)
        except Exception:
            logger.exception(f"Callback {handler!r} raised")
