import threading
import time
from enum import Enum
from logging import getLogger
from typing import Generic, Optional, TypeVar

from .._logging import log_request, log_response
from .._serialization import PydanticDecoder, ResponseDecoder
from .._transport._base import Transport
from .._utils.constants import LOGGER_NAME
from ..models.errors import (
    CouldNotCreateTaskError,
    HttpError,
    NoDataError,
    NoResponseError,
    RunnerStateError,
)
from ..models.request import CachePolicy, MaterializedRequest, RequestSpec
from ..models.response import Response, ResponseHead
from ._callbacks import CallbackSink

T = TypeVar("T")


class TaskState(str, Enum):
    NOT_STARTED = "not_started"
    SENDING = "sending"
    RECEIVING = "receiving"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskState.COMPLETED, TaskState.FAILED)


class RunnerVariant(str, Enum):
    """Role of a runner within a declared request.

    STANDARD uses the spec's own cache policy and is what a lone runner
    gets. NETWORK always goes to the network; CACHE_ONLY only reads the
    transport's cache, never logs, never reports progress and delivers its
    result to the cache slot.
    """

    STANDARD = "standard"
    NETWORK = "network"
    CACHE_ONLY = "cache_only"

    @property
    def cache_policy(self) -> Optional[CachePolicy]:
        if self is RunnerVariant.NETWORK:
            return CachePolicy.RELOAD_IGNORING_LOCAL_CACHE_DATA
        if self is RunnerVariant.CACHE_ONLY:
            return CachePolicy.RETURN_CACHE_DATA_DONT_LOAD
        return None

    @property
    def logging(self) -> bool:
        return self is not RunnerVariant.CACHE_ONLY

    @property
    def progress(self) -> bool:
        return self is not RunnerVariant.CACHE_ONLY

    @property
    def delivers_cache(self) -> bool:
        return self is RunnerVariant.CACHE_ONLY


def fraction(count: int, expected: int, done: bool) -> float:
    if expected > 0:
        return min(max(count / expected, 0.0), 1.0)
    return 1.0 if done else 0.0


class TaskRunner(Generic[T]):
    """Drives one execution of a request and reports exactly one outcome.

    A runner is single use: ``dispatch`` moves it out of ``NOT_STARTED`` and a
    second call raises :class:`RunnerStateError`. The runner listens to the
    transport for byte counts and the response head, turns them into progress
    updates, and finally delivers a decoded :class:`Response` (to the success
    or cache slot, depending on the variant) or an error through the sink.

    Transport events that arrive after the runner reached a terminal state
    are ignored.
    """

    def __init__(
        self,
        spec: RequestSpec[T],
        sink: CallbackSink[T],
        transport: Transport,
        *,
        variant: RunnerVariant = RunnerVariant.STANDARD,
        decoder: Optional[ResponseDecoder] = None,
        report_errors: bool = True,
    ) -> None:
        self._logger = getLogger(LOGGER_NAME)
        self._spec = spec.copy()
        self._sink = sink
        self._transport = transport
        self._variant = variant
        self._decoder = decoder or PydanticDecoder()
        self._report_errors = report_errors

        self._lock = threading.Lock()
        self._finished = threading.Event()
        self._state = TaskState.NOT_STARTED
        self._request: Optional[MaterializedRequest] = None
        self._started_at = 0.0

        self._head: Optional[ResponseHead] = None
        self._data: Optional[bytearray] = None
        self._sent = (0, 0)
        self._received = (0, 0)
        self._done_sending = False
        self._done_receiving = False
        self._progress = (0.0, 0.0)

        self.response: Optional[Response[T]] = None
        self.error: Optional[BaseException] = None

    def __repr__(self) -> str:
        return f"TaskRunner(variant={self._variant.value}, state={self._state.value})"

    @property
    def state(self) -> TaskState:
        return self._state

    @property
    def progress(self) -> tuple[float, float]:
        """Last (sent, received) pair computed, reported or not."""
        return self._progress

    @property
    def variant(self) -> RunnerVariant:
        return self._variant

    @property
    def request(self) -> Optional[MaterializedRequest]:
        return self._request

    @property
    def logging_enabled(self) -> bool:
        return self._variant.logging and self._spec.logging

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the runner reaches a terminal state; False on timeout."""
        return self._finished.wait(timeout)

    def dispatch(self) -> None:
        with self._lock:
            if self._state is not TaskState.NOT_STARTED:
                raise RunnerStateError(f"{self!r} has already been dispatched")
            try:
                request = self._spec.materialize(self._variant.cache_policy)
            except Exception as e:
                self._fail(e)
                return
            self._request = request
            self._started_at = time.monotonic()
            self._state = TaskState.SENDING

        if self.logging_enabled:
            log_request(request)

        try:
            self._transport.start(request, self)
        except RuntimeError as e:
            self.on_complete(
                CouldNotCreateTaskError(f"Unable to start {request.url}: {e}")
            )

    # Transport listener

    def on_bytes_sent(self, count: int, expected: int) -> None:
        with self._lock:
            if self._state is not TaskState.SENDING:
                return
            self._sent = (count, expected)
        self._report_progress()

    def on_response(self, head: ResponseHead) -> None:
        with self._lock:
            if self._state.is_terminal:
                return
            self._head = head
            self._done_sending = True
            self._state = TaskState.RECEIVING
        self._report_progress()

    def on_bytes_received(self, chunk: bytes, count: int, expected: int) -> None:
        with self._lock:
            if self._state.is_terminal:
                return
            if self._data is None:
                self._data = bytearray()
            self._data.extend(chunk)
            self._received = (count, expected)
            self._done_sending = True
            self._state = TaskState.RECEIVING
        self._report_progress()

    def on_complete(self, error: Optional[BaseException]) -> None:
        with self._lock:
            if self._state.is_terminal or self._state is TaskState.NOT_STARTED:
                return
            self._done_sending = True
            self._done_receiving = True
        self._report_progress()

        if error is not None:
            with self._lock:
                self._fail(error)
            return

        try:
            response = self._build_response()
        except Exception as e:
            with self._lock:
                self._fail(e)
            return

        with self._lock:
            self._complete(response)

    # Outcome

    def _build_response(self) -> Response[T]:
        elapsed = time.monotonic() - self._started_at
        head, data = self._head, self._data

        if self.logging_enabled and head is not None:
            log_response(self._request, head, elapsed, bytes(data or b""))

        if head is None:
            raise NoResponseError()
        if data is None:
            raise NoDataError()
        if not head.is_success:
            raise HttpError(
                head.status_code,
                headers=head.header_map(),
                body=bytes(data),
                reason=head.reason or None,
            )

        body = self._decoder.decode(
            bytes(data), self._spec.target, self._spec.decode_options
        )
        return Response.build(body, head, self._request, elapsed)

    def _complete(self, response: Response[T]) -> None:
        if self._state.is_terminal:
            return
        self._state = TaskState.COMPLETED
        self.response = response
        if self._variant.delivers_cache:
            self._sink.cache(response)
        else:
            self._sink.success(response)
        self._finished.set()

    def _fail(self, error: BaseException) -> None:
        if self._state.is_terminal:
            return
        self._state = TaskState.FAILED
        self.error = error
        if self._report_errors:
            self._sink.failure(error)
        else:
            self._logger.debug(
                f"{self._variant.value} runner failure not reported: {error!r}"
            )
        self._finished.set()

    def _report_progress(self) -> None:
        if not self._variant.progress:
            return
        with self._lock:
            sent = fraction(*self._sent, self._done_sending)
            received = fraction(*self._received, self._done_receiving)
            # never report a value lower than one already reported
            sent = max(sent, self._progress[0])
            received = max(received, self._progress[1])
            self._progress = (sent, received)
            # posted under the lock so queue order matches computation order
            self._sink.progress(sent, received)

