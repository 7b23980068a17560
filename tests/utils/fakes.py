import threading
from collections import defaultdict
from typing import Any, Optional

from httprequest import CallbackSet, ResponseHead, Transport, main_queue
from httprequest.models.request import MaterializedRequest


class Recorder:
    """Records callback invocations in delivery order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.threads: set[str] = set()
        self._events: dict[str, threading.Event] = defaultdict(threading.Event)
        self._lock = threading.Lock()

    def _record(self, name: str, value: Any) -> None:
        with self._lock:
            self.calls.append((name, value))
            self.threads.add(threading.current_thread().name)
        self._events[name].set()

    def success(self, response) -> None:
        self._record("success", response)

    def failure(self, error) -> None:
        self._record("failure", error)

    def completion(self, response, error) -> None:
        self._record("completion", (response, error))

    def cache(self, response) -> None:
        self._record("cache", response)

    def progress(self, sent: float, received: float) -> None:
        self._record("progress", (sent, received))

    def callbacks(self, *slots: str, queue=None) -> CallbackSet:
        return CallbackSet(**{slot: getattr(self, slot) for slot in slots}, queue=queue)

    def wait_for(self, name: str, timeout: float = 5.0) -> None:
        assert self._events[name].wait(timeout), f"{name} was never delivered"

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def values(self, name: str) -> list[Any]:
        return [value for call, value in self.calls if call == name]

    def terminal_names(self) -> list[str]:
        return [name for name in self.names if name != "progress"]


def flush(queue=None) -> None:
    """Wait until everything already posted to a serial queue has run."""
    (queue or main_queue()).submit(lambda: None).result(timeout=5)


def head(
    status_code: int = 200,
    headers: tuple[tuple[str, str], ...] = (),
    url: str = "https://api.example.com/v1/contacts",
) -> ResponseHead:
    return ResponseHead(status_code=status_code, headers=headers, url=url)


def respond(
    status_code: int = 200,
    body: Optional[bytes] = b"",
    headers: tuple[tuple[str, str], ...] = (),
    chunk_size: Optional[int] = None,
    expected: Optional[int] = None,
) -> list[tuple]:
    """Listener events for a complete response delivered in chunks."""
    events: list[tuple] = [("on_response", head(status_code, headers))]
    if body is not None:
        total = len(body) if expected is None else expected
        size = chunk_size or max(len(body), 1)
        chunks = [body[i : i + size] for i in range(0, len(body), size)] or [b""]
        count = 0
        for chunk in chunks:
            count += len(chunk)
            events.append(("on_bytes_received", chunk, count, total))
    events.append(("on_complete", None))
    return events


class ScriptedTransport(Transport):
    """Replays a fixed list of listener events synchronously from ``start``."""

    def __init__(self, events: Optional[list[tuple]] = None) -> None:
        self.events = events if events is not None else respond()
        self.requests: list[MaterializedRequest] = []
        self.states: list[Any] = []

    def start(self, request, listener) -> None:
        self.requests.append(request)
        for name, *args in self.events:
            getattr(listener, name)(*args)
            self.states.append(getattr(listener, "state", None))


class RefusingTransport(Transport):
    def start(self, request, listener) -> None:
        raise RuntimeError("cannot schedule new futures after shutdown")
