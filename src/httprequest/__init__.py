"""Typed HTTP requests with callback delivery.

A :class:`RequestSpec` declares the request and the type its body decodes
into; an :class:`HttpRequest` runs it on a transport and delivers the
outcome through a :class:`CallbackSet`.
"""

from ._config import Config
from ._request import HttpRequest
from ._serialization import PydanticDecoder, ResponseDecoder
from ._services import HttpService
from ._task import (
    CallbackSet,
    CallbackSink,
    EventLoopQueue,
    RunnerVariant,
    TaskRunner,
    TaskState,
    main_queue,
)
from ._transport import HttpxTransport, ResponseCache, Transport, TransportListener
from .models import (
    CacheMissError,
    CachePolicy,
    CouldNotCreateTaskError,
    HttpError,
    HttpMethod,
    HttpRequestError,
    InvalidPathError,
    MaterializedRequest,
    NoDataError,
    NoResponseError,
    RequestSpec,
    Response,
    ResponseHead,
    RunnerStateError,
    TransportClosedError,
    TransportOptions,
    UnknownError,
)

__all__ = [
    "CacheMissError",
    "CachePolicy",
    "CallbackSet",
    "CallbackSink",
    "Config",
    "CouldNotCreateTaskError",
    "EventLoopQueue",
    "HttpError",
    "HttpMethod",
    "HttpRequest",
    "HttpRequestError",
    "HttpService",
    "HttpxTransport",
    "InvalidPathError",
    "MaterializedRequest",
    "NoDataError",
    "NoResponseError",
    "PydanticDecoder",
    "RequestSpec",
    "Response",
    "ResponseCache",
    "ResponseDecoder",
    "ResponseHead",
    "RunnerStateError",
    "RunnerVariant",
    "TaskRunner",
    "TaskState",
    "Transport",
    "TransportClosedError",
    "TransportListener",
    "TransportOptions",
    "UnknownError",
    "main_queue",
]
