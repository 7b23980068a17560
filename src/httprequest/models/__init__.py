from .errors import (
    CacheMissError,
    CouldNotCreateTaskError,
    HttpError,
    HttpRequestError,
    InvalidPathError,
    NoDataError,
    NoResponseError,
    RunnerStateError,
    TransportClosedError,
    UnknownError,
)
from .request import (
    CachePolicy,
    HttpMethod,
    MaterializedRequest,
    RequestSpec,
    TransportOptions,
)
from .response import Response, ResponseHead

__all__ = [
    "CacheMissError",
    "CachePolicy",
    "CouldNotCreateTaskError",
    "HttpError",
    "HttpMethod",
    "HttpRequestError",
    "InvalidPathError",
    "MaterializedRequest",
    "NoDataError",
    "NoResponseError",
    "RequestSpec",
    "Response",
    "ResponseHead",
    "RunnerStateError",
    "TransportClosedError",
    "TransportOptions",
    "UnknownError",
]
