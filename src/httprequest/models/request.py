from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Generic, Mapping, Optional, TypeVar

from .._serialization import encode_body
from .._utils._url import build_url
from .._utils.constants import DEFAULT_TIMEOUT, HEADER_CONTENT_TYPE
from .errors import InvalidPathError

T = TypeVar("T")


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


class CachePolicy(str, Enum):
    """How a transport treats its local response cache for one request."""

    USE_PROTOCOL_CACHE_POLICY = "use_protocol_cache_policy"
    RELOAD_IGNORING_LOCAL_CACHE_DATA = "reload_ignoring_local_cache_data"
    RETURN_CACHE_DATA_ELSE_LOAD = "return_cache_data_else_load"
    RETURN_CACHE_DATA_DONT_LOAD = "return_cache_data_dont_load"


@dataclass(frozen=True)
class TransportOptions:
    timeout: Optional[float] = DEFAULT_TIMEOUT
    cache_policy: CachePolicy = CachePolicy.USE_PROTOCOL_CACHE_POLICY


@dataclass(frozen=True)
class MaterializedRequest:
    """Snapshot of a request ready to be handed to a transport."""

    method: HttpMethod
    url: str
    headers: Mapping[str, str]
    body: Optional[bytes]
    timeout: Optional[float]
    cache_policy: CachePolicy


@dataclass(frozen=True)
class RequestSpec(Generic[T]):
    """Encapsulates the configuration for making an HTTP request.

    A spec is never mutated: every ``with_*`` method returns a new snapshot,
    so a spec can be handed to several runners at once. ``target`` is the
    type the response body is decoded into.
    """

    method: HttpMethod = HttpMethod.GET
    target: Any = bytes
    base_path: str = ""
    relative_path: str = ""
    params: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    transport: TransportOptions = field(default_factory=TransportOptions)
    decode_options: Mapping[str, Any] = field(default_factory=dict)
    logging: bool = False

    @property
    def path(self) -> str:
        return self.base_path + self.relative_path

    def with_base_path(self, base_path: str) -> "RequestSpec[T]":
        return replace(self, base_path=base_path)

    def with_path(self, path: str) -> "RequestSpec[T]":
        """Append a path component."""
        return replace(self, relative_path=self.relative_path + path)

    def with_params(self, params: Mapping[str, Optional[str]]) -> "RequestSpec[T]":
        """Set query parameters; a ``None`` value removes the parameter."""
        return replace(self, params=_merge(self.params, params))

    def with_headers(self, headers: Mapping[str, Optional[str]]) -> "RequestSpec[T]":
        """Set headers; a ``None`` value removes the header."""
        return replace(self, headers=_merge(self.headers, headers))

    def with_body(self, body: Any) -> "RequestSpec[T]":
        return replace(self, body=body)

    def with_transport(self, **changes: Any) -> "RequestSpec[T]":
        return replace(self, transport=replace(self.transport, **changes))

    def with_decode_options(self, options: Mapping[str, Any]) -> "RequestSpec[T]":
        return replace(self, decode_options={**self.decode_options, **options})

    def with_logging(self, enabled: bool = True) -> "RequestSpec[T]":
        return replace(self, logging=enabled)

    def copy(self) -> "RequestSpec[T]":
        """Return a spec that shares no mutable mapping with this one."""
        return replace(
            self,
            params=dict(self.params),
            headers=dict(self.headers),
            decode_options=dict(self.decode_options),
        )

    def materialize(
        self, cache_policy: Optional[CachePolicy] = None
    ) -> MaterializedRequest:
        """Build the transport request.

        Raises:
            InvalidPathError: the path and parameters do not form a valid URL.
        """
        url = build_url(self.path, self.params)
        if url is None:
            raise InvalidPathError(self.path)
        headers = dict(self.headers)

        body = None
        if self.body is not None:
            body, content_type = encode_body(self.body, self.decode_options)
            if content_type and not _has_header(headers, HEADER_CONTENT_TYPE):
                headers[HEADER_CONTENT_TYPE] = content_type

        return MaterializedRequest(
            method=self.method,
            url=url,
            headers=MappingProxyType(headers),
            body=body,
            timeout=self.transport.timeout,
            cache_policy=cache_policy or self.transport.cache_policy,
        )


def _merge(
    current: Mapping[str, str], updates: Mapping[str, Optional[str]]
) -> dict[str, str]:
    merged = dict(current)
    for key, value in updates.items():
        if value is None:
            merged.pop(key, None)
        else:
            merged[key] = value
    return merged


def _has_header(headers: Mapping[str, str], name: str) -> bool:
    name = name.lower()
    return any(key.lower() == name for key in headers)
