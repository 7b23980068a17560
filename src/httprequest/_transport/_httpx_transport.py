from concurrent.futures import Future, ThreadPoolExecutor
from functools import partial
from logging import getLogger
from typing import Any, Optional

from httpx import Client, HTTPError, Response

from .._utils._ssl_context import get_httpx_client_kwargs
from .._utils.constants import (
    DEFAULT_TIMEOUT,
    HEADER_CONTENT_ENCODING,
    HEADER_CONTENT_LENGTH,
    LOGGER_NAME,
)
from ..models.errors import CacheMissError, TransportClosedError
from ..models.request import CachePolicy, HttpMethod, MaterializedRequest
from ..models.response import ResponseHead
from ._base import Transport, TransportListener
from ._cache import ResponseCache

_CACHE_READS = (
    CachePolicy.RETURN_CACHE_DATA_ELSE_LOAD,
    CachePolicy.RETURN_CACHE_DATA_DONT_LOAD,
)

# Content-Length on these describes a body that is never sent
_NO_BODY_STATUS = (204, 304)


class HttpxTransport(Transport):
    """Runs requests on a thread pool with a shared httpx client.

    The transport owns the HTTP response cache. Every task started on it ends
    with exactly one ``on_complete``, including tasks dropped by ``close``.
    """

    def __init__(
        self,
        client: Optional[Client] = None,
        *,
        cache: Optional[ResponseCache] = None,
        max_workers: Optional[int] = None,
        timeout: float = DEFAULT_TIMEOUT,
        **client_kwargs: Any,
    ) -> None:
        self._logger = getLogger(LOGGER_NAME)
        if client is None:
            client = Client(**{**get_httpx_client_kwargs(timeout), **client_kwargs})
        self._client = client
        self._cache = cache if cache is not None else ResponseCache()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="httprequest-transport"
        )

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    def start(self, request: MaterializedRequest, listener: TransportListener) -> None:
        future = self._executor.submit(self._run, request, listener)
        future.add_done_callback(partial(self._resolve_abandoned, listener))

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
        self._client.close()

    def _resolve_abandoned(self, listener: TransportListener, future: Future) -> None:
        if future.cancelled():
            listener.on_complete(TransportClosedError())
            return

        error = future.exception()
        if error is not None:
            self._logger.debug(f"Transport task crashed: {error!r}")
            listener.on_complete(error)

    def _run(self, request: MaterializedRequest, listener: TransportListener) -> None:
        if request.cache_policy in _CACHE_READS:
            cached = self._cache.get(request)
            if cached is not None:
                self._logger.debug(f"Cache hit: {request.method.value} {request.url}")
                listener.on_response(cached.head)
                size = len(cached.body)
                listener.on_bytes_received(cached.body, size, size)
                listener.on_complete(None)
                return
            if request.cache_policy is CachePolicy.RETURN_CACHE_DATA_DONT_LOAD:
                listener.on_complete(CacheMissError(request.url))
                return

        try:
            self._load(request, listener)
        except HTTPError as e:
            listener.on_complete(e)
            return
        listener.on_complete(None)

    def _load(self, request: MaterializedRequest, listener: TransportListener) -> None:
        headers = dict(request.headers)
        sent = len(request.body) if request.body is not None else 0
        if request.body is not None:
            listener.on_bytes_sent(0, sent)

        with self._client.stream(
            request.method.value,
            request.url,
            headers=headers,
            content=request.body,
            timeout=request.timeout,
        ) as response:
            # httpx writes the whole request before reading the status line
            if request.body is not None:
                listener.on_bytes_sent(sent, sent)

            head = _response_head(response)
            listener.on_response(head)

            keep = (
                request.cache_policy is not CachePolicy.RETURN_CACHE_DATA_DONT_LOAD
                and self._cache.is_cacheable(request, head)
            )
            expected = _expected_length(request, response)
            received = 0
            chunks = []
            for chunk in response.iter_bytes():
                received += len(chunk)
                if keep:
                    chunks.append(chunk)
                listener.on_bytes_received(chunk, received, expected)
            if not received:
                listener.on_bytes_received(b"", 0, expected)

        if keep:
            self._cache.store(request, head, b"".join(chunks))


def _response_head(response: Response) -> ResponseHead:
    return ResponseHead(
        status_code=response.status_code,
        headers=tuple(
            (name.decode("latin-1"), value.decode("latin-1"))
            for name, value in response.headers.raw
        ),
        reason=response.reason_phrase,
        http_version=response.http_version,
        url=str(response.url),
    )


def _expected_length(request: MaterializedRequest, response: Response) -> int:
    if request.method is HttpMethod.HEAD or response.status_code in _NO_BODY_STATUS:
        return 0
    # iter_bytes yields decoded content, so the header only counts without a coding
    encoding = response.headers.get(HEADER_CONTENT_ENCODING, "identity").lower()
    if encoding != "identity":
        return 0
    try:
        return int(response.headers.get(HEADER_CONTENT_LENGTH, 0))
    except ValueError:
        return 0
