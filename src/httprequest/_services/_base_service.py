from typing import Any, Callable, Mapping, Optional, TypeVar

from .._config import Config
from .._request import HttpRequest
from .._serialization import ResponseDecoder
from .._task._callbacks import CallbackSet
from .._task._runner import TaskRunner
from .._transport._base import Transport
from .._transport._httpx_transport import HttpxTransport
from .._utils.constants import (
    CONTENT_TYPE_JSON,
    HEADER_ACCEPT,
    HEADER_AUTHORIZATION,
)
from ..models.request import HttpMethod, RequestSpec, TransportOptions

T = TypeVar("T")


class HttpService:
    """Defaults shared by every request of one web service.

    Subclass and override ``path``, ``custom_headers``, ``params``,
    ``transport_options``, ``decode_options``, ``logging`` or ``failure`` to
    customize. Request specs built through the service start out with these
    defaults and can be refined with the spec's ``with_*`` methods.

    Example:
        class Contacts(HttpService):
            path = "https://api.example.com/v1/contacts"

        spec = Contacts().get(list[Contact]).with_params({"simple": "true"})
    """

    path: Optional[str] = None
    params: Mapping[str, str] = {}
    decode_options: Mapping[str, Any] = {}
    logging: Optional[bool] = None

    def __init__(
        self,
        config: Optional[Config] = None,
        transport: Optional[Transport] = None,
        decoder: Optional[ResponseDecoder] = None,
    ) -> None:
        self._config = config or Config()
        self._transport = transport
        self._decoder = decoder

    @property
    def config(self) -> Config:
        return self._config

    @property
    def base_path(self) -> str:
        if self.path is not None:
            return self.path
        return self._config.base_url or ""

    @property
    def transport(self) -> Transport:
        if self._transport is None:
            self._transport = HttpxTransport(timeout=self._config.timeout)
        return self._transport

    @property
    def transport_options(self) -> TransportOptions:
        return TransportOptions(timeout=self._config.timeout)

    @property
    def logging_enabled(self) -> bool:
        if self.logging is not None:
            return self.logging
        return self._config.logging

    @property
    def default_headers(self) -> dict[str, str]:
        return {
            HEADER_ACCEPT: CONTENT_TYPE_JSON,
            **self.auth_headers,
            **self.custom_headers,
        }

    @property
    def auth_headers(self) -> dict[str, str]:
        if not self._config.secret:
            return {}
        header = f"{self._config.auth_scheme} {self._config.secret}"
        return {HEADER_AUTHORIZATION: header}

    @property
    def custom_headers(self) -> dict[str, str]:
        return {}

    def failure(self, error: BaseException) -> None:
        """Default failure handler for requests that do not set one."""
        return None

    def spec(
        self, method: HttpMethod, target: Any = bytes, path: str = ""
    ) -> RequestSpec:
        """Build a request spec prepopulated with the service defaults.

        Args:
            method (HttpMethod): The HTTP verb.
            target (Any): The type the response body is decoded into. ``bytes`` keeps the raw body.
            path (str): Path appended to the service base path.

        Returns:
            RequestSpec: A spec carrying the service headers, parameters, transport options, decode options and logging flag.

        Examples:
            ```python
            spec = service.spec(HttpMethod.GET, list[Contact], "/contacts")
            ```
        """
        return RequestSpec(
            method=method,
            target=target,
            base_path=self.base_path,
            relative_path=path,
            params=dict(self.params),
            headers=self.default_headers,
            transport=self.transport_options,
            decode_options=dict(self.decode_options),
            logging=self.logging_enabled,
        )

    def get(self, target: Any = bytes, path: str = "") -> RequestSpec:
        """Build a GET spec; see :meth:`spec`."""
        return self.spec(HttpMethod.GET, target, path)

    def post(self, target: Any = bytes, path: str = "") -> RequestSpec:
        """Build a POST spec; see :meth:`spec`."""
        return self.spec(HttpMethod.POST, target, path)

    def put(self, target: Any = bytes, path: str = "") -> RequestSpec:
        """Build a PUT spec; see :meth:`spec`."""
        return self.spec(HttpMethod.PUT, target, path)

    def patch(self, target: Any = bytes, path: str = "") -> RequestSpec:
        """Build a PATCH spec; see :meth:`spec`."""
        return self.spec(HttpMethod.PATCH, target, path)

    def delete(self, target: Any = bytes, path: str = "") -> RequestSpec:
        """Build a DELETE spec; see :meth:`spec`."""
        return self.spec(HttpMethod.DELETE, target, path)

    def head(self, path: str = "") -> RequestSpec:
        """Build a HEAD spec; the response body is not decoded."""
        return self.spec(HttpMethod.HEAD, None, path)

    def options(self, target: Any = bytes, path: str = "") -> RequestSpec:
        """Build an OPTIONS spec; see :meth:`spec`."""
        return self.spec(HttpMethod.OPTIONS, target, path)

    def request(
        self, spec: RequestSpec[T], callbacks: Optional[CallbackSet[T]] = None
    ) -> HttpRequest[T]:
        """Declare a request on the service transport without starting it.

        Args:
            spec (RequestSpec[T]): The request to run.
            callbacks (Optional[CallbackSet[T]]): Handlers for the outcome. When no failure handler is set and the service overrides :meth:`failure`, that method is used.

        Returns:
            HttpRequest[T]: The declared request; call ``start()`` to dispatch it.
        """
        callbacks = (callbacks or CallbackSet()).with_defaults(
            failure=self._default_failure
        )
        return HttpRequest(spec, callbacks, self.transport, self._decoder)

    def start(
        self, spec: RequestSpec[T], callbacks: Optional[CallbackSet[T]] = None
    ) -> list[TaskRunner[T]]:
        """Declare and start a request.

        Args:
            spec (RequestSpec[T]): The request to run.
            callbacks (Optional[CallbackSet[T]]): Handlers for the outcome.

        Returns:
            list[TaskRunner[T]]: The dispatched runners, the cache-only one first when a cache handler is set.

        Examples:
            ```python
            service.start(
                service.get(list[Contact], "/contacts"),
                CallbackSet(success=lambda response: print(response.body)),
            )
            ```
        """
        return self.request(spec, callbacks).start()

    def close(self) -> None:
        """Close the transport, if the service created or was given one."""
        if self._transport is not None:
            self._transport.close()

    @property
    def _default_failure(self) -> Optional[Callable[[BaseException], Any]]:
        # only subclasses that override failure() install a default handler
        if type(self).failure is HttpService.failure:
            return None
        return self.failure
