import json
from http import HTTPStatus
from typing import Any, Mapping, Optional


class HttpRequestError(Exception):
    """Base class for every error raised or delivered by the package."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidPathError(HttpRequestError):
    """The request path could not be resolved to an absolute http(s) URL."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path} is an invalid path")


class CouldNotCreateTaskError(HttpRequestError):
    def __init__(self, message: str = "Unable to create transport task"):
        super().__init__(message)


class NoResponseError(HttpRequestError):
    def __init__(self, message: str = "No HTTP response"):
        super().__init__(message)


class NoDataError(HttpRequestError):
    def __init__(self, message: str = "No data"):
        super().__init__(message)


class UnknownError(HttpRequestError):
    def __init__(self, message: str = "Unknown error"):
        super().__init__(message)


class CacheMissError(HttpRequestError):
    """Raised by a transport asked to answer from its cache alone when nothing is cached."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"No cached response for {url}")


class TransportClosedError(HttpRequestError):
    def __init__(self, message: str = "Transport was closed before the request ran"):
        super().__init__(message)


class RunnerStateError(HttpRequestError):
    """A single-use runner or request was dispatched twice."""


class HttpError(HttpRequestError):
    """The server answered with a status code outside of [200, 300).

    The response body is kept as raw bytes so callers can inspect the
    failure payload.
    """

    def __init__(
        self,
        status_code: int,
        headers: Optional[Mapping[str, str]] = None,
        body: bytes = b"",
        reason: Optional[str] = None,
    ):
        self.status_code = status_code
        self.headers = dict(headers or {})
        self.body = body
        self.reason = reason or _reason_phrase(status_code)
        super().__init__(f"{status_code} - {self.reason}")

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)

    @property
    def error_message(self) -> Optional[str]:
        """Message carried by a JSON error body, if the server sent one."""
        try:
            payload = self.json()
        except ValueError:
            return None

        if isinstance(payload, dict):
            message = (
                payload.get("message") or payload.get("error") or payload.get("detail")
            )
            return str(message) if message is not None else None
        return None


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Unknown status"
