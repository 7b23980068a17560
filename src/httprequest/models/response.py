from dataclasses import dataclass
from types import MappingProxyType
from typing import Generic, Mapping, TypeVar

from .request import MaterializedRequest

T = TypeVar("T")


@dataclass(frozen=True)
class ResponseHead:
    """Status line and headers as reported by the transport."""

    status_code: int
    headers: tuple[tuple[str, str], ...] = ()
    reason: str = ""
    http_version: str = "HTTP/1.1"
    url: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def header_map(self) -> dict[str, str]:
        # later duplicates overwrite earlier ones
        return {name: value for name, value in self.headers}


@dataclass(frozen=True)
class Response(Generic[T]):
    """A decoded response; always the result of a successful request."""

    body: T
    headers: Mapping[str, str]
    status_code: int
    elapsed: float
    request: MaterializedRequest
    raw: ResponseHead

    @classmethod
    def build(
        cls,
        body: T,
        head: ResponseHead,
        request: MaterializedRequest,
        elapsed: float,
    ) -> "Response[T]":
        return cls(
            body=body,
            headers=MappingProxyType(head.header_map()),
            status_code=head.status_code,
            elapsed=elapsed,
            request=request,
            raw=head,
        )
