from logging import getLogger
from typing import Iterable, Optional

from ._utils.constants import LOGGER_NAME
from .models.request import MaterializedRequest
from .models.response import ResponseHead

logger = getLogger(LOGGER_NAME)


def log_request(request: MaterializedRequest) -> None:
    lines = [f"---> {request.method.value} {request.url}"]
    lines.extend(_header_lines(request.headers.items()))
    lines.extend(_body_lines(request.body))
    lines.append(f"---> END {_bytes_description(request.body)}")
    logger.info("\n".join(lines))


def log_response(
    request: MaterializedRequest,
    head: ResponseHead,
    elapsed: float,
    body: Optional[bytes],
) -> None:
    lines = [
        f"<--- {request.method.value} {request.url} "
        f"({head.status_code}, {elapsed:0.2f}s)"
    ]
    lines.extend(_header_lines(head.headers))
    lines.extend(_body_lines(body))
    lines.append(f"<--- END {_bytes_description(body)}")
    logger.info("\n".join(lines))


def _header_lines(headers: Iterable[tuple[str, str]]) -> list[str]:
    return [f"{name}: {value}" for name, value in headers]


def _body_lines(body: Optional[bytes]) -> list[str]:
    if not body:
        return []
    try:
        text = bytes(body).decode("utf-8")
    except UnicodeDecodeError:
        return []
    return [text]


def _bytes_description(body: Optional[bytes]) -> str:
    return f"({len(body) if body is not None else 0} bytes)"
