"""Command line entry point: send one request and print the response.

Authentication and the base URL come from the ``HTTPREQUEST_*`` environment
variables (a ``.env`` file in the working directory is loaded first), so a
relative URL is resolved against ``HTTPREQUEST_URL``.
"""

import logging
import os
import sys
import threading
from typing import Optional

import click
from dotenv import load_dotenv

from .._config import Config
from .._services import HttpService
from .._task._callbacks import CallbackSet
from .._utils.constants import DOTENV_FILE, LOGGER_NAME
from ..models.errors import HttpError
from ..models.request import HttpMethod
from ..models.response import Response

_ABSOLUTE = ("http://", "https://")


def _parse_pairs(values: tuple[str, ...], separator: str, kind: str) -> dict[str, str]:
    pairs = {}
    for value in values:
        name, sep, rest = value.partition(separator)
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected {kind}, got {value!r}")
        pairs[name.strip()] = rest.strip()
    return pairs


def _setup_logging(enabled: bool) -> None:
    if not enabled:
        return
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.INFO)


@click.command()
@click.argument(
    "method", type=click.Choice([m.value for m in HttpMethod], case_sensitive=False)
)
@click.argument("url")
@click.option(
    "--param", "-p", "params", multiple=True, help="Query parameter as name=value."
)
@click.option(
    "--header", "-H", "headers", multiple=True, help='Header as "Name: value".'
)
@click.option("--data", "-d", default=None, help="Request body.")
@click.option("--include", "-i", is_flag=True, help="Print the response headers.")
@click.option("--log", "log_traffic", is_flag=True, help="Log request and response.")
@click.option("--timeout", type=float, default=None, help="Timeout in seconds.")
def cli(
    method: str,
    url: str,
    params: tuple[str, ...],
    headers: tuple[str, ...],
    data: Optional[str],
    include: bool,
    log_traffic: bool,
    timeout: Optional[float],
) -> None:
    """Send an HTTP request and print the response body."""
    load_dotenv(dotenv_path=os.path.join(os.getcwd(), DOTENV_FILE))
    config = Config.from_env()
    if timeout is not None:
        config = config.model_copy(update={"timeout": timeout})
    _setup_logging(log_traffic)

    service = HttpService(config)
    spec = service.spec(HttpMethod(method.upper()), bytes, url)
    if url.startswith(_ABSOLUTE):
        spec = spec.with_base_path("")
    spec = spec.with_params(_parse_pairs(params, "=", "name=value"))
    spec = spec.with_headers(_parse_pairs(headers, ":", '"Name: value"'))
    if data is not None:
        spec = spec.with_body(data)
    if log_traffic:
        spec = spec.with_logging()

    done = threading.Event()
    outcome: dict = {}

    def completion(response: Optional[Response], error: Optional[BaseException]):
        outcome["response"] = response
        outcome["error"] = error
        done.set()

    try:
        service.start(spec, CallbackSet(completion=completion))
        done.wait()
    finally:
        service.close()

    error = outcome.get("error")
    if error is not None:
        click.echo(f"Error: {type(error).__name__}: {error}", err=True)
        if isinstance(error, HttpError) and error.body:
            click.echo(error.text, err=True)
        sys.exit(1)

    response = outcome["response"]
    if include:
        raw = response.raw
        click.echo(f"{raw.http_version} {raw.status_code} {raw.reason}")
        for name, value in raw.headers:
            click.echo(f"{name}: {value}")
        click.echo("")
    if response.body:
        click.echo(response.body.decode("utf-8", errors="replace"))
