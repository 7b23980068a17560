from typing import Generator

import pytest

from httprequest import Config, HttpxTransport

from .utils.fakes import Recorder


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clean environment variables before each test."""
    for name in (
        "HTTPREQUEST_URL",
        "HTTPREQUEST_ACCESS_TOKEN",
        "HTTPREQUEST_AUTH_SCHEME",
        "HTTPREQUEST_TIMEOUT",
        "HTTPREQUEST_LOGGING",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def base_url() -> str:
    return "https://api.example.com/v1"


@pytest.fixture
def secret() -> str:
    return "X"


@pytest.fixture
def config(base_url: str, secret: str) -> Config:
    return Config(base_url=base_url, secret=secret, auth_scheme="Token")


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def transport() -> Generator[HttpxTransport, None, None]:
    transport = HttpxTransport()
    yield transport
    transport.close()
