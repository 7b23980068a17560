from ._ssl_context import get_httpx_client_kwargs
from ._url import build_url

__all__ = ["build_url", "get_httpx_client_kwargs"]
