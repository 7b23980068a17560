import os
import ssl
from typing import Any, Optional

from .constants import DEFAULT_TIMEOUT

# Checked in order; the first one set names the CA bundle file.
_CA_FILE_VARIABLES = ("SSL_CERT_FILE", "REQUESTS_CA_BUNDLE")


def _env_path(name: str) -> Optional[str]:
    value = os.environ.get(name)
    if not value:
        return None
    return os.path.expanduser(os.path.expandvars(value))


def create_ssl_context() -> ssl.SSLContext:
    """SSL context backed by the system trust store.

    Without truststore installed, fall back to certifi's bundle unless the
    environment points at another CA file or directory.
    """
    try:
        import truststore

        return truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    except ImportError:
        import certifi

        cafile = next(
            (path for path in map(_env_path, _CA_FILE_VARIABLES) if path),
            certifi.where(),
        )
        return ssl.create_default_context(
            cafile=cafile, capath=_env_path("SSL_CERT_DIR")
        )


def get_httpx_client_kwargs(timeout: float = DEFAULT_TIMEOUT) -> dict[str, Any]:
    """Keyword arguments for the httpx client owned by a transport."""
    return {
        "verify": create_ssl_context(),
        "follow_redirects": True,
        "timeout": timeout,
    }
