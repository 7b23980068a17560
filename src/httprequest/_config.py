import os
from typing import Optional

from pydantic import BaseModel

from ._utils.constants import (
    DEFAULT_AUTH_SCHEME,
    DEFAULT_TIMEOUT,
    ENV_ACCESS_TOKEN,
    ENV_AUTH_SCHEME,
    ENV_BASE_URL,
    ENV_LOGGING,
    ENV_TIMEOUT,
)

_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    base_url: Optional[str] = None
    secret: Optional[str] = None
    auth_scheme: str = DEFAULT_AUTH_SCHEME
    timeout: float = DEFAULT_TIMEOUT
    logging: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Build a configuration from the ``HTTPREQUEST_*`` environment variables.

        Unset variables fall back to the field defaults.
        """
        timeout = os.getenv(ENV_TIMEOUT)
        return cls(
            base_url=os.getenv(ENV_BASE_URL) or None,
            secret=os.getenv(ENV_ACCESS_TOKEN) or None,
            auth_scheme=os.getenv(ENV_AUTH_SCHEME) or DEFAULT_AUTH_SCHEME,
            timeout=float(timeout) if timeout else DEFAULT_TIMEOUT,
            logging=os.getenv(ENV_LOGGING, "").strip().lower() in _TRUTHY,
        )
