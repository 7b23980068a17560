# Environment variables
ENV_BASE_URL = "HTTPREQUEST_URL"
ENV_ACCESS_TOKEN = "HTTPREQUEST_ACCESS_TOKEN"
ENV_AUTH_SCHEME = "HTTPREQUEST_AUTH_SCHEME"
ENV_TIMEOUT = "HTTPREQUEST_TIMEOUT"
ENV_LOGGING = "HTTPREQUEST_LOGGING"

# Headers
HEADER_ACCEPT = "Accept"
HEADER_AUTHORIZATION = "Authorization"
HEADER_CACHE_CONTROL = "Cache-Control"
HEADER_CONTENT_ENCODING = "Content-Encoding"
HEADER_CONTENT_LENGTH = "Content-Length"
HEADER_CONTENT_TYPE = "Content-Type"

CONTENT_TYPE_JSON = "application/json"

# Defaults
DEFAULT_TIMEOUT = 60.0
DEFAULT_AUTH_SCHEME = "Bearer"
DEFAULT_CACHE_SIZE = 256

LOGGER_NAME = "httprequest"
DOTENV_FILE = ".env"
