"""Multi-tenant MCP server for the Miro REST API v2."""

__version__ = "1.0.0"

SERVER_NAME = "miro-mcp"

from .client import MiroClient  # noqa: E402
from .config import ServerConfig  # noqa: E402
from .credentials import TenantCredentials, resolve_credentials, validate_credentials  # noqa: E402
from .errors import (  # noqa: E402
    AuthenticationError,
    MiroApiError,
    MissingCredentialsError,
    RateLimitError,
    RequestTimeoutError,
)

__all__ = [
    "SERVER_NAME",
    "AuthenticationError",
    "MiroApiError",
    "MiroClient",
    "MissingCredentialsError",
    "RateLimitError",
    "RequestTimeoutError",
    "ServerConfig",
    "TenantCredentials",
    "__version__",
    "resolve_credentials",
    "validate_credentials",
]
