"""Per-request tenant credentials.

A single deployment serves many Miro accounts: every inbound request carries
its own access token in the ``X-Miro-Access-Token`` header.
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict

from .errors import MissingCredentialsError

ACCESS_TOKEN_HEADER = "X-Miro-Access-Token"
ACCESS_TOKEN_ENV = "MIRO_ACCESS_TOKEN"
REQUIRED_HEADERS = [ACCESS_TOKEN_HEADER]


class TenantCredentials(BaseModel):
    """Credentials for one request. Never persisted or shared."""
    model_config = ConfigDict(frozen=True)

    access_token: str = ""

    def __repr__(self) -> str:
        return f"TenantCredentials(access_token={'***' if self.access_token else ''!r})"

    __str__ = __repr__


def resolve_credentials(headers: Mapping[str, str]) -> TenantCredentials:
    """Read tenant credentials from inbound request headers.

    ``headers`` is expected to be case-insensitive (Starlette ``Headers``);
    plain dicts are matched case-insensitively as a fallback.
    """
    token = headers.get(ACCESS_TOKEN_HEADER)
    if token is None:
        wanted = ACCESS_TOKEN_HEADER.lower()
        token = next((v for k, v in headers.items() if k.lower() == wanted), "")
    return TenantCredentials(access_token=token.strip())


def credentials_from_env(environ: Optional[Mapping[str, str]] = None) -> TenantCredentials:
    """Credentials for the single-tenant stdio transport."""
    env = os.environ if environ is None else environ
    return TenantCredentials(access_token=env.get(ACCESS_TOKEN_ENV, "").strip())


def validate_credentials(credentials: TenantCredentials) -> None:
    """Reject credentials that cannot authenticate any call."""
    if not credentials.access_token:
        raise MissingCredentialsError(f"Missing credentials. Provide {ACCESS_TOKEN_HEADER} header.")
