"""Exceptions raised by the Miro client and reported by the dispatcher."""

from typing import Any, Dict, Optional


class MiroApiError(Exception):
    """A failed call to the Miro REST API.

    Used directly for any non-2xx response that has no more specific
    subclass. ``retryable`` tells the calling agent that repeating the same
    call later may succeed.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, retryable: bool = False):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.retryable = retryable


class AuthenticationError(MiroApiError):
    """The access token is missing, invalid, or lacks permission (401/403)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, status_code=status_code, retryable=False)


class MissingCredentialsError(AuthenticationError):
    """No access token was supplied with the inbound request."""


class RateLimitError(MiroApiError):
    """Miro answered 429; ``retry_after`` is the suggested wait in seconds."""

    def __init__(self, message: str, retry_after: int = 60):
        super().__init__(message, status_code=429, retryable=True)
        self.retry_after = retry_after


class RequestTimeoutError(MiroApiError):
    """The outbound request did not complete within the configured timeout."""

    def __init__(self, message: str):
        super().__init__(message, status_code=None, retryable=True)


def error_details(exc: BaseException) -> Dict[str, Any]:
    """Describe an exception as a JSON-safe dict for logs and error envelopes."""
    details: Dict[str, Any] = {"type": type(exc).__name__}
    if isinstance(exc, MiroApiError):
        if exc.status_code is not None:
            details["statusCode"] = exc.status_code
        details["retryable"] = exc.retryable
        if isinstance(exc, RateLimitError):
            details["retryAfter"] = exc.retry_after
    return details
