"""
Generation gateway error types.

Adapters raise these internally and convert them into failure envelopes
at their method boundary. Only ProviderNotFoundError is meant to reach
callers, since it signals a configuration mistake.
"""

from typing import Optional


class GatewayError(Exception):
    """Base exception for gateway errors."""

    def __init__(self, message: str, provider: Optional[str] = None):
        self.message = message
        self.provider = provider
        super().__init__(message)


class ProviderNotFoundError(GatewayError):
    """Raised when a backend name is not in the catalog."""
    pass


class ProviderConnectionError(GatewayError):
    """Raised when the backend cannot be reached or times out."""
    pass


class ProviderAuthenticationError(GatewayError):
    """Raised when the backend rejects the credential."""
    pass


class ProviderRateLimitError(GatewayError):
    """Raised when the backend reports a rate limit."""

    def __init__(self, message: str, provider: Optional[str] = None, retry_after: Optional[float] = None):
        super().__init__(message, provider)
        self.retry_after = retry_after


class UpstreamError(GatewayError):
    """Raised on any other non-2xx response."""

    def __init__(self, message: str, provider: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message, provider)
        self.status_code = status_code


class MalformedResponseError(GatewayError):
    """Raised when a 2xx response body cannot be decoded."""
    pass
