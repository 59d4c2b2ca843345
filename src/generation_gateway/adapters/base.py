"""
Shared HTTP plumbing for backend adapters.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..core.errors import (
    MalformedResponseError,
    ProviderAuthenticationError,
    ProviderConnectionError,
    ProviderRateLimitError,
    UpstreamError,
)
from ..core.interface import AbstractProvider

logger = logging.getLogger(__name__)


def dig(data: Any, *path: Any) -> Any:
    """
    Walk nested dicts/lists, returning None as soon as a step is missing.

    ``dig(data, "choices", 0, "message", "content")``
    """
    current = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or len(current) <= step:
                return None
            current = current[step]
        else:
            if not isinstance(current, dict):
                return None
            current = current.get(step)
        if current is None:
            return None
    return current


def as_text(value: Any) -> str:
    """Return value when it is a string, otherwise an empty string."""
    return value if isinstance(value, str) else ""


def as_mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def token_count(value: Any) -> int:
    """Coerce a reported token count to a non-negative int, 0 when unusable."""
    if isinstance(value, bool):
        return 0
    try:
        return max(int(value), 0)
    except (TypeError, ValueError, OverflowError):
        return 0


class HTTPProvider(AbstractProvider):
    """
    Base for adapters speaking JSON over HTTP.

    Owns one lazily created httpx.AsyncClient. Subclasses provide
    _default_headers() and the wire mapping for each capability.
    """

    def __init__(
        self,
        key: str,
        descriptor,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        probe_timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the adapter.

        Args:
            key: Catalog key of the backend
            descriptor: ProviderDescriptor from the catalog
            api_key: Backend credential
            base_url: Endpoint override (defaults to the descriptor's)
            timeout: Per-request timeout in seconds
            probe_timeout: Timeout for availability probes
            transport: Optional httpx transport, used by tests
        """
        super().__init__(key, descriptor, api_key)
        self._base_url = (base_url or descriptor.base_url).rstrip("/")
        self._timeout = timeout
        self._probe_timeout = probe_timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def base_url(self) -> str:
        return self._base_url

    def _default_headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._default_headers(),
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _post_json(
        self,
        path: str,
        body: Dict[str, Any],
        params: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        POST a JSON body and decode the JSON response.

        Raises:
            GatewayError: Subclass matching the failure
        """
        try:
            response = await self._get_client().post(path, json=body, params=params)
        except httpx.TimeoutException as e:
            raise ProviderConnectionError(f"{self.name} request timed out: {e}", provider=self._key)
        except httpx.HTTPError as e:
            raise ProviderConnectionError(f"{self.name} request failed: {e}", provider=self._key)

        self._check_response_errors(response)
        return self._decode(response)

    async def _probe(self, method: str, path: str, **kwargs) -> Optional[httpx.Response]:
        """Send a probe request, returning None on any transport failure."""
        try:
            return await self._get_client().request(
                method, path, timeout=self._probe_timeout, **kwargs
            )
        except httpx.HTTPError as e:
            logger.info(f"{self.name} probe failed: {e}")
            return None

    def _decode(self, response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            raise MalformedResponseError(
                f"{self.name} returned a non-JSON response", provider=self._key
            )
        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"{self.name} returned an unexpected response shape", provider=self._key
            )
        return data

    def _malformed(self, result_type, capability: str, error: Exception):
        """Failure envelope for a 2xx body whose fields have the wrong types."""
        logger.error(f"[{self.name}] Malformed {capability} response: {error}")
        return result_type.fail(
            f"{self.name} returned a malformed {capability} response", provider=self._key
        )

    def _check_response_errors(self, response: httpx.Response) -> None:
        """Check response for errors and raise appropriate exceptions."""
        if response.is_success:
            return

        if response.status_code in (401, 403):
            raise ProviderAuthenticationError(
                f"{self.name} API error: {response.status_code} - invalid API key",
                provider=self._key,
            )

        if response.status_code == 429:
            retry_after = response.headers.get("retry-after")
            raise ProviderRateLimitError(
                f"{self.name} API error: 429 - rate limit exceeded",
                provider=self._key,
                retry_after=float(retry_after) if retry_after and retry_after.isdigit() else None,
            )

        error_data: Any = {}
        try:
            error_data = response.json()
        except ValueError:
            error_data = response.text[:200]

        raise UpstreamError(
            f"{self.name} API error: {response.status_code} - {error_data}",
            provider=self._key,
            status_code=response.status_code,
        )

