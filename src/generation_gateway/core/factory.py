"""
Provider factory: builds and caches one adapter per backend.
"""

import logging
from typing import Dict, Optional, Type

import httpx

from ..adapters import (
    ClaudeAdapter,
    DeepSeekAdapter,
    GeminiAdapter,
    HTTPProvider,
    OpenRouterAdapter,
    TogetherAdapter,
)
from .catalog import ProviderCatalog
from .config import GatewaySettings
from .interface import AbstractProvider

logger = logging.getLogger(__name__)


ADAPTER_CLASSES: Dict[str, Type[HTTPProvider]] = {
    "openrouter": OpenRouterAdapter,
    "deepseek": DeepSeekAdapter,
    "claude": ClaudeAdapter,
    "gemini": GeminiAdapter,
    "together": TogetherAdapter,
}


class ProviderFactory:
    """
    Lazily builds adapters and caches them by backend key.

    The cache has no eviction: adapters hold only configuration fixed at
    construction. Two concurrent first resolutions may both build an
    adapter; the first one stored wins and the other is discarded.
    """

    def __init__(
        self,
        settings: GatewaySettings,
        catalog: Optional[ProviderCatalog] = None,
        adapter_classes: Optional[Dict[str, Type[HTTPProvider]]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the factory.

        Args:
            settings: Gateway settings holding credentials and timeouts
            catalog: Backend catalog (defaults to the built-in one)
            adapter_classes: Backend key to adapter class mapping
            transport: Optional httpx transport handed to every adapter
        """
        self._settings = settings
        self._catalog = catalog or ProviderCatalog()
        self._adapter_classes = ADAPTER_CLASSES if adapter_classes is None else adapter_classes
        self._transport = transport
        self._cache: Dict[str, AbstractProvider] = {}

    @property
    def catalog(self) -> ProviderCatalog:
        return self._catalog

    def cached(self) -> Dict[str, AbstractProvider]:
        return dict(self._cache)

    def resolve(self, key: str) -> Optional[AbstractProvider]:
        """
        Get the adapter for a backend, building it on first use.

        Args:
            key: Backend key from the catalog

        Returns:
            Adapter instance, or None when the backend has no credential
            or no adapter implementation

        Raises:
            ProviderNotFoundError: If the key is not in the catalog
        """
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        descriptor = self._catalog.get(key)

        api_key = self._settings.api_key_for(descriptor.env_key)
        if not api_key:
            logger.warning(f"{descriptor.env_key} not configured, skipping {key}")
            return None

        adapter_class = self._adapter_classes.get(key)
        if adapter_class is None:
            logger.error(f"Provider implementation not found: {key}")
            return None

        adapter = adapter_class(
            key,
            descriptor,
            api_key,
            base_url=self._settings.base_urls.get(key),
            timeout=self._settings.request_timeout,
            probe_timeout=self._settings.probe_timeout,
            transport=self._transport,
            **self._settings.adapter_options.get(key, {}),
        )
        provider = self._cache.setdefault(key, adapter)
        logger.info(f"Created provider adapter: {key} ({descriptor.kind.value})")
        return provider

    async def aclose(self) -> None:
        """Close every cached adapter."""
        for key, provider in list(self._cache.items()):
            try:
                await provider.aclose()
            except Exception as e:
                logger.error(f"Failed to close provider {key}: {e}")
        self._cache.clear()
