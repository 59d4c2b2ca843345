"""
Provider selection with ordered fallback.
"""

import asyncio
import logging
from typing import Callable, Optional

from .config import GatewaySettings
from .factory import ProviderFactory
from .interface import AbstractProvider, Capability

logger = logging.getLogger(__name__)

SMART_DEFAULT_CAPABILITIES = frozenset({Capability.IMAGE, Capability.AUDIO})


class ProviderSelector:
    """
    Picks an available adapter for a capability.

    Order: primary backend, then the declared fallback list in order, then
    (image and audio only) the smart-default backend. First available wins.
    """

    def __init__(
        self,
        factory: ProviderFactory,
        settings: GatewaySettings,
        on_probe: Optional[Callable[[str, bool], None]] = None,
    ):
        """
        Initialize the selector.

        Args:
            factory: Factory resolving backend keys to adapters
            settings: Gateway settings with primary and fallback names
            on_probe: Optional hook called with (key, available) per probe
        """
        self._factory = factory
        self._settings = settings
        self._on_probe = on_probe

    async def _probe(self, provider: AbstractProvider) -> bool:
        try:
            available = await asyncio.wait_for(
                provider.is_available(),
                timeout=self._settings.probe_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Availability probe timed out for {provider.key}")
            available = False
        except Exception as e:
            logger.warning(f"Availability probe failed for {provider.key}: {e}")
            available = False

        available = bool(available)
        if self._on_probe is not None:
            self._on_probe(provider.key, available)
        return available

    async def _try(self, key: str) -> Optional[AbstractProvider]:
        provider = self._factory.resolve(key)
        if provider is None:
            return None
        if await self._probe(provider):
            return provider
        return None

    async def select(self, capability: Capability) -> Optional[AbstractProvider]:
        """
        Select an available provider.

        Args:
            capability: Requested capability

        Returns:
            Available adapter, or None when the chain is exhausted
        """
        primary = await self._try(self._settings.primary_provider(capability))
        if primary is not None:
            logger.info(f"Using {primary.name} for {capability.value}")
            return primary

        for key in self._settings.fallback_providers:
            fallback = await self._try(key)
            if fallback is not None:
                logger.info(f"Falling back to {fallback.name} for {capability.value}")
                return fallback

        if capability in SMART_DEFAULT_CAPABILITIES:
            smart_default = await self._try(self._settings.smart_default_provider)
            if smart_default is not None:
                logger.info(f"Using {smart_default.name} for {capability.value} (smart default)")
                return smart_default

        logger.error(f"No available provider for {capability.value}")
        return None
