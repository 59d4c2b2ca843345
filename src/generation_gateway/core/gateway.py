"""
Generation gateway: the single entry point for callers.

Callers pass a system prompt, ordered history and input; they get back a
ResultEnvelope (or, for streaming, text fragments) and never see
backend-specific fields.
"""

import logging
from typing import AsyncIterator, Dict, Optional

import httpx

from ..models.request import GenerationOptions, HistoryLike, normalize_history
from ..models.response import AudioResult, ImageResult, TextResult
from .catalog import ProviderCatalog
from .config import GatewaySettings, load_settings
from .factory import ProviderFactory
from .interface import Capability
from .selector import ProviderSelector
from .streaming import error_fragment, stream_text

logger = logging.getLogger(__name__)


def unavailable_message(capability: Capability) -> str:
    return f"No AI {capability.value} provider available. Please configure API keys."


class GenerationGateway:
    """
    Routes text, image and audio requests to an available backend.

    Each gateway owns its own factory cache, so separate instances never
    share adapters.
    """

    def __init__(
        self,
        settings: Optional[GatewaySettings] = None,
        catalog: Optional[ProviderCatalog] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the gateway.

        Args:
            settings: Gateway settings (loaded from file/environment if None)
            catalog: Backend catalog (defaults to the built-in one)
            transport: Optional httpx transport handed to adapters

        Raises:
            ProviderNotFoundError: If settings name an unknown backend
        """
        self._catalog = catalog or ProviderCatalog()
        self._settings = settings or load_settings(catalog=self._catalog)
        self._settings.validate(self._catalog)
        self._factory = ProviderFactory(self._settings, self._catalog, transport=transport)
        self._selector = ProviderSelector(self._factory, self._settings)

    @property
    def settings(self) -> GatewaySettings:
        return self._settings

    @property
    def factory(self) -> ProviderFactory:
        return self._factory

    @property
    def selector(self) -> ProviderSelector:
        return self._selector

    async def generate_text(
        self,
        system_prompt: str,
        history: Optional[HistoryLike],
        user_input: str,
        options: Optional[GenerationOptions] = None,
    ) -> TextResult:
        """Generate a text reply from the first available text backend."""
        provider = await self._selector.select(Capability.TEXT)
        if provider is None:
            return TextResult.fail(unavailable_message(Capability.TEXT))

        try:
            return await provider.generate_text(system_prompt, normalize_history(history), user_input, options)
        except Exception as e:
            logger.exception(f"Text generation error on {provider.key}")
            return TextResult.fail(str(e) or type(e).__name__, provider=provider.key)

    async def generate_image(
        self,
        prompt: str,
        options: Optional[GenerationOptions] = None,
    ) -> ImageResult:
        """Generate an image from the first available image backend."""
        provider = await self._selector.select(Capability.IMAGE)
        if provider is None:
            return ImageResult.fail(unavailable_message(Capability.IMAGE))

        try:
            return await provider.generate_image(prompt, options)
        except Exception as e:
            logger.exception(f"Image generation error on {provider.key}")
            return ImageResult.fail(str(e) or type(e).__name__, provider=provider.key)

    async def generate_audio(
        self,
        text: str,
        options: Optional[GenerationOptions] = None,
    ) -> AudioResult:
        """Synthesize speech from the first available audio backend."""
        provider = await self._selector.select(Capability.AUDIO)
        if provider is None:
            return AudioResult.fail(unavailable_message(Capability.AUDIO))

        try:
            return await provider.generate_audio(text, options)
        except Exception as e:
            logger.exception(f"Audio generation error on {provider.key}")
            return AudioResult.fail(str(e) or type(e).__name__, provider=provider.key)

    async def stream_text(
        self,
        system_prompt: str,
        history: Optional[HistoryLike],
        user_input: str,
        options: Optional[GenerationOptions] = None,
    ) -> AsyncIterator[str]:
        """
        Stream a text reply as ordered fragments.

        Yields:
            Text fragments, or one ``[ERROR] ...`` fragment on failure
        """
        provider = await self._selector.select(Capability.TEXT)
        if provider is None:
            yield error_fragment(unavailable_message(Capability.TEXT))
            return

        fragments = stream_text(
            provider,
            system_prompt,
            normalize_history(history),
            user_input,
            options,
            delay=self._settings.stream_delay,
        )
        try:
            async for fragment in fragments:
                yield fragment
        except Exception as e:
            logger.exception(f"Streaming error on {provider.key}")
            yield error_fragment(str(e) or type(e).__name__)
        finally:
            await fragments.aclose()

    async def health_check(self) -> Dict[str, bool]:
        """
        Probe every catalogued backend that has a credential.

        Returns:
            Backend key to availability
        """
        results = {}
        for key in self._catalog:
            provider = self._factory.resolve(key)
            if provider is None:
                continue
            try:
                results[key] = bool(await provider.is_available())
            except Exception as e:
                logger.warning(f"Health check failed for {key}: {e}")
                results[key] = False
        return results

    async def aclose(self) -> None:
        await self._factory.aclose()

    async def __aenter__(self) -> "GenerationGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
