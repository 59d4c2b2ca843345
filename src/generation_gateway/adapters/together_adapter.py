"""
Together AI adapter.

Text goes through the OpenAI-compatible chat endpoint. Images come from
FLUX via /images/generations and are returned as base64.
"""

import base64
import logging
from typing import Optional

import httpx

from ..core.errors import GatewayError, ProviderConnectionError
from ..models.request import GenerationOptions
from ..models.response import ImagePayload, ImageResult
from .base import as_text, dig
from .openai_compat_adapter import OpenAICompatibleProvider

logger = logging.getLogger(__name__)


class TogetherAdapter(OpenAICompatibleProvider):
    """Together AI text and image adapter."""

    DEFAULT_TEXT_MODEL = "deepseek-ai/DeepSeek-R1"
    DEFAULT_IMAGE_MODEL = "black-forest-labs/FLUX.1-schnell"

    async def generate_image(
        self,
        prompt: str,
        options: Optional[GenerationOptions] = None,
    ) -> ImageResult:
        """Generate an image with FLUX."""
        options = options or GenerationOptions()
        body = {
            "model": options.resolve_model(self.DEFAULT_IMAGE_MODEL),
            "prompt": prompt,
            "width": options.extra.get("width", 1024),
            "height": options.extra.get("height", 1024),
            "steps": options.extra.get("steps", 4),
            "n": 1,
        }

        try:
            data = await self._post_json("/images/generations", body)
            image = as_text(dig(data, "data", 0, "b64_json"))
            if not image:
                image_url = as_text(dig(data, "data", 0, "url"))
                if not image_url:
                    return ImageResult.fail("No image URL returned", provider=self._key)
                image = await self._download(image_url)
        except GatewayError as e:
            logger.error(f"[{self.name}] Image generation error: {e.message}")
            return ImageResult.fail(e.message, provider=self._key)

        return ImageResult.ok(ImagePayload(image=image), provider=self._key)

    async def _download(self, url: str) -> str:
        """
        Fetch a generated image.

        The URL points at a storage host, so the request goes through a
        separate client that carries none of the API credentials.
        """
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            raise ProviderConnectionError(f"{self.name} image download failed: {e}", provider=self._key)
        self._check_response_errors(response)
        return base64.b64encode(response.content).decode("ascii")
