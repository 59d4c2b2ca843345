"""
OpenRouter adapter.

OpenRouter multiplexes many upstream models behind the OpenAI protocol.
It is the only backend here with native streaming, delivered as
server-sent events.
"""

import json
import logging
from typing import AsyncIterator, Dict, List, Optional

import httpx

from ..core.errors import GatewayError, ProviderConnectionError, UpstreamError
from ..models.request import ConversationTurn, GenerationOptions
from ..models.response import ImagePayload, ImageResult
from .base import as_text, dig
from .openai_compat_adapter import OpenAICompatibleProvider

logger = logging.getLogger(__name__)


class OpenRouterAdapter(OpenAICompatibleProvider):
    """OpenRouter text, streaming and image adapter."""

    DEFAULT_TEXT_MODEL = "deepseek/deepseek-chat"
    DEFAULT_IMAGE_MODEL = "openrouter/auto"
    # /key validates the credential, /models is public
    MODELS_PATH = "/key"

    def __init__(self, *args, referer: Optional[str] = None, title: Optional[str] = None, **kwargs):
        """
        Initialize OpenRouter adapter.

        Args:
            referer: Optional HTTP-Referer attribution header
            title: Optional X-Title attribution header
        """
        self._referer = referer
        self._title = title
        super().__init__(*args, **kwargs)

    def _default_headers(self) -> Dict[str, str]:
        headers = super()._default_headers()
        if self._referer:
            headers["HTTP-Referer"] = self._referer
        if self._title:
            headers["X-Title"] = self._title
        return headers

    @property
    def supports_streaming(self) -> bool:
        return True

    async def generate_text_stream(
        self,
        system_prompt: str,
        history: List[ConversationTurn],
        user_input: str,
        options: Optional[GenerationOptions] = None,
    ) -> AsyncIterator[str]:
        """
        Stream a chat completion.

        Yields:
            Content fragments in arrival order

        Raises:
            GatewayError: On upstream or transport failure
        """
        options = options or GenerationOptions()
        body = self._build_chat_body(system_prompt, history, user_input, options)
        body["stream"] = True

        try:
            async with self._get_client().stream("POST", "/chat/completions", json=body) as response:
                if not response.is_success:
                    await response.aread()
                self._check_response_errors(response)

                async for line in response.aiter_lines():
                    if not line.startswith("data: "):
                        continue
                    data = line[6:].strip()
                    if data == "[DONE]":
                        break
                    try:
                        chunk = json.loads(data)
                    except json.JSONDecodeError:
                        continue
                    if not isinstance(chunk, dict):
                        continue
                    # mid-stream failures arrive as a chunk with a top-level error
                    error = chunk.get("error")
                    if error:
                        message = error.get("message") if isinstance(error, dict) else str(error)
                        raise UpstreamError(
                            f"{self.name} stream error: {message or 'unknown error'}",
                            provider=self._key,
                        )
                    content = as_text(dig(chunk, "choices", 0, "delta", "content"))
                    if content:
                        yield content

        except httpx.HTTPError as e:
            raise ProviderConnectionError(f"{self.name} stream failed: {e}", provider=self._key)

    async def generate_image(
        self,
        prompt: str,
        options: Optional[GenerationOptions] = None,
    ) -> ImageResult:
        """Generate an image through an image-capable chat model."""
        options = options or GenerationOptions()
        body = {
            "model": options.resolve_model(self.DEFAULT_IMAGE_MODEL),
            "messages": [{"role": "user", "content": prompt}],
            "modalities": ["image", "text"],
        }

        try:
            data = await self._post_json("/chat/completions", body)
        except GatewayError as e:
            logger.error(f"[{self.name}] Image generation error: {e.message}")
            return ImageResult.fail(e.message, provider=self._key)

        url = as_text(dig(data, "choices", 0, "message", "images", 0, "image_url", "url"))
        if not url.startswith("data:") or "," not in url:
            return ImageResult.fail("No image data returned", provider=self._key)

        # data:image/png;base64,<payload>
        header, image = url.split(",", 1)
        mime_type = header[5:].split(";", 1)[0] or "image/png"
        return ImageResult.ok(ImagePayload(image=image, mime_type=mime_type), provider=self._key)
