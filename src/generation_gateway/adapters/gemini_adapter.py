"""
Google Gemini API adapter.

Covers all three capabilities: Gemini for text, Imagen for images and
the Gemini TTS model for speech.
"""

import base64
import binascii
import logging
from typing import Any, Dict, List, Optional

from ..core.audio import pcm_to_wav
from ..core.errors import GatewayError
from ..models.request import ConversationTurn, GenerationOptions
from ..models.response import (
    AudioPayload,
    AudioResult,
    ImagePayload,
    ImageResult,
    TextPayload,
    TextResult,
    Usage,
)
from .base import HTTPProvider, as_mapping, as_text, dig, token_count

logger = logging.getLogger(__name__)


class GeminiAdapter(HTTPProvider):
    """
    Gemini generativelanguage API adapter.

    Gemini has no system role here: the system prompt is sent as the
    first user-role content, and non-user history turns become ``model``.
    The API key travels as the ``key`` query parameter.
    """

    DEFAULT_TEXT_MODEL = "gemini-2.5-flash-preview-09-2025"
    DEFAULT_IMAGE_MODEL = "imagen-4.0-generate-001"
    DEFAULT_AUDIO_MODEL = "gemini-2.5-flash-preview-tts"
    DEFAULT_VOICE = "Fenrir"

    @property
    def _params(self) -> Dict[str, str]:
        return {"key": self._api_key}

    @staticmethod
    def _content(role: str, text: str) -> Dict[str, Any]:
        return {"role": role, "parts": [{"text": text}]}

    def _build_contents(
        self,
        system_prompt: str,
        history: List[ConversationTurn],
        user_input: str,
    ) -> List[Dict[str, Any]]:
        return [
            self._content("user", system_prompt),
            *(
                self._content("user" if turn.role == "user" else "model", turn.content)
                for turn in history
            ),
            self._content("user", user_input),
        ]

    async def generate_text(
        self,
        system_prompt: str,
        history: List[ConversationTurn],
        user_input: str,
        options: Optional[GenerationOptions] = None,
    ) -> TextResult:
        """Generate content with a Gemini text model."""
        options = options or GenerationOptions()
        model = options.resolve_model(self.DEFAULT_TEXT_MODEL)
        body = {
            "contents": self._build_contents(system_prompt, history, user_input),
            "generationConfig": {
                "temperature": options.resolve_temperature(),
                "maxOutputTokens": options.resolve_max_tokens(),
            },
        }

        try:
            data = await self._post_json(f"/models/{model}:generateContent", body, params=self._params)
        except GatewayError as e:
            logger.error(f"[{self.name}] Text generation error: {e.message}")
            return TextResult.fail(e.message, provider=self._key)

        try:
            metadata = as_mapping(data.get("usageMetadata"))
            return TextResult.ok(
                TextPayload(text=as_text(dig(data, "candidates", 0, "content", "parts", 0, "text"))),
                usage=Usage(
                    prompt_tokens=token_count(metadata.get("promptTokenCount")),
                    completion_tokens=token_count(metadata.get("candidatesTokenCount")),
                    total_tokens=token_count(metadata.get("totalTokenCount")),
                ),
                provider=self._key,
            )
        except (ValueError, TypeError, AttributeError) as e:
            return self._malformed(TextResult, "text", e)

    async def generate_image(
        self,
        prompt: str,
        options: Optional[GenerationOptions] = None,
    ) -> ImageResult:
        """Generate an image with Imagen."""
        options = options or GenerationOptions()
        model = options.resolve_model(self.DEFAULT_IMAGE_MODEL)
        body = {
            "instances": [{"prompt": prompt}],
            "parameters": {"sampleCount": 1},
        }

        try:
            data = await self._post_json(f"/models/{model}:predict", body, params=self._params)
        except GatewayError as e:
            logger.error(f"[{self.name}] Image generation error: {e.message}")
            return ImageResult.fail(e.message, provider=self._key)

        image = as_text(dig(data, "predictions", 0, "bytesBase64Encoded"))
        if not image:
            return ImageResult.fail("No image data returned", provider=self._key)

        mime_type = as_text(dig(data, "predictions", 0, "mimeType")) or "image/png"
        return ImageResult.ok(ImagePayload(image=image, mime_type=mime_type), provider=self._key)

    async def generate_audio(
        self,
        text: str,
        options: Optional[GenerationOptions] = None,
    ) -> AudioResult:
        """Synthesize speech; the raw PCM reply is wrapped into WAV."""
        options = options or GenerationOptions()
        model = options.resolve_model(self.DEFAULT_AUDIO_MODEL)
        voice = options.extra.get("voice", self.DEFAULT_VOICE)
        body = {
            "contents": [{"parts": [{"text": text}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": voice}},
                },
            },
        }

        try:
            data = await self._post_json(f"/models/{model}:generateContent", body, params=self._params)
        except GatewayError as e:
            logger.error(f"[{self.name}] Audio generation error: {e.message}")
            return AudioResult.fail(e.message, provider=self._key)

        encoded = as_text(dig(data, "candidates", 0, "content", "parts", 0, "inlineData", "data"))
        if not encoded:
            return AudioResult.fail("No audio data returned", provider=self._key)

        try:
            pcm = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError):
            return AudioResult.fail("Audio data is not valid base64", provider=self._key)

        wav = base64.b64encode(pcm_to_wav(pcm)).decode("ascii")
        return AudioResult.ok(AudioPayload(audio=wav), provider=self._key)

    async def is_available(self) -> bool:
        """Probe the models listing."""
        response = await self._probe("GET", "/models", params=self._params)
        return response is not None and response.is_success
