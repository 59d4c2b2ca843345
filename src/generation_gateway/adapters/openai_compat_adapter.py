"""
Adapter base for backends speaking the OpenAI chat-completions protocol.

DeepSeek, Together AI and OpenRouter all accept the same request and
response shapes; they differ in default models, probes and extras.
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.errors import GatewayError
from ..core.interface import Capability
from ..models.request import ConversationTurn, GenerationOptions
from ..models.response import AudioResult, ImageResult, TextPayload, TextResult, Usage
from .base import HTTPProvider, as_mapping, as_text, dig, token_count

logger = logging.getLogger(__name__)


def usage_from_openai(data: Dict[str, Any]) -> Usage:
    usage = as_mapping(data.get("usage"))
    return Usage(
        prompt_tokens=token_count(usage.get("prompt_tokens")),
        completion_tokens=token_count(usage.get("completion_tokens")),
        total_tokens=token_count(usage.get("total_tokens")),
    )


class OpenAICompatibleProvider(HTTPProvider):
    """
    Chat-completions adapter.

    The system prompt travels as a leading ``system`` message and history
    roles are passed through unchanged.
    """

    DEFAULT_TEXT_MODEL = ""
    MODELS_PATH = "/models"

    def _default_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

    def _build_messages(
        self,
        system_prompt: str,
        history: List[ConversationTurn],
        user_input: str,
    ) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": system_prompt},
            *({"role": turn.role, "content": turn.content} for turn in history),
            {"role": "user", "content": user_input},
        ]

    def _build_chat_body(
        self,
        system_prompt: str,
        history: List[ConversationTurn],
        user_input: str,
        options: GenerationOptions,
    ) -> Dict[str, Any]:
        return {
            "model": options.resolve_model(self.DEFAULT_TEXT_MODEL),
            "messages": self._build_messages(system_prompt, history, user_input),
            "temperature": options.resolve_temperature(),
            "max_tokens": options.resolve_max_tokens(),
        }

    async def generate_text(
        self,
        system_prompt: str,
        history: List[ConversationTurn],
        user_input: str,
        options: Optional[GenerationOptions] = None,
    ) -> TextResult:
        """Create a chat completion."""
        options = options or GenerationOptions()
        body = self._build_chat_body(system_prompt, history, user_input, options)

        try:
            data = await self._post_json("/chat/completions", body)
        except GatewayError as e:
            logger.error(f"[{self.name}] Text generation error: {e.message}")
            return TextResult.fail(e.message, provider=self._key)

        try:
            return TextResult.ok(
                TextPayload(text=as_text(dig(data, "choices", 0, "message", "content"))),
                usage=usage_from_openai(data),
                provider=self._key,
            )
        except (ValueError, TypeError, AttributeError) as e:
            return self._malformed(TextResult, "text", e)

    async def generate_image(
        self,
        prompt: str,
        options: Optional[GenerationOptions] = None,
    ) -> ImageResult:
        return self._unsupported(Capability.IMAGE)

    async def generate_audio(
        self,
        text: str,
        options: Optional[GenerationOptions] = None,
    ) -> AudioResult:
        return self._unsupported(Capability.AUDIO)

    async def is_available(self) -> bool:
        """Probe the models endpoint; any non-2xx means unavailable."""
        response = await self._probe("GET", self.MODELS_PATH)
        return response is not None and response.is_success
