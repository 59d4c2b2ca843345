"""
Direct Anthropic Claude API adapter.
"""

import logging
from typing import Dict, List, Optional

from ..core.errors import GatewayError
from ..core.interface import Capability
from ..models.request import ConversationTurn, GenerationOptions
from ..models.response import AudioResult, ImageResult, TextPayload, TextResult, Usage
from .base import HTTPProvider, as_mapping, as_text, dig, token_count

logger = logging.getLogger(__name__)


class ClaudeAdapter(HTTPProvider):
    """
    Anthropic Messages API adapter.

    The system prompt goes into the dedicated ``system`` field and every
    non-user history turn is sent as ``assistant``.
    """

    ANTHROPIC_VERSION = "2023-06-01"
    DEFAULT_TEXT_MODEL = "claude-3-5-sonnet-20241022"

    def _default_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self._api_key,
            "anthropic-version": self.ANTHROPIC_VERSION,
        }

    async def generate_text(
        self,
        system_prompt: str,
        history: List[ConversationTurn],
        user_input: str,
        options: Optional[GenerationOptions] = None,
    ) -> TextResult:
        """Create a message via the Anthropic API."""
        options = options or GenerationOptions()
        messages = [
            {"role": "user" if turn.role == "user" else "assistant", "content": turn.content}
            for turn in history
        ]
        messages.append({"role": "user", "content": user_input})

        body = {
            "model": options.resolve_model(self.DEFAULT_TEXT_MODEL),
            "max_tokens": options.resolve_max_tokens(),
            "temperature": options.resolve_temperature(),
            "system": system_prompt,
            "messages": messages,
        }

        try:
            data = await self._post_json("/messages", body)
        except GatewayError as e:
            logger.error(f"[{self.name}] Text generation error: {e.message}")
            return TextResult.fail(e.message, provider=self._key)

        try:
            usage_data = as_mapping(data.get("usage"))
            input_tokens = token_count(usage_data.get("input_tokens"))
            output_tokens = token_count(usage_data.get("output_tokens"))

            return TextResult.ok(
                TextPayload(text=as_text(dig(data, "content", 0, "text"))),
                usage=Usage(
                    prompt_tokens=input_tokens,
                    completion_tokens=output_tokens,
                    total_tokens=input_tokens + output_tokens,
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
        return self._unsupported(Capability.IMAGE)

    async def generate_audio(
        self,
        text: str,
        options: Optional[GenerationOptions] = None,
    ) -> AudioResult:
        return self._unsupported(Capability.AUDIO)

    async def is_available(self) -> bool:
        """
        Probe with a 1-token message.

        A 400 still proves the endpoint is reachable and the key accepted,
        so it counts as available for this backend.
        """
        response = await self._probe(
            "POST",
            "/messages",
            json={
                "model": self.DEFAULT_TEXT_MODEL,
                "max_tokens": 1,
                "messages": [{"role": "user", "content": "test"}],
            },
        )
        if response is None:
            return False
        return response.is_success or response.status_code == 400
