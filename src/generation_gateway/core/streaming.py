"""
Streaming bridge for text generation.

Forwards to an adapter's native stream when it has one, otherwise paces
a completed response out as word and whitespace fragments.
"""

import asyncio
import logging
import re
from typing import AsyncIterator, List, Optional

from .errors import GatewayError
from .interface import AbstractProvider
from ..models.request import ConversationTurn, GenerationOptions

logger = logging.getLogger(__name__)

ERROR_PREFIX = "[ERROR] "

_WHITESPACE = re.compile(r"(\s+)")


def split_fragments(text: str) -> List[str]:
    """
    Split text into alternating word and whitespace fragments.

    ``"".join(split_fragments(text)) == text`` always holds.
    """
    return [piece for piece in _WHITESPACE.split(text) if piece]


def error_fragment(message: Optional[str]) -> str:
    return f"{ERROR_PREFIX}{message or 'Unknown error'}"


async def stream_text(
    provider: AbstractProvider,
    system_prompt: str,
    history: List[ConversationTurn],
    user_input: str,
    options: Optional[GenerationOptions] = None,
    delay: float = 0.02,
) -> AsyncIterator[str]:
    """
    Yield text fragments from a provider.

    Args:
        provider: Adapter chosen for this request
        system_prompt: Instructions for the model
        history: Ordered prior turns
        user_input: The new user message
        options: Generation options
        delay: Pause between synthesized fragments, in seconds

    Yields:
        Fragments in order; on failure a single ``[ERROR] ...`` fragment
        ends the sequence
    """
    if provider.supports_streaming:
        try:
            async for fragment in provider.generate_text_stream(system_prompt, history, user_input, options):
                yield fragment
        except GatewayError as e:
            logger.error(f"[{provider.name}] Streaming error: {e.message}")
            yield error_fragment(e.message)
        return

    result = await provider.generate_text(system_prompt, history, user_input, options)
    if not result.success:
        yield error_fragment(result.error)
        return

    for index, fragment in enumerate(split_fragments(result.payload.text)):
        if index and delay > 0:
            await asyncio.sleep(delay)
        yield fragment
