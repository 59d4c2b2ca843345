"""
DeepSeek API adapter.
"""

from .openai_compat_adapter import OpenAICompatibleProvider


class DeepSeekAdapter(OpenAICompatibleProvider):
    """Text-only adapter for DeepSeek's OpenAI-compatible API."""

    DEFAULT_TEXT_MODEL = "deepseek-chat"
