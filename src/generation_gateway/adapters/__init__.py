"""
Backend adapters for the supported AI providers.
"""

from .base import HTTPProvider
from .openai_compat_adapter import OpenAICompatibleProvider
from .openrouter_adapter import OpenRouterAdapter
from .deepseek_adapter import DeepSeekAdapter
from .claude_adapter import ClaudeAdapter
from .gemini_adapter import GeminiAdapter
from .together_adapter import TogetherAdapter

__all__ = [
    "HTTPProvider",
    "OpenAICompatibleProvider",
    "OpenRouterAdapter",
    "DeepSeekAdapter",
    "ClaudeAdapter",
    "GeminiAdapter",
    "TogetherAdapter",
]
