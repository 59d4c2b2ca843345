"""
Generation gateway data models.
"""

from .request import (
    ConversationTurn,
    GenerationOptions,
    normalize_history,
    DEFAULT_TEMPERATURE,
    DEFAULT_MAX_TOKENS,
)
from .response import (
    ResultEnvelope,
    TextResult,
    ImageResult,
    AudioResult,
    TextPayload,
    ImagePayload,
    AudioPayload,
    Usage,
)

__all__ = [
    "ConversationTurn",
    "GenerationOptions",
    "normalize_history",
    "DEFAULT_TEMPERATURE",
    "DEFAULT_MAX_TOKENS",
    "ResultEnvelope",
    "TextResult",
    "ImageResult",
    "AudioResult",
    "TextPayload",
    "ImagePayload",
    "AudioPayload",
    "Usage",
]
