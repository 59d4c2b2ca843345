"""
Generation Gateway

One interface for text, image and speech generation:
- Routes each request to an available backend with ordered fallback
- Normalizes every backend's wire format into a ResultEnvelope
- Streams text natively or by pacing a whole response
- Wraps raw PCM speech into WAV
"""

from .core.interface import AbstractProvider, Capability, ProviderKind
from .core.catalog import ProviderCatalog, ProviderDescriptor
from .core.config import GatewaySettings, load_settings
from .core.errors import GatewayError, ProviderNotFoundError
from .core.gateway import GenerationGateway
from .models.request import ConversationTurn, GenerationOptions
from .models.response import ResultEnvelope, TextResult, ImageResult, AudioResult, Usage

__all__ = [
    "AbstractProvider",
    "Capability",
    "ProviderKind",
    "ProviderCatalog",
    "ProviderDescriptor",
    "GatewaySettings",
    "load_settings",
    "GatewayError",
    "ProviderNotFoundError",
    "GenerationGateway",
    "ConversationTurn",
    "GenerationOptions",
    "ResultEnvelope",
    "TextResult",
    "ImageResult",
    "AudioResult",
    "Usage",
]
