"""
Core generation gateway components.
"""

from .interface import AbstractProvider, Capability, ProviderKind
from .errors import (
    GatewayError,
    ProviderNotFoundError,
    ProviderConnectionError,
    ProviderAuthenticationError,
    ProviderRateLimitError,
    UpstreamError,
    MalformedResponseError,
)
from .catalog import ProviderCatalog, ProviderDescriptor, ModelCatalog, RateLimit
from .config import GatewaySettings, load_settings
from .audio import pcm_to_wav
from .factory import ProviderFactory
from .selector import ProviderSelector
from .streaming import split_fragments, stream_text
from .gateway import GenerationGateway

__all__ = [
    "AbstractProvider",
    "Capability",
    "ProviderKind",
    "GatewayError",
    "ProviderNotFoundError",
    "ProviderConnectionError",
    "ProviderAuthenticationError",
    "ProviderRateLimitError",
    "UpstreamError",
    "MalformedResponseError",
    "ProviderCatalog",
    "ProviderDescriptor",
    "ModelCatalog",
    "RateLimit",
    "GatewaySettings",
    "load_settings",
    "pcm_to_wav",
    "ProviderFactory",
    "ProviderSelector",
    "split_fragments",
    "stream_text",
    "GenerationGateway",
]
