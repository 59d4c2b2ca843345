"""
Static catalog of backend descriptors.

The catalog is read-only: adding a backend means adding a descriptor here
and an adapter class in the factory.
"""

from types import MappingProxyType
from typing import Dict, FrozenSet, Iterator, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .errors import ProviderNotFoundError
from .interface import Capability, ProviderKind


class RateLimit(BaseModel):
    """Declared rate limit. Advisory only, never enforced by the gateway."""
    model_config = ConfigDict(frozen=True)

    rpm: int
    tpm: int


class ModelCatalog(BaseModel):
    """
    Models per capability.

    ``None`` means the capability is not supported at all, while an empty
    tuple means supported with no models declared.
    """
    model_config = ConfigDict(frozen=True)

    text: Tuple[str, ...] = ()
    image: Optional[Tuple[str, ...]] = None
    audio: Optional[Tuple[str, ...]] = None

    def for_capability(self, capability: Capability) -> Optional[Tuple[str, ...]]:
        return getattr(self, capability.value)


class ProviderDescriptor(BaseModel):
    """Immutable description of one upstream backend."""
    model_config = ConfigDict(frozen=True)

    name: str
    kind: ProviderKind
    base_url: str
    env_key: str
    models: ModelCatalog
    rate_limits: Optional[RateLimit] = None

    @property
    def capabilities(self) -> FrozenSet[Capability]:
        return frozenset(
            c for c in Capability if self.models.for_capability(c) is not None
        )


PROVIDER_DESCRIPTORS: Dict[str, ProviderDescriptor] = {
    "openrouter": ProviderDescriptor(
        name="OpenRouter",
        kind=ProviderKind.GATEWAY,
        base_url="https://openrouter.ai/api/v1",
        env_key="OPENROUTER_API_KEY",
        models=ModelCatalog(
            text=(
                "deepseek/deepseek-chat",
                "anthropic/claude-3.5-sonnet",
                "google/gemini-2.5-flash",
                "x-ai/grok-2",
                "mistralai/mistral-large",
                "meta-llama/llama-3.3-70b-instruct",
            ),
            image=("openrouter/auto",),
        ),
        rate_limits=RateLimit(rpm=20, tpm=250000),
    ),
    "deepseek": ProviderDescriptor(
        name="DeepSeek",
        kind=ProviderKind.NATIVE,
        base_url="https://api.deepseek.com/v1",
        env_key="DEEPSEEK_API_KEY",
        models=ModelCatalog(text=("deepseek-chat", "deepseek-reasoner")),
        rate_limits=RateLimit(rpm=60, tpm=1000000),
    ),
    "claude": ProviderDescriptor(
        name="Anthropic Claude",
        kind=ProviderKind.NATIVE,
        base_url="https://api.anthropic.com/v1",
        env_key="ANTHROPIC_API_KEY",
        models=ModelCatalog(text=("claude-3-5-sonnet-20241022", "claude-3-opus-20240229")),
        rate_limits=RateLimit(rpm=50, tpm=400000),
    ),
    "grok": ProviderDescriptor(
        name="Grok (xAI)",
        kind=ProviderKind.NATIVE,
        base_url="https://api.x.ai/v1",
        env_key="GROK_API_KEY",
        models=ModelCatalog(text=("grok-2-1212", "grok-2-vision-1212")),
        rate_limits=RateLimit(rpm=60, tpm=600000),
    ),
    "gemini": ProviderDescriptor(
        name="Google Gemini",
        kind=ProviderKind.NATIVE,
        base_url="https://generativelanguage.googleapis.com/v1beta",
        env_key="GEMINI_API_KEY",
        models=ModelCatalog(
            text=("gemini-2.5-flash-preview-09-2025", "gemini-2.5-pro"),
            image=("imagen-4.0-generate-001",),
            audio=("gemini-2.5-flash-preview-tts",),
        ),
        rate_limits=RateLimit(rpm=15, tpm=1000000),
    ),
    "together": ProviderDescriptor(
        name="Together AI",
        kind=ProviderKind.GATEWAY,
        base_url="https://api.together.xyz/v1",
        env_key="TOGETHER_API_KEY",
        models=ModelCatalog(
            text=(
                "deepseek-ai/DeepSeek-R1",
                "meta-llama/Meta-Llama-3.1-70B-Instruct-Turbo",
                "Qwen/QwQ-32B-Preview",
            ),
            image=("black-forest-labs/FLUX.1-schnell",),
        ),
        rate_limits=RateLimit(rpm=60, tpm=600000),
    ),
}

DEFAULT_PROVIDER = "openrouter"
SMART_DEFAULT_PROVIDER = "gemini"


class ProviderCatalog:
    """
    Read-only lookup over backend descriptors.

    Tests may build a catalog from their own descriptors.
    """

    def __init__(self, descriptors: Optional[Mapping[str, ProviderDescriptor]] = None):
        self._descriptors = MappingProxyType(
            dict(PROVIDER_DESCRIPTORS if descriptors is None else descriptors)
        )

    def get(self, key: str) -> ProviderDescriptor:
        """
        Get a descriptor by backend key.

        Raises:
            ProviderNotFoundError: If the key is not catalogued
        """
        try:
            return self._descriptors[key]
        except KeyError:
            raise ProviderNotFoundError(f"Unknown provider: {key}", provider=key) from None

    def __contains__(self, key: str) -> bool:
        return key in self._descriptors

    def __iter__(self) -> Iterator[str]:
        return iter(self._descriptors)

    def keys(self) -> List[str]:
        return list(self._descriptors)

    def providers_for(self, capability: Capability) -> List[str]:
        """Backend keys that declare support for a capability."""
        return [
            key for key, descriptor in self._descriptors.items()
            if capability in descriptor.capabilities
        ]
