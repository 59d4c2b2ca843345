"""
Abstract provider interface definition.

Defines the contract that all backend adapters must implement.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import AsyncIterator, List, Optional, Set

from .errors import UpstreamError
from ..models.request import ConversationTurn, GenerationOptions
from ..models.response import AudioResult, ImageResult, ResultEnvelope, TextResult


class Capability(str, Enum):
    """Generation capabilities a backend may support."""
    TEXT = "text"
    IMAGE = "image"
    AUDIO = "audio"


class ProviderKind(str, Enum):
    """How a backend relates to the models it serves."""
    NATIVE = "native"
    GATEWAY = "gateway"


_RESULT_TYPES = {
    Capability.TEXT: TextResult,
    Capability.IMAGE: ImageResult,
    Capability.AUDIO: AudioResult,
}


class AbstractProvider(ABC):
    """
    Abstract base class for backend adapters.

    Every adapter implements all three generation methods. Returning a
    "not supported" failure envelope is a capability declaration, not an
    error. Generation methods never raise for upstream or transport faults.
    """

    def __init__(self, key: str, descriptor, api_key: str):
        """
        Initialize the provider.

        Args:
            key: Catalog key of the backend (e.g. "claude")
            descriptor: ProviderDescriptor from the catalog
            api_key: Resolved credential
        """
        self._key = key
        self._descriptor = descriptor
        self._api_key = api_key

    @property
    def key(self) -> str:
        return self._key

    @property
    def name(self) -> str:
        """Human-readable backend name."""
        return self._descriptor.name

    @property
    def kind(self) -> ProviderKind:
        return self._descriptor.kind

    @property
    def descriptor(self):
        return self._descriptor

    @property
    def capabilities(self) -> Set[Capability]:
        return self._descriptor.capabilities

    @property
    def supports_streaming(self) -> bool:
        """Whether generate_text_stream delivers text natively."""
        return False

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def list_models(self, capability: Capability = Capability.TEXT) -> List[str]:
        """
        List declared models for a capability.

        Returns:
            Ordered model identifiers, empty if the capability is unsupported
        """
        return list(self._descriptor.models.for_capability(capability) or [])

    @abstractmethod
    async def generate_text(
        self,
        system_prompt: str,
        history: List[ConversationTurn],
        user_input: str,
        options: Optional[GenerationOptions] = None,
    ) -> TextResult:
        """
        Generate a text completion.

        Args:
            system_prompt: Instructions for the model
            history: Ordered prior turns
            user_input: The new user message
            options: Model, temperature and token overrides

        Returns:
            Text result envelope
        """
        pass

    @abstractmethod
    async def generate_image(
        self,
        prompt: str,
        options: Optional[GenerationOptions] = None,
    ) -> ImageResult:
        """Generate an image as a base64 payload."""
        pass

    @abstractmethod
    async def generate_audio(
        self,
        text: str,
        options: Optional[GenerationOptions] = None,
    ) -> AudioResult:
        """Synthesize speech as a base64 WAV payload."""
        pass

    async def generate_text_stream(
        self,
        system_prompt: str,
        history: List[ConversationTurn],
        user_input: str,
        options: Optional[GenerationOptions] = None,
    ) -> AsyncIterator[str]:
        """
        Deliver text incrementally.

        Backends without native streaming yield the completed response as
        one fragment. The streaming bridge only forwards here when
        supports_streaming is True and paces other backends itself.

        Raises:
            UpstreamError: When the underlying generation fails
        """
        result = await self.generate_text(system_prompt, history, user_input, options)
        if not result.success:
            raise UpstreamError(result.error or "Unknown error", provider=self._key)
        if result.payload.text:
            yield result.payload.text

    @abstractmethod
    async def is_available(self) -> bool:
        """
        Lightweight reachability and credential probe.

        Must never raise; any failure resolves to False.
        """
        pass

    async def aclose(self) -> None:
        """Release network resources."""
        return None

    def _unsupported(self, capability: Capability) -> ResultEnvelope:
        result_type = _RESULT_TYPES[capability]
        return result_type.fail(
            f"{capability.value.capitalize()} generation not supported by {self.name}",
            provider=self._key,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(key={self._key!r}, kind={self.kind.value!r})"
