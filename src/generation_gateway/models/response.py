"""
Unified result envelopes for the generation gateway.

Every generation call, on every backend, resolves to a ResultEnvelope:
either ``success=True`` with a payload, or ``success=False`` with a
human-readable error.
"""

from typing import Generic, Optional, TypeVar
from pydantic import BaseModel, model_validator


class Usage(BaseModel):
    """Token usage information. Fields the backend omits stay at zero."""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class TextPayload(BaseModel):
    text: str = ""


class ImagePayload(BaseModel):
    image: str  # base64 encoded
    mime_type: str = "image/png"


class AudioPayload(BaseModel):
    audio: str  # base64 encoded
    mime_type: str = "audio/wav"


PayloadT = TypeVar("PayloadT", bound=BaseModel)


class ResultEnvelope(BaseModel, Generic[PayloadT]):
    """Uniform success/payload/error/usage wrapper."""
    success: bool
    payload: Optional[PayloadT] = None
    error: Optional[str] = None
    usage: Optional[Usage] = None

    # Provider metadata
    provider: Optional[str] = None

    @model_validator(mode="after")
    def _check_exclusive(self) -> "ResultEnvelope":
        if self.success and (self.payload is None or self.error is not None):
            raise ValueError("successful envelope needs a payload and no error")
        if not self.success and (self.error is None or self.payload is not None):
            raise ValueError("failed envelope needs an error and no payload")
        return self

    @classmethod
    def ok(
        cls,
        payload: PayloadT,
        usage: Optional[Usage] = None,
        provider: Optional[str] = None,
    ) -> "ResultEnvelope":
        return cls(success=True, payload=payload, usage=usage, provider=provider)

    @classmethod
    def fail(cls, error: str, provider: Optional[str] = None) -> "ResultEnvelope":
        return cls(success=False, error=error or "Unknown error", provider=provider)


TextResult = ResultEnvelope[TextPayload]
ImageResult = ResultEnvelope[ImagePayload]
AudioResult = ResultEnvelope[AudioPayload]
