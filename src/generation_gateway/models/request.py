"""
Unified request models for the generation gateway.
"""

from typing import Optional, List, Dict, Any, Literal, Mapping, Sequence, Union
from pydantic import BaseModel, ConfigDict, Field


DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2000


class ConversationTurn(BaseModel):
    """A single turn of conversation history."""
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant", "system"]
    content: str


class GenerationOptions(BaseModel):
    """
    Per-call generation options.

    Unset fields fall back to the defaults of the adapter handling the
    call. Backend-specific parameters go into ``extra``.
    """
    model: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    max_tokens: Optional[int] = Field(default=None, ge=1)
    extra: Dict[str, Any] = Field(default_factory=dict)

    def resolve_model(self, default: str) -> str:
        return self.model or default

    def resolve_temperature(self, default: float = DEFAULT_TEMPERATURE) -> float:
        # 0.0 is a valid temperature, only None means "unset"
        return default if self.temperature is None else self.temperature

    def resolve_max_tokens(self, default: int = DEFAULT_MAX_TOKENS) -> int:
        return self.max_tokens or default


HistoryLike = Sequence[Union[ConversationTurn, Mapping[str, Any]]]


def normalize_history(history: Optional[HistoryLike]) -> List[ConversationTurn]:
    """
    Coerce caller-supplied history into ConversationTurn models.

    Args:
        history: Turns as models or ``{"role", "content"}`` mappings

    Returns:
        List of turns in the original order
    """
    if not history:
        return []
    return [
        turn if isinstance(turn, ConversationTurn) else ConversationTurn(**turn)
        for turn in history
    ]
