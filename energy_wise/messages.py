"""Provider-facing message types."""
from typing import Any, Dict

from pydantic import BaseModel, Field


class LlmMessage(BaseModel):
    """Base class for messages sent to or received from a provider."""
    content: str


class LlmSystemMessage(LlmMessage):
    """System instruction."""


class LlmHumanMessage(LlmMessage):
    """Text written by the user."""


class LlmAIMessage(LlmMessage):
    """Text generated by the model."""
    response_metadata: Dict[str, Any] = Field(default_factory=dict)
