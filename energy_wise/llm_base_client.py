"""Base LLM client implementation."""
from abc import ABC, abstractmethod
from typing import Optional, Union

from .messages import LlmAIMessage, LlmHumanMessage, LlmSystemMessage


class LlmClient(ABC):
    """Base class for LLM clients."""

    def __init__(
        self,
        model: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ):
        """Initialize LLM client.

        Args:
            model: Model name to use
            temperature: Temperature for responses
            max_tokens: Maximum tokens to generate
        """
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    @abstractmethod
    def invoke(self, messages: list[Union[LlmSystemMessage, LlmHumanMessage, LlmAIMessage]]) -> LlmAIMessage:
        """Synchronously invoke the model.

        Args:
            messages: List of messages to send

        Returns:
            Model response
        """
        pass

    @abstractmethod
    async def ainvoke(self, messages: list[Union[LlmSystemMessage, LlmHumanMessage, LlmAIMessage]]) -> LlmAIMessage:
        """Asynchronously invoke the model.

        Args:
            messages: List of messages to send

        Returns:
            Model response
        """
        pass


class ProviderResponseError(Exception):
    """Raised when a provider answers with something that is not usable text."""
