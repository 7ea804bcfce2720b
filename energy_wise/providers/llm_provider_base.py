"""Base provider interface for LLM providers."""
from abc import ABC, abstractmethod
from typing import List, Optional

from .llm_provider_models import LLMInfo
from ..llm_base_client import LlmClient


class BaseProvider(ABC):
    """Base class for LLM providers."""

    def __init__(self, name: str, label: str):
        """Initialize provider.

        :param name: The provider name, "google", etc.
        :param label: The provider label, "Google", etc.
        """
        self.name = name
        self.label = label

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Check if provider is available (has valid API key)."""
        pass

    @abstractmethod
    def get_models(self) -> List[LLMInfo]:
        """Get list of available models for this provider."""
        pass

    def get_model_info(self, model: str) -> Optional[LLMInfo]:
        """Look up a model by API name or short name."""
        return next(
            (info for info in self.get_models() if info.model == model or info.name == model),
            None,
        )

    @abstractmethod
    def create_client(
        self,
        model: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LlmClient:
        """Create an LLM client.

        Args:
            model: Model name to use
            temperature: Temperature for responses
            max_tokens: Maximum tokens to generate
            **kwargs: Additional provider-specific arguments

        Returns:
            Configured LlmClient instance
        """
        pass
