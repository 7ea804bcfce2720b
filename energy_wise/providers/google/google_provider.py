"""Google provider implementation."""
import os
from typing import List, Optional

from energy_wise.providers import BaseProvider, register_provider
from energy_wise.llm_base_client import LlmClient
from .google_models import GOOGLE_MODELS, LLMInfo
from .google_client import GoogleClient


@register_provider("google")
class GoogleProvider(BaseProvider):
    """Google provider implementation."""

    def __init__(self, api_key: Optional[str] = None):
        """Initialize Google provider.

        :param api_key: API key; falls back to the GOOGLE_API_KEY environment variable.
        """
        super().__init__("google", "Google")
        self._api_key = api_key or os.environ.get('GOOGLE_API_KEY')

    @property
    def is_available(self) -> bool:
        """Check if provider is available (has valid API key)."""
        return bool(self._api_key)

    def get_models(self) -> List[LLMInfo]:
        """Get list of available Google models."""
        return GOOGLE_MODELS

    def create_client(
        self,
        model: str,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        **kwargs
    ) -> LlmClient:
        """Create a Google Gemini client.

        Args:
            model: Model name to use
            temperature: Temperature for responses
            max_tokens: Maximum tokens to generate
            **kwargs: Additional arguments

        Returns:
            Configured GoogleClient instance

        Raises:
            ValueError: If no API key is configured, the model is unknown or
                max_tokens exceeds what the model can generate
        """
        if not self.is_available:
            raise ValueError("GOOGLE_API_KEY environment variable is not set")

        model_info = self.get_model_info(model)
        if model_info is None:
            raise ValueError(f"Model {model} not found in provider {self.name}")
        if max_tokens is not None and max_tokens > model_info.max_output_tokens:
            raise ValueError(
                f"max_tokens {max_tokens} exceeds the {model_info.max_output_tokens} "
                f"output tokens supported by {model_info.model}"
            )

        return GoogleClient(
            api_key=self._api_key,
            model=model_info.model,
            temperature=temperature,
            max_tokens=max_tokens,
        )
