"""Provider management for LLM integrations."""
from typing import Dict, Type

from .llm_provider_base import BaseProvider
from .llm_provider_models import LLMInfo

# Registry of provider implementations
PROVIDERS: Dict[str, Type[BaseProvider]] = {}


def register_provider(provider_name: str):
    """Decorator to register provider implementations."""
    def decorator(provider_class: Type[BaseProvider]):
        PROVIDERS[provider_name] = provider_class
        return provider_class
    return decorator


def get_provider(provider: str) -> Type[BaseProvider]:
    """Get provider implementation class.

    Args:
        provider: Provider name

    Returns:
        Provider implementation class

    Raises:
        ValueError: If provider is not registered
    """
    if provider not in PROVIDERS:
        raise ValueError(f"Provider {provider} not registered")
    return PROVIDERS[provider]


# Import provider implementations to register them
# Note: These imports must come after the register_provider function is defined
from .google.google_provider import GoogleProvider  # noqa: E402


__all__ = [
    'BaseProvider',
    'LLMInfo',
    'register_provider',
    'get_provider',
    'GoogleProvider',
]
