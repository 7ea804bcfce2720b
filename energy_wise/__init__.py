"""energy-wise: Gemini chat relay package."""

from energy_wise.llm_base_models import ChatHistory, ChatMessage, Role
from energy_wise.session import ConversationSession
from energy_wise.config import ConfigurationError, RelayConfig
from energy_wise.providers.llm_provider_models import LLMInfo

__all__ = [
    "ConversationSession",
    "ChatHistory",
    "ChatMessage",
    "Role",
    "RelayConfig",
    "ConfigurationError",
    "LLMInfo",
    "ChatClientController",
    "ConnectionStatus",
]


def __getattr__(name: str):
    if name in ("ChatClientController", "ConnectionStatus"):
        from energy_wise import client
        return getattr(client, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
