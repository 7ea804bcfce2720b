import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from energy_wise.prompt.system_prompt import ENERGY_WISE_SYSTEM_PROMPT


class ConfigurationError(ValueError):
    """Raised when the relay cannot start with the given environment."""


def _split_origins(value: str) -> list[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


@dataclass
class RelayConfig:
    """Startup configuration for the relay server."""

    google_api_key: str
    """Credential for the Gemini API. Required."""
    port: int = 3001
    """Port the HTTP/WebSocket server listens on."""
    host: str = "0.0.0.0"
    model: str = "gemini-2.0-flash"
    """Gemini model used for every connection."""
    max_output_tokens: int = 2048
    temperature: float = 0.7
    system_prompt: str = ENERGY_WISE_SYSTEM_PROMPT
    """Instruction each conversation history is seeded with."""
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:5173"])
    """Origins allowed to call the server from a browser."""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RelayConfig":
        """Build the configuration from environment variables.

        :param environ: Mapping to read from, defaults to ``os.environ``.
        :raises ConfigurationError: If GOOGLE_API_KEY is missing or PORT is not a valid port.
        """
        env = os.environ if environ is None else environ

        api_key = env.get("GOOGLE_API_KEY", "").strip()
        if not api_key:
            raise ConfigurationError("GOOGLE_API_KEY environment variable is not set")

        port_raw = env.get("PORT") or "3001"
        try:
            port = int(port_raw)
        except ValueError:
            raise ConfigurationError(f"PORT must be an integer, got {port_raw!r}") from None
        if not 0 < port < 65536:
            raise ConfigurationError(f"PORT out of range: {port}")

        kwargs = {}
        if env.get("HOST"):
            kwargs["host"] = env["HOST"]
        if env.get("GEMINI_MODEL"):
            kwargs["model"] = env["GEMINI_MODEL"]
        if env.get("SYSTEM_PROMPT"):
            kwargs["system_prompt"] = env["SYSTEM_PROMPT"]
        if env.get("CORS_ORIGINS"):
            kwargs["cors_origins"] = _split_origins(env["CORS_ORIGINS"])

        return cls(google_api_key=api_key, port=port, **kwargs)
