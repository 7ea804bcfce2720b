from .relay_config import ConfigurationError, RelayConfig

__all__ = ["ConfigurationError", "RelayConfig"]
