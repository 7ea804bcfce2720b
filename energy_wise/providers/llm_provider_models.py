"""Common models for LLM providers."""
from dataclasses import dataclass


@dataclass
class LLMInfo:
    """Information about an LLM model."""
    provider: str  # Provider name
    name: str  # High-level name for identification
    label: str  # Human-readable label
    model: str  # Actual model name for the API
    description: str
    max_output_tokens: int = 4096  # Upper bound for max_tokens on a client
