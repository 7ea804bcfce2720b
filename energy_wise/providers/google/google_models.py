"""Google model configurations."""
from ..llm_provider_models import LLMInfo


GOOGLE_MODELS = [
    LLMInfo(
        provider="google",
        name="gemini_2_flash",
        label="Gemini 2.0 Flash",
        model="gemini-2.0-flash",
        description="Fast general purpose Gemini model, the relay default.",
        max_output_tokens=8192,
    ),
    LLMInfo(
        provider="google",
        name="gemini_flash",
        label="Gemini 2.5 Flash",
        model="gemini-2.5-flash",
        description="Fast and efficient version optimized for quick responses.",
        max_output_tokens=65536,
    ),
    LLMInfo(
        provider="google",
        name="gemini_pro",
        label="Gemini 2.5 Pro",
        model="gemini-2.5-pro",
        description="Google's most powerful Gemini model with adaptive thinking.",
        max_output_tokens=65536,
    ),
]
