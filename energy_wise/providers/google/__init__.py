"""Google provider package."""
from .google_models import GOOGLE_MODELS

# Note: Provider is imported directly to avoid circular imports
__all__ = ['GOOGLE_MODELS']
