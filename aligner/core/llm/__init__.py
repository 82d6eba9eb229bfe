"""
LLM provider layer: base class, Gemini implementation and factory.
"""
import os

from aligner.config import GEMINI_MODEL, REQUEST_TIMEOUT
from aligner.core.exceptions import ConfigurationError
from .base import LLMProvider, LLMResponse
from .exceptions import ProviderError
from .providers import GeminiProvider


def create_llm_provider(provider_type: str = "gemini", **kwargs) -> LLMProvider:
    """Factory function to create LLM providers"""
    if provider_type.lower() == "gemini":
        api_key = kwargs.get("api_key")
        if not api_key:
            # Try to get from environment
            api_key = os.getenv("API_KEY") or os.getenv("GEMINI_API_KEY")
            if not api_key:
                raise ConfigurationError(
                    "Gemini provider requires an API key. Set API_KEY (or GEMINI_API_KEY) "
                    "environment variable or pass api_key parameter."
                )
        return GeminiProvider(
            api_key=api_key,
            model=kwargs.get("model") or GEMINI_MODEL,
            timeout=kwargs.get("timeout") or REQUEST_TIMEOUT,
            transport=kwargs.get("transport")
        )
    raise ValueError(f"Unknown provider type: {provider_type}")


__all__ = [
    'LLMProvider',
    'LLMResponse',
    'ProviderError',
    'GeminiProvider',
    'create_llm_provider'
]
