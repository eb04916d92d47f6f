"""LLM module."""

from ..config import StudioConfig
from ..errors import ConfigurationError
from .anthropic_provider import AnthropicProvider
from .gemini_provider import GeminiProvider
from .provider import IChatProvider, InlinePart, Part, TextPart


def create_provider(config: StudioConfig) -> IChatProvider:
    """Build the provider selected by configuration."""
    if config.provider == "anthropic":
        return AnthropicProvider(
            api_key=config.anthropic_api_key, model=config.anthropic_model
        )
    if config.provider == "gemini":
        return GeminiProvider(api_key=config.gemini_api_key)
    raise ConfigurationError(f"Unknown STUDIO_PROVIDER: {config.provider}")


__all__ = [
    "IChatProvider",
    "InlinePart",
    "TextPart",
    "Part",
    "GeminiProvider",
    "AnthropicProvider",
    "create_provider",
]
