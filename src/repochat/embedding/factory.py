from typing import Any

from .base import EmbeddingProvider
from .providers import OpenAIEmbeddingProvider


def create_embedding_provider(provider: str, **config: Any) -> EmbeddingProvider:
    """Create an embedding provider instance.

    Args:
        provider: Provider type ('openai')
        **config: Provider configuration ('api_key' required, 'model' optional)

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing
    """
    if provider.lower() == "openai":
        if "api_key" not in config:
            raise TypeError("OpenAI embedding provider requires 'api_key' in config")
        return OpenAIEmbeddingProvider(**config)

    raise ValueError(
        f"Unsupported embedding provider: {provider}. "
        f"Supported providers: 'openai'"
    )
