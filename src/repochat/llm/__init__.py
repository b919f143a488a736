from .base import LLMProvider
from .factory import create_llm_provider
from .models import LLMMessage, LLMResponse, StreamingResponse
from .providers import AnthropicProvider, DeepSeekProvider, GeminiProvider, OpenAIProvider

__all__ = [
    "LLMProvider",
    "create_llm_provider",
    "LLMMessage",
    "LLMResponse",
    "StreamingResponse",
    "AnthropicProvider",
    "DeepSeekProvider",
    "GeminiProvider",
    "OpenAIProvider",
]
