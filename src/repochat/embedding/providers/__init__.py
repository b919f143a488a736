from .openai import OpenAIEmbeddingProvider

__all__ = ["OpenAIEmbeddingProvider"]
