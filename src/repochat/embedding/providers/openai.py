from typing import Any

import numpy as np
from numpy.typing import NDArray
from openai import AsyncOpenAI

from ..base import EmbeddingProvider


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """OpenAI embeddings provider."""

    _MODEL_DIMENSIONS = {
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
        "text-embedding-ada-002": 1536,
    }

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        base_url: str | None = None,
        organization: str | None = None,
        **client_kwargs: Any
    ):
        """Initialize OpenAI embedding provider.

        Raises:
            ValueError: If the model's dimension is unknown
        """
        if model not in self._MODEL_DIMENSIONS:
            raise ValueError(
                f"Unknown model: {model}. "
                f"Supported models: {list(self._MODEL_DIMENSIONS.keys())}"
            )
        self._model = model
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            organization=organization,
            **client_kwargs
        )

    @property
    def dimension(self) -> int:
        return self._MODEL_DIMENSIONS[self._model]

    @property
    def model(self) -> str:
        return self._model

    async def embed_text(self, text: str, **kwargs: Any) -> NDArray[np.float32]:
        response = await self._client.embeddings.create(input=text, model=self._model, **kwargs)
        return np.array(response.data[0].embedding, dtype=np.float32)

    async def embed_batch(self, texts: list[str], **kwargs: Any) -> list[NDArray[np.float32]]:
        if not texts:
            return []

        response = await self._client.embeddings.create(input=texts, model=self._model, **kwargs)
        # The API may return items out of order; `index` is authoritative
        ordered = sorted(response.data, key=lambda item: item.index)
        return [np.array(item.embedding, dtype=np.float32) for item in ordered]

    async def close(self) -> None:
        await self._client.close()
