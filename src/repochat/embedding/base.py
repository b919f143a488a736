from abc import ABC, abstractmethod
from typing import Any

import numpy as np
from numpy.typing import NDArray


class EmbeddingProvider(ABC):
    """Abstract base class for embedding providers.

    This module hides the design decision of which embedding model turns
    file summaries and questions into vectors.
    """

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Embedding dimension of the configured model."""

    @abstractmethod
    async def embed_text(self, text: str, **kwargs: Any) -> NDArray[np.float32]:
        """Embed a single text.

        Returns:
            Array of shape (dimension,) with float32 dtype
        """

    @abstractmethod
    async def embed_batch(self, texts: list[str], **kwargs: Any) -> list[NDArray[np.float32]]:
        """Embed several texts in one request, preserving order."""

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "EmbeddingProvider":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
