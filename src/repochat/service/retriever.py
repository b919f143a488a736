"""Source retrieval by summary similarity."""

from abc import ABC, abstractmethod

import numpy as np
from numpy.typing import NDArray

from ..conversation.models import Source
from ..embedding import EmbeddingProvider
from .errors import ProjectNotIndexedError
from .models import ProjectIndex

DEFAULT_RETRIEVAL_LIMIT = 10
DEFAULT_MIN_SIMILARITY = 0.5


class SourceRetriever(ABC):
    """Abstract retriever of the files relevant to a question.

    Hidden design decisions:
    - Where indexed files and their embeddings are kept
    - How relevance is scored and thresholded
    """

    @abstractmethod
    def add_index(self, index: ProjectIndex) -> None:
        """Make a project's index available, replacing any previous one."""

    @abstractmethod
    async def retrieve(
        self,
        project_id: str,
        query_text: str,
        limit: int = DEFAULT_RETRIEVAL_LIMIT,
    ) -> list[Source]:
        """Find the sources most relevant to a question.

        Returns:
            Sources ordered by descending similarity, each carrying its score

        Raises:
            ProjectNotIndexedError: If no index is loaded for project_id
        """


def _normalize_rows(matrix: NDArray[np.float32]) -> NDArray[np.float32]:
    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    norms[norms == 0] = 1.0
    return matrix / norms


class InMemorySourceRetriever(SourceRetriever):
    """Cosine-similarity retriever over in-memory project indexes."""

    def __init__(
        self,
        embedder: EmbeddingProvider,
        min_similarity: float = DEFAULT_MIN_SIMILARITY,
    ) -> None:
        """Initialize the retriever.

        Args:
            embedder: Provider used to embed incoming questions; must match
                the model the indexes were built with
            min_similarity: Sources scoring below this are not cited
        """
        self._embedder = embedder
        self._min_similarity = min_similarity
        self._sources: dict[str, list[Source]] = {}
        self._matrices: dict[str, NDArray[np.float32]] = {}

    @property
    def project_ids(self) -> list[str]:
        return list(self._sources)

    def add_index(self, index: ProjectIndex) -> None:
        self._sources[index.project_id] = [entry.source for entry in index.entries]
        if index.entries:
            matrix = np.array([entry.embedding for entry in index.entries], dtype=np.float32)
            self._matrices[index.project_id] = _normalize_rows(matrix)
        else:
            self._matrices[index.project_id] = np.zeros((0, 0), dtype=np.float32)

    async def retrieve(
        self,
        project_id: str,
        query_text: str,
        limit: int = DEFAULT_RETRIEVAL_LIMIT,
    ) -> list[Source]:
        if project_id not in self._sources:
            raise ProjectNotIndexedError(project_id)

        sources = self._sources[project_id]
        if not sources or limit <= 0:
            return []

        query = np.asarray(await self._embedder.embed_text(query_text), dtype=np.float32)
        norm = np.linalg.norm(query)
        if norm == 0:
            return []

        scores = self._matrices[project_id] @ (query / norm)
        ranked = np.argsort(-scores, kind="stable")

        results = []
        for position in ranked[:limit]:
            score = float(scores[position])
            if score < self._min_similarity:
                break
            results.append(sources[position].model_copy(update={"similarity": score}))
        return results
