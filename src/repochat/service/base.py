from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

from ..conversation.models import ContextWindow, Source


@dataclass
class AnswerResponse:
    """The two result channels of one answered query.

    Attributes:
        citations: Sources backing the answer, available immediately
        stream: Lazily produced answer text fragments
    """

    citations: list[Source]
    stream: AsyncIterator[str]


class AnswerService(ABC):
    """Abstract answer service.

    This module hides the design decision of how a question about a
    project is turned into citations and an answer. Callers only see the
    contract: citations resolve before `answer` returns, text arrives
    through the stream, and a failure to start raises from `answer`.
    """

    @abstractmethod
    async def answer(
        self,
        query_text: str,
        project_id: str,
        history: ContextWindow,
    ) -> AnswerResponse:
        """Answer a question about a project.

        Args:
            query_text: The user's question
            project_id: Project the question is about
            history: Up to three prior exchanges, oldest first

        Returns:
            AnswerResponse with resolved citations and a fragment stream

        Raises:
            Exception: If the service cannot start answering
        """

    async def close(self) -> None:
        """Release resources held by the service."""

    async def __aenter__(self) -> "AnswerService":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
