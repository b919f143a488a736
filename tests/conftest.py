"""Pytest configuration and shared fixtures."""
import asyncio
from collections.abc import AsyncIterator

import numpy as np
import pytest

from repochat.conversation import ContextWindow, Source
from repochat.embedding import EmbeddingProvider
from repochat.service import AnswerResponse, AnswerService


async def fragment_stream(
    fragments: list[str],
    error: Exception | None = None,
    gate: asyncio.Event | None = None,
) -> AsyncIterator[str]:
    """Yield fragments, optionally waiting on a gate first and raising at the end."""
    if gate is not None:
        await gate.wait()
    for fragment in fragments:
        await asyncio.sleep(0)
        yield fragment
    if error is not None:
        raise error


class FakeAnswerService(AnswerService):
    """Answer service returning scripted citations and fragments.

    Records every call so tests can inspect the history that was sent.
    """

    def __init__(
        self,
        citations: list[Source] | None = None,
        fragments: list[str] | None = None,
        answer_error: Exception | None = None,
        stream_error: Exception | None = None,
    ) -> None:
        self.citations = citations or []
        self.fragments = fragments if fragments is not None else ["Hello", " world"]
        self.answer_error = answer_error
        self.stream_error = stream_error
        self.gate: asyncio.Event | None = None
        self.calls: list[tuple[str, str, ContextWindow]] = []
        self.closed = False

    async def answer(
        self,
        query_text: str,
        project_id: str,
        history: ContextWindow,
    ) -> AnswerResponse:
        self.calls.append((query_text, project_id, list(history)))
        if self.answer_error is not None:
            raise self.answer_error
        return AnswerResponse(
            citations=list(self.citations),
            stream=fragment_stream(self.fragments, self.stream_error, self.gate),
        )

    async def close(self) -> None:
        self.closed = True


class FakeEmbedder(EmbeddingProvider):
    """Embedding provider with a fixed text -> vector table.

    Unknown texts embed to the zero vector.
    """

    def __init__(self, vectors: dict[str, list[float]] | None = None, dimension: int = 3):
        self.vectors = vectors or {}
        self._dimension = dimension
        self.batches: list[list[str]] = []

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def model(self) -> str:
        return "fake-embedding"

    async def embed_text(self, text: str, **kwargs) -> np.ndarray:
        return np.array(self.vectors.get(text, [0.0] * self._dimension), dtype=np.float32)

    async def embed_batch(self, texts: list[str], **kwargs) -> list[np.ndarray]:
        self.batches.append(list(texts))
        return [await self.embed_text(text) for text in texts]

    async def close(self) -> None:
        pass


@pytest.fixture
def sample_sources():
    """Three cited sources as returned by an answer service."""
    return [
        Source(
            file_name="src/auth/login.py",
            summary="Login handler that validates credentials",
            source_code="def login(user, password):\n    return check(user, password)\n",
            similarity=0.91,
        ),
        Source(
            file_name="src/auth/session.py",
            summary="Session token management",
            source_code="def create_session(user):\n    return Token(user)\n",
            similarity=0.84,
        ),
        Source(
            file_name="README.md",
            summary="Project overview",
            source_code="# Example project\n",
            similarity=0.62,
        ),
    ]


@pytest.fixture
def fake_service(sample_sources):
    return FakeAnswerService(citations=sample_sources)


@pytest.fixture
def sample_python_code():
    """Return sample Python code for testing."""
    return '''
def add(a, b):
    """Add two numbers."""
    return a + b

class Calculator:
    """A simple calculator."""

    def divide(self, a, b):
        if b == 0:
            raise ValueError("Cannot divide by zero")
        return a / b
'''
