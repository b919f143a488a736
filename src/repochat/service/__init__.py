"""Answer service: the contract the conversation depends on and its
retrieval-augmented implementation."""

from .base import AnswerResponse, AnswerService
from .errors import ProjectNotIndexedError
from .factory import create_answer_service
from .indexer import ProjectIndexer
from .models import IndexedSource, IndexingResult, ProjectIndex
from .rag import RetrievalAnswerService
from .retriever import InMemorySourceRetriever, SourceRetriever

__all__ = [
    "AnswerResponse",
    "AnswerService",
    "IndexedSource",
    "IndexingResult",
    "InMemorySourceRetriever",
    "ProjectIndex",
    "ProjectIndexer",
    "ProjectNotIndexedError",
    "RetrievalAnswerService",
    "SourceRetriever",
    "create_answer_service",
]
