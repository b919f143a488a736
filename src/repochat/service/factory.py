from typing import Any

from .base import AnswerService
from .rag import RetrievalAnswerService
from .retriever import DEFAULT_MIN_SIMILARITY, DEFAULT_RETRIEVAL_LIMIT, InMemorySourceRetriever


def create_answer_service(kind: str, **config: Any) -> AnswerService:
    """Create an answer service instance.

    Args:
        kind: Service type ('retrieval')
        **config: Service-specific configuration
            For retrieval:
                - llm: LLMProvider (required)
                - embedder: EmbeddingProvider (required unless retriever is given)
                - retriever: SourceRetriever | None
                - indexes: list[ProjectIndex] loaded into a new in-memory retriever
                - min_similarity: float (default: 0.5)
                - retrieval_limit: int (default: 10)
                - temperature: float (default: 0.3)
                - system_prompt: str | None

    Returns:
        Initialized answer service

    Raises:
        ValueError: If kind is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> service = create_answer_service(
        ...     "retrieval",
        ...     llm=llm_provider,
        ...     embedder=embedding_provider,
        ...     indexes=[ProjectIndex.load("myproject.json")],
        ... )
    """
    if kind.lower() != "retrieval":
        raise ValueError(
            f"Unsupported answer service: {kind}. "
            f"Supported services: 'retrieval'"
        )

    if "llm" not in config:
        raise TypeError("Retrieval answer service requires 'llm' in config")

    retriever = config.get("retriever")
    if retriever is None:
        if "embedder" not in config:
            raise TypeError(
                "Retrieval answer service requires 'embedder' or 'retriever' in config"
            )
        retriever = InMemorySourceRetriever(
            config["embedder"],
            min_similarity=config.get("min_similarity", DEFAULT_MIN_SIMILARITY),
        )
        for index in config.get("indexes") or []:
            retriever.add_index(index)

    return RetrievalAnswerService(
        llm=config["llm"],
        retriever=retriever,
        system_prompt=config.get("system_prompt"),
        retrieval_limit=config.get("retrieval_limit", DEFAULT_RETRIEVAL_LIMIT),
        temperature=config.get("temperature", 0.3),
    )
