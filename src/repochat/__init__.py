"""
Repochat: ask questions about a codebase and get streamed answers with the
source files that justify them.

Each subpackage hides one design decision: the conversation state machine
(conversation), how answers are produced (service), which model generates
them (llm, embedding) and how they are shown (ui, cli).
"""

__version__ = "0.1.0"

from .conversation import (
    ChatMessage,
    ChatSession,
    ConversationStore,
    MessageStatus,
    Source,
)
from .service import AnswerResponse, AnswerService, create_answer_service

__all__ = [
    "AnswerResponse",
    "AnswerService",
    "ChatMessage",
    "ChatSession",
    "ConversationStore",
    "MessageStatus",
    "Source",
    "create_answer_service",
]
