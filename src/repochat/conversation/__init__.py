"""Conversation state machine.

Module structure (each module hides one design decision):
- models.py: Message, source and event representation
- store.py: Ordered chat log and its mutation rules
- context.py: Which prior exchanges accompany a new query
- stream.py: How streamed fragments are folded into a message
- selection.py: Which cited source is expanded per message
- dispatcher.py: How one query flows from submission to final message
- session.py: Wiring of the above for the presentation layer
"""

from .context import CONTEXT_WINDOW_SIZE, ContextWindowBuilder
from .dispatcher import SUBMISSION_FAILED_MESSAGE, QueryDispatcher
from .errors import ConversationError, MessageNotOpenError, OpenMessageError
from .models import (
    ChangeKind,
    ChatMessage,
    ContextEntry,
    ContextWindow,
    ConversationEvent,
    MessageStatus,
    QueryInput,
    Source,
)
from .selection import SelectionState
from .session import ChatSession
from .store import ConversationStore
from .stream import StreamConsumer, StreamResult

__all__ = [
    "CONTEXT_WINDOW_SIZE",
    "SUBMISSION_FAILED_MESSAGE",
    "ChangeKind",
    "ChatMessage",
    "ChatSession",
    "ContextEntry",
    "ContextWindow",
    "ContextWindowBuilder",
    "ConversationError",
    "ConversationEvent",
    "ConversationStore",
    "MessageNotOpenError",
    "MessageStatus",
    "OpenMessageError",
    "QueryDispatcher",
    "QueryInput",
    "SelectionState",
    "Source",
    "StreamConsumer",
    "StreamResult",
]
