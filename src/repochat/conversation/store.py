"""Conversation store: the ordered chat log.

The log is append-only, except that the most recently appended message may
be mutated in place while it is open. At most one message is open at a time
and it is always the last one.
"""

from collections.abc import Callable, Sequence

from .errors import MessageNotOpenError, OpenMessageError
from .models import ChangeKind, ChatMessage, ConversationEvent, MessageStatus, Source

Subscriber = Callable[[ConversationEvent], None]


class ConversationStore:
    """Owns the chat log and funnels every write through explicit operations.

    Subscribers are called synchronously after each mutation, so every
    intermediate state is observable before the next fragment is applied.
    """

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []
        self._open_index: int | None = None
        self._sources_assigned = False
        self._subscribers: list[Subscriber] = []

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        """Read-only snapshot of the log in chronological order."""
        return tuple(self._messages)

    @property
    def open_index(self) -> int | None:
        """Position of the open message, or None if every message is closed."""
        return self._open_index

    @property
    def has_open_message(self) -> bool:
        return self._open_index is not None

    def __len__(self) -> int:
        return len(self._messages)

    def __getitem__(self, index: int) -> ChatMessage:
        return self._messages[index]

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for mutation events.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def append(self, query: str) -> int:
        """Append a new open message with an empty answer and no sources.

        Returns:
            Position of the new message

        Raises:
            OpenMessageError: If another message is still open
        """
        if self._open_index is not None:
            raise OpenMessageError(self._open_index)

        self._messages.append(ChatMessage(query=query))
        self._open_index = len(self._messages) - 1
        self._sources_assigned = False
        self._emit(ChangeKind.APPENDED, self._open_index)
        return self._open_index

    def set_sources(self, index: int, sources: Sequence[Source]) -> bool:
        """Assign the cited sources of the open message.

        Only the first call per message takes effect.

        Returns:
            True if the sources were assigned, False if they already were

        Raises:
            MessageNotOpenError: If the message at index is not open
        """
        self._require_open(index)
        if self._sources_assigned:
            return False

        self._sources_assigned = True
        self._replace(index, sources=tuple(sources))
        self._emit(ChangeKind.SOURCES_SET, index)
        return True

    def append_answer_fragment(self, index: int, fragment: str) -> None:
        """Append a fragment to the answer of the open message.

        Raises:
            MessageNotOpenError: If the message at index is not open
        """
        self._require_open(index)
        current = self._messages[index]
        self._replace(index, answer=current.answer + fragment)
        self._emit(ChangeKind.FRAGMENT_APPENDED, index)

    def close(self, index: int, status: MessageStatus = MessageStatus.COMPLETE) -> None:
        """Close the open message; no writer may touch it afterwards.

        Raises:
            MessageNotOpenError: If the message at index is not open
            ValueError: If status is not a closed status
        """
        if status is MessageStatus.OPEN:
            raise ValueError("A message cannot be closed with status 'open'")
        self._require_open(index)
        self._replace(index, status=status)
        self._open_index = None
        self._emit(ChangeKind.CLOSED, index)

    def clear(self) -> None:
        """Drop every message.

        Raises:
            OpenMessageError: If a message is still open
        """
        if self._open_index is not None:
            raise OpenMessageError(self._open_index)
        self._messages.clear()
        self._emit(ChangeKind.CLEARED, None)

    def _require_open(self, index: int) -> None:
        if self._open_index is None or index != self._open_index:
            raise MessageNotOpenError(index, self._open_index)

    def _replace(self, index: int, **changes) -> None:
        self._messages[index] = self._messages[index].model_copy(update=changes)

    def _emit(self, kind: ChangeKind, index: int | None) -> None:
        message = self._messages[index] if index is not None else None
        event = ConversationEvent(kind=kind, index=index, message=message)
        for callback in list(self._subscribers):
            callback(event)
