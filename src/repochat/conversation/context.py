"""Context window derivation from the chat log."""

from collections.abc import Sequence

from .models import ChatMessage, ContextEntry, ContextWindow

# Number of prior exchanges sent with each new query
CONTEXT_WINDOW_SIZE = 3


class ContextWindowBuilder:
    """Derives the bounded prior-exchange window sent with the next query.

    The window is computed before the new message is appended, so it never
    contains the exchange being created by the current submission.
    """

    def __init__(self, size: int = CONTEXT_WINDOW_SIZE) -> None:
        if size < 0:
            raise ValueError("Context window size must be >= 0")
        self._size = size

    @property
    def size(self) -> int:
        return self._size

    def build(self, log: Sequence[ChatMessage]) -> ContextWindow:
        """Project the trailing messages of the log to (query, answer) pairs.

        Args:
            log: The chat log in chronological order

        Returns:
            At most `size` entries, oldest first, without sources
        """
        if self._size == 0:
            return []
        return [
            ContextEntry(query=message.query, answer=message.answer)
            for message in log[-self._size:]
        ]
