"""Per-message selection of the expanded cited source."""

from collections.abc import Sequence

from .models import ChatMessage


class SelectionState:
    """Maps each message position to the index of its expanded source.

    None means no source is expanded for that message. Entries are created
    by reconcile() as the log grows and are never reset by it.
    """

    def __init__(self) -> None:
        self._cursors: dict[int, int | None] = {}

    def reconcile(self, log: Sequence[ChatMessage]) -> None:
        """Ensure every message position has a cursor, defaulting to None."""
        for index in range(len(log)):
            self._cursors.setdefault(index, None)

    def toggle(self, message_index: int, source_index: int) -> int | None:
        """Expand source_index, or collapse it if it is already expanded.

        Returns:
            The new cursor value for the message

        Raises:
            IndexError: If no cursor exists for message_index
        """
        if message_index not in self._cursors:
            raise IndexError(f"No message at position {message_index}")

        if self._cursors[message_index] == source_index:
            self._cursors[message_index] = None
        else:
            self._cursors[message_index] = source_index
        return self._cursors[message_index]

    def selected(self, message_index: int) -> int | None:
        """Get the expanded source index for a message (None if collapsed)."""
        return self._cursors.get(message_index)

    def snapshot(self) -> dict[int, int | None]:
        """Copy of the full cursor mapping."""
        return dict(self._cursors)

    def clear(self) -> None:
        self._cursors.clear()

    def __len__(self) -> int:
        return len(self._cursors)
