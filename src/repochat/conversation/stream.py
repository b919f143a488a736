"""Folding of a streamed answer into the open message."""

from collections.abc import AsyncIterable, Callable
from dataclasses import dataclass

from .store import ConversationStore


@dataclass
class StreamResult:
    """Outcome of consuming one fragment stream."""

    fragments: int = 0
    characters: int = 0
    error: Exception | None = None

    @property
    def interrupted(self) -> bool:
        """True if the stream ended with an error rather than normally."""
        return self.error is not None


class StreamConsumer:
    """Applies answer fragments to the open message in arrival order.

    A stream that raises is treated as ended: every fragment applied so far
    is kept as the final answer. Nothing is buffered beyond the fragment
    currently being applied.
    """

    def __init__(self, store: ConversationStore) -> None:
        self._store = store
        self._debug_callback: Callable[[str, str, str], None] | None = None

    def set_debug_callback(self, callback: Callable[[str, str, str], None] | None) -> None:
        """Set the callback receiving (level, component, message) log entries."""
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Stream", message)

    async def consume(self, index: int, fragments: AsyncIterable[str]) -> StreamResult:
        """Consume the fragment stream for the message at index.

        Args:
            index: Position of the open message
            fragments: Producer-driven sequence of text fragments

        Returns:
            StreamResult with counts and the error that ended the stream, if any
        """
        result = StreamResult()
        iterator = fragments.__aiter__()
        while True:
            try:
                fragment = await iterator.__anext__()
            except StopAsyncIteration:
                break
            except Exception as e:
                result.error = e
                self._debug(
                    "warning",
                    f"Stream for message {index} failed after {result.fragments} fragment(s): {e}"
                )
                return result

            if not fragment:
                continue
            # Store errors are programming errors, not stream failures
            self._store.append_answer_fragment(index, fragment)
            result.fragments += 1
            result.characters += len(fragment)

        self._debug("debug", f"Stream for message {index} ended ({result.characters} chars)")
        return result
