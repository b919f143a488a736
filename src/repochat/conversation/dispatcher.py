"""Query dispatch: one submission from placeholder to final message."""

from collections.abc import Callable
from typing import TYPE_CHECKING

from .context import ContextWindowBuilder
from .errors import OpenMessageError
from .models import MessageStatus
from .store import ConversationStore
from .stream import StreamConsumer

if TYPE_CHECKING:
    from ..service import AnswerService

SUBMISSION_FAILED_MESSAGE = "Something went wrong. Please try again later."


class QueryDispatcher:
    """Orchestrates a single query against the answer service.

    Hidden design decisions:
    - The context window is taken before the placeholder is appended
    - Citations are applied as soon as the service returns, before any text
    - A failed service call leaves the placeholder in the log, closed as failed
    - Concurrent submissions are rejected instead of sharing the open slot
    """

    def __init__(
        self,
        store: ConversationStore,
        service: "AnswerService",
        window_builder: ContextWindowBuilder | None = None,
        consumer: StreamConsumer | None = None,
        notify_failure: Callable[[str], None] | None = None,
        restore_input: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            store: Conversation store receiving the new message
            service: Answer service to query
            window_builder: Builder for the prior-exchange window
            consumer: Stream consumer bound to the same store
            notify_failure: Shows a transient notification to the user
            restore_input: Puts the submitted text back into the input
        """
        self._store = store
        self._service = service
        self._window_builder = window_builder or ContextWindowBuilder()
        self._consumer = consumer or StreamConsumer(store)
        self._notify_failure = notify_failure
        self._restore_input = restore_input
        self._debug_callback: Callable[[str, str, str], None] | None = None

    def set_debug_callback(self, callback: Callable[[str, str, str], None] | None) -> None:
        """Set the debug callback for detailed execution logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback
        self._consumer.set_debug_callback(callback)

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Dispatch", message)

    async def submit(self, query_text: str, project_id: str) -> int:
        """Submit a query and apply its answer to the store.

        The caller guarantees query_text is non-empty. Completion is
        observable through the store; the returned index identifies the
        message that was created.

        Args:
            query_text: The user's question
            project_id: Project the question is about

        Returns:
            Position of the message created for this query

        Raises:
            OpenMessageError: If another query is still being answered
        """
        if self._store.open_index is not None:
            raise OpenMessageError(self._store.open_index)

        window = self._window_builder.build(self._store.messages)
        index = self._store.append(query_text)
        self._debug(
            "info",
            f"Submitting message {index} with {len(window)} prior exchange(s)"
        )

        # Status used if the message is still open when submit exits
        final_status = MessageStatus.FAILED
        try:
            try:
                response = await self._service.answer(query_text, project_id, window)
            except Exception as e:
                self._debug("error", f"Answer service failed for message {index}: {e}")
                self._store.close(index, MessageStatus.FAILED)
                if self._notify_failure:
                    self._notify_failure(SUBMISSION_FAILED_MESSAGE)
                if self._restore_input:
                    self._restore_input(query_text)
                return index

            final_status = MessageStatus.COMPLETE
            self._store.set_sources(index, response.citations)
            self._debug("debug", f"Message {index}: {len(response.citations)} citation(s)")

            result = await self._consumer.consume(index, response.stream)
            if result.interrupted:
                self._debug(
                    "warning",
                    f"Message {index} finalized with partial answer ({result.characters} chars)"
                )
        finally:
            if self._store.open_index == index:
                self._store.close(index, final_status)

        self._debug("info", f"Message {index} complete")
        return index
