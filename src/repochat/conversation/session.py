"""Chat session facade used by the presentation layer."""

from collections.abc import Callable
from typing import TYPE_CHECKING

from .context import ContextWindowBuilder
from .dispatcher import QueryDispatcher
from .models import ChangeKind, ChatMessage, ConversationEvent, QueryInput
from .selection import SelectionState
from .store import ConversationStore

if TYPE_CHECKING:
    from ..service import AnswerService


class ChatSession:
    """One conversation about one project.

    Owns the store, the selection state and the dispatcher, and keeps the
    selection reconciled with the log as it grows. Renderers read through
    `messages` and `selected_source` and subscribe for change events; they
    never write to the store directly.
    """

    def __init__(
        self,
        service: "AnswerService",
        project_id: str,
        notify_failure: Callable[[str], None] | None = None,
        restore_input: Callable[[str], None] | None = None,
        window_builder: ContextWindowBuilder | None = None,
    ) -> None:
        self._project_id = project_id
        self._store = ConversationStore()
        self._selection = SelectionState()
        self._dispatcher = QueryDispatcher(
            self._store,
            service,
            window_builder=window_builder,
            notify_failure=notify_failure,
            restore_input=restore_input,
        )
        self._store.subscribe(self._on_store_change)

    @property
    def project_id(self) -> str:
        return self._project_id

    @property
    def store(self) -> ConversationStore:
        return self._store

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return self._store.messages

    @property
    def is_busy(self) -> bool:
        """True while a query is being answered."""
        return self._store.has_open_message

    def set_debug_callback(self, callback: Callable[[str, str, str], None] | None) -> None:
        self._dispatcher.set_debug_callback(callback)

    def subscribe(self, callback: Callable[[ConversationEvent], None]) -> Callable[[], None]:
        """Subscribe a renderer to store mutations."""
        return self._store.subscribe(callback)

    async def submit(self, query_text: str) -> int:
        """Validate and submit a query.

        Raises:
            pydantic.ValidationError: If the query is empty (nothing is mutated)
            OpenMessageError: If another query is still being answered
        """
        validated = QueryInput(query=query_text, project_id=self._project_id)
        return await self._dispatcher.submit(validated.query, validated.project_id)

    def toggle_source(self, message_index: int, source_index: int) -> int | None:
        """Expand or collapse a cited source of a message."""
        return self._selection.toggle(message_index, source_index)

    def selected_source(self, message_index: int) -> int | None:
        return self._selection.selected(message_index)

    def clear(self) -> None:
        """Start over with an empty transcript.

        Raises:
            OpenMessageError: If a query is still being answered
        """
        self._store.clear()

    def _on_store_change(self, event: ConversationEvent) -> None:
        if event.kind is ChangeKind.APPENDED:
            self._selection.reconcile(self._store.messages)
        elif event.kind is ChangeKind.CLEARED:
            self._selection.clear()
