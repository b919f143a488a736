"""Main Textual TUI application.

Connects the chat session to the widgets: store events drive the
transcript, user actions go through the session.
"""

import asyncio
import contextlib

from pydantic import ValidationError
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.widgets import Footer, Header

from ..conversation import ChatSession, ConversationEvent, OpenMessageError
from ..service import AnswerService
from .config import NOTIFY_TIMEOUT_ERROR, NOTIFY_TIMEOUT_SHORT, LogLevel
from .styles import APP_CSS
from .themes import SLATE_NIGHT
from .widgets import (
    ChatInputBar,
    DebugPanel,
    MessageView,
    TranscriptWidget,
    WelcomePanel,
    copy_text,
)


class CodeChatApp(App):
    """Textual TUI for asking questions about an indexed project."""

    CSS = APP_CSS
    TITLE = "Repochat"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+k", "clear_chat", "Clear Chat"),
        Binding("ctrl+r", "copy_last_answer", "Copy Answer"),
        Binding("ctrl+l", "clear_log", "Clear Log"),
        Binding("ctrl+d", "toggle_debug", "Debug"),
    ]

    def __init__(
        self,
        service: AnswerService,
        project_id: str,
        log_level: str | None = None,
        model_name: str | None = None,
    ) -> None:
        super().__init__()
        self._project_id = project_id
        self._log_level = log_level
        self._model_name = model_name
        self._session = ChatSession(
            service,
            project_id,
            notify_failure=self._notify_failure,
            restore_input=self._restore_input,
        )
        self._query_pending = False

    @property
    def session(self) -> ChatSession:
        return self._session

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield WelcomePanel(id="welcome")
        yield TranscriptWidget(id="transcript")
        yield DebugPanel(id="debug-panel")
        yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        self.register_theme(SLATE_NIGHT)
        self.theme = "slate-night"

        parts = [self._project_id]
        if self._model_name:
            parts.append(self._model_name)
        self.sub_title = " | ".join(parts)

        if self._log_level is not None:
            log_panel = self.query_one("#debug-panel", DebugPanel)
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        self._session.subscribe(self._on_conversation_event)
        self._session.set_debug_callback(self._debug_callback)
        self._update_welcome()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def _debug_callback(self, level: str, component: str, message: str) -> None:
        """Route debug messages to the log panel."""
        with contextlib.suppress(NoMatches):
            log_panel = self.query_one("#debug-panel", DebugPanel)
            log_panel.log(component, message, LogLevel.from_string(level))

    def _update_welcome(self) -> None:
        empty = len(self._session.messages) == 0
        self.query_one("#welcome", WelcomePanel).display = empty
        self.query_one("#transcript", TranscriptWidget).display = not empty

    def _on_conversation_event(self, event: ConversationEvent) -> None:
        # Closing events may arrive while the app is shutting down
        with contextlib.suppress(NoMatches):
            self.query_one("#transcript", TranscriptWidget).apply_event(event)
            self._update_welcome()

    def _notify_failure(self, message: str) -> None:
        self.notify(message, severity="error", timeout=NOTIFY_TIMEOUT_ERROR)

    def _restore_input(self, text: str) -> None:
        self.query_one("#chat-input-bar", ChatInputBar).set_text(text)

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        self._ask(event.value)

    def on_welcome_panel_example_chosen(self, event: WelcomePanel.ExampleChosen) -> None:
        self._ask(event.question)

    def on_message_view_source_toggled(self, event: MessageView.SourceToggled) -> None:
        selected = self._session.toggle_source(event.message_index, event.source_index)
        self.query_one("#transcript", TranscriptWidget).show_selection(
            event.message_index, selected
        )

    def _ask(self, question: str) -> None:
        if self._query_pending or self._session.is_busy:
            self.notify("Still answering the previous question", severity="warning",
                        timeout=NOTIFY_TIMEOUT_SHORT)
            return
        # Marked busy before the worker starts
        self._query_pending = True
        self._set_input_busy(True)
        self._run_query(question)

    def _set_input_busy(self, busy: bool) -> None:
        with contextlib.suppress(NoMatches):
            self.query_one("#chat-input-bar", ChatInputBar).set_busy(busy)

    @work(group="query")
    async def _run_query(self, question: str) -> None:
        """Submit a question as a background async worker."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        log_panel.info("TUI", f"Asking: '{question[:50]}'")
        try:
            await self._session.submit(question)
        except ValidationError:
            self.notify("Please enter a question", severity="warning",
                        timeout=NOTIFY_TIMEOUT_SHORT)
        except OpenMessageError:
            self.notify("Still answering the previous question", severity="warning",
                        timeout=NOTIFY_TIMEOUT_SHORT)
        except Exception as e:
            log_panel.error("TUI", f"Exception: {e}")
            self.notify(f"Error: {str(e)[:50]}", severity="error", timeout=NOTIFY_TIMEOUT_ERROR)
        finally:
            self._query_pending = False
            self._set_input_busy(self._session.is_busy)

    def action_clear_chat(self) -> None:
        """Clear the transcript."""
        if self._query_pending or self._session.is_busy:
            self.notify("Wait for the answer to finish", severity="warning",
                        timeout=NOTIFY_TIMEOUT_SHORT)
            return
        self._session.clear()
        self.notify("Chat cleared", timeout=NOTIFY_TIMEOUT_SHORT)

    def action_copy_last_answer(self) -> None:
        """Copy the most recent answer to the clipboard."""
        answer = self.query_one("#transcript", TranscriptWidget).last_answer()
        if answer:
            copy_text(self, answer, "Answer")
        else:
            self.notify("No answer to copy", severity="warning")

    def action_clear_log(self) -> None:
        self.query_one("#debug-panel", DebugPanel).clear()
        self.notify("Log cleared", timeout=NOTIFY_TIMEOUT_SHORT)

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        is_visible = self.query_one("#debug-panel", DebugPanel).toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}",
                    timeout=NOTIFY_TIMEOUT_SHORT)


async def run_textual_tui(
    service: AnswerService,
    project_id: str,
    log_level: str | None = None,
    model_name: str | None = None,
) -> None:
    """Run the Textual TUI and close the service when it exits.

    Args:
        service: Answer service to query
        project_id: Project the questions are about
        log_level: Log level for panel (debug/info/warning/error), None to hide
        model_name: Shown in the header subtitle
    """
    app = CodeChatApp(
        service=service,
        project_id=project_id,
        log_level=log_level,
        model_name=model_name,
    )
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        with contextlib.suppress(Exception):
            await service.close()
