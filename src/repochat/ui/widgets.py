"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Input history management
- Transcript rendering from store change events
- Citation chips and the expanded source view
- Log rendering and level filtering
"""

from datetime import datetime

from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message
from textual.widgets import Button, RichLog, Static, TextArea

from ..conversation import ChangeKind, ChatMessage, ConversationEvent, MessageStatus, Source
from .config import (
    EXAMPLE_QUESTIONS,
    INPUT_HISTORY_MAX_SIZE,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    NOTIFY_TIMEOUT_SHORT,
    WELCOME_SUBTITLE,
    WELCOME_TITLE,
    LogLevel,
)
from .formatting import render_answer, render_source, truncate


def copy_text(app, text: str, what: str) -> None:
    """Copy text to the system clipboard, falling back to OSC 52."""
    try:
        import pyperclip
        pyperclip.copy(text)
        app.notify(f"{what} copied", timeout=NOTIFY_TIMEOUT_SHORT)
    except Exception:
        app.copy_to_clipboard(text)
        app.notify(f"{what} copied (terminal)", timeout=NOTIFY_TIMEOUT_SHORT)


class ExampleButton(Button):
    """A clickable example question on the welcome panel."""

    def __init__(self, question: str, *args, **kwargs) -> None:
        super().__init__(Text(question), *args, classes="example-question", **kwargs)
        self.question = question


class WelcomePanel(Vertical):
    """Welcome card with example questions, shown while the chat is empty."""

    class ExampleChosen(Message):
        """Posted when the user clicks an example question."""

        def __init__(self, question: str) -> None:
            super().__init__()
            self.question = question

    def compose(self):
        yield Static(WELCOME_TITLE, id="welcome-title")
        yield Static(WELCOME_SUBTITLE, id="welcome-subtitle")
        with Horizontal(id="example-categories"):
            for title, questions in EXAMPLE_QUESTIONS:
                with Vertical(classes="example-category"):
                    yield Static(title, classes="example-category-title")
                    for question in questions:
                        yield ExampleButton(question)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if isinstance(event.button, ExampleButton):
            event.stop()
            self.post_message(self.ExampleChosen(event.button.question))


class CitationChip(Button):
    """Button naming one cited file of a message."""

    def __init__(self, source_index: int, source: Source, active: bool = False) -> None:
        super().__init__(Text(source.file_name), classes="citation-chip")
        self.source_index = source_index
        self.set_class(active, "-active")


class SourceView(Static):
    """Syntax-highlighted code of the expanded citation.

    Clicking the view copies the code to the clipboard.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._source: Source | None = None

    def show_source(self, source: Source | None) -> None:
        self._source = source
        if source is None:
            self.display = False
            return
        self.update(render_source(source))
        self.border_title = source.file_name
        self.border_subtitle = f"similarity {source.similarity:.2f}"
        self.display = True

    def on_click(self, event: Click) -> None:
        event.stop()
        if self._source is not None:
            copy_text(self.app, self._source.source_code, "Source")


class MessageView(Vertical):
    """One exchange: the query, the answer, and its citations.

    Holds the latest message snapshot and selection; the view re-renders
    from them whenever either changes.
    """

    class SourceToggled(Message):
        """Posted when a citation chip is clicked."""

        def __init__(self, message_index: int, source_index: int) -> None:
            super().__init__()
            self.message_index = message_index
            self.source_index = source_index

    def __init__(self, index: int, message: ChatMessage, *args, **kwargs) -> None:
        super().__init__(*args, classes="chat-message", **kwargs)
        self.index = index
        self._message = message
        self._selected: int | None = None
        self._chip_count = 0

    @property
    def message(self) -> ChatMessage:
        return self._message

    def compose(self):
        yield Static(Text(f"> {self._message.query}"), classes="message-query")
        yield Static(render_answer(self._message), classes="message-answer")
        yield Horizontal(classes="citation-bar")
        yield SourceView(classes="source-view")

    def on_mount(self) -> None:
        self._refresh()

    def set_message(self, message: ChatMessage) -> None:
        self._message = message
        if self.is_mounted:
            self._refresh()

    def set_selected(self, selected: int | None) -> None:
        self._selected = selected
        if self.is_mounted:
            self._refresh_selection()

    def _refresh(self) -> None:
        message = self._message
        self.set_class(message.is_open, "-open")
        self.set_class(message.status is MessageStatus.FAILED, "-failed")
        self.query_one(".message-answer", Static).update(render_answer(message))

        bar = self.query_one(".citation-bar", Horizontal)
        if len(message.sources) != self._chip_count:
            self._chip_count = len(message.sources)
            bar.remove_children()
            bar.mount(*[
                CitationChip(i, source, active=(i == self._selected))
                for i, source in enumerate(message.sources)
            ])
        bar.display = bool(message.sources)
        self._refresh_selection()

    def _refresh_selection(self) -> None:
        for chip in self.query(CitationChip):
            chip.set_class(chip.source_index == self._selected, "-active")

        sources = self._message.sources
        source_view = self.query_one(SourceView)
        if self._selected is not None and 0 <= self._selected < len(sources):
            source_view.show_source(sources[self._selected])
        else:
            source_view.show_source(None)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if isinstance(event.button, CitationChip):
            event.stop()
            self.post_message(self.SourceToggled(self.index, event.button.source_index))


class TranscriptWidget(VerticalScroll):
    """Scrollable transcript driven by conversation store events."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"
    ALLOW_MAXIMIZE = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._views: list[MessageView] = []

    def apply_event(self, event: ConversationEvent) -> None:
        """Update the transcript after a store mutation."""
        if event.kind is ChangeKind.CLEARED:
            self._views.clear()
            self.remove_children()
            self.border_subtitle = "Conversation history"
            return

        if event.index is None or event.message is None:
            return

        if event.kind is ChangeKind.APPENDED:
            view = MessageView(event.index, event.message)
            self._views.append(view)
            self.mount(view)
            self.border_subtitle = f"{len(self._views)} messages"
        elif event.index < len(self._views):
            self._views[event.index].set_message(event.message)

        self.scroll_end(animate=False)

    def show_selection(self, message_index: int, selected: int | None) -> None:
        if 0 <= message_index < len(self._views):
            self._views[message_index].set_selected(selected)

    def last_answer(self) -> str | None:
        """Answer text of the most recent message that has one."""
        for view in reversed(self._views):
            if view.message.answer:
                return view.message.answer
        return None


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button.

    While busy, the Send button is disabled and submissions are ignored;
    typing is still allowed.
    """

    class Submitted(Message):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self._busy = False

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="success").with_tooltip(
            "Ask the question (Ctrl+J)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.focus()
        text_area.highlight_cursor_line = False

    def set_busy(self, busy: bool) -> None:
        self._busy = busy
        self.query_one("#send-btn", Button).disabled = busy
        self.set_class(busy, "-busy")

    def set_text(self, text: str) -> None:
        """Replace the input content and move the cursor to the end."""
        text_area = self.query_one("#chat-input", TextArea)
        text_area.text = text
        text_area.move_cursor(text_area.document.end)
        text_area.focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self._submit()

    def on_key(self, event) -> None:
        """Handle keyboard shortcuts.

        Terminals do not report modifiers with Enter, so ctrl+j submits.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_start(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == text_area.document.end

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:
            if self._history_index == -1:
                return
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        if self._busy:
            return
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text.strip()
        if not value:
            return
        if not self._history or self._history[-1] != value:
            self._history.append(value)
            del self._history[:-INPUT_HISTORY_MAX_SIZE]
        self._history_index = -1
        text_area.text = ""
        self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        self.query_one("#chat-input", TextArea).focus()


class DebugPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Shows timestamped log messages from all components.
    Hidden by default, shown with --log-level or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    # Color per component name passed to debug callbacks
    COMPONENT_COLORS = {
        "TUI": "cyan",
        "Dispatch": "green",
        "Stream": "yellow",
        "Answer": "magenta",
        "Index": "blue",
    }

    LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        self.display = False

    def log(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Component name (TUI, Dispatch, Stream, Answer, ...)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_color = self.LEVEL_COLORS.get(level, "white")
        comp_color = self.COMPONENT_COLORS.get(component, "white")

        line = Text.assemble(
            (f"{timestamp} ", "dim"),
            (f"{LogLevel.name(level):<5} ", level_color),
            (f"[{component}] ", comp_color),
            truncate(message, LOG_MAX_MESSAGE_LENGTH),
        )
        self.write(line)

    def debug(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.INFO)

    def warning(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.WARNING)

    def error(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.ERROR)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True

    def get_plain_text(self) -> str:
        """Get plain text content of the log for copying."""
        return "\n".join(line.text for line in self.lines)

    def on_click(self, event: Click) -> None:
        """Copy log content to clipboard when clicked."""
        event.stop()
        text = self.get_plain_text()
        if not text.strip():
            self.app.notify("Debug log is empty", timeout=NOTIFY_TIMEOUT_SHORT)
            return
        copy_text(self.app, text, "Debug log")
