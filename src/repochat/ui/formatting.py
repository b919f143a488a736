"""Text formatting utilities for the TUI.

Hides how answers and cited code are turned into Rich renderables.
"""

from pathlib import PurePosixPath

from rich.markdown import Markdown
from rich.syntax import Syntax
from rich.text import Text

from ..conversation import ChatMessage, MessageStatus, Source
from .config import (
    EMPTY_ANSWER_TEXT,
    SOURCE_VIEW_MAX_LINES,
    SOURCE_VIEW_THEME,
    THINKING_PLACEHOLDER,
)

# Pygments lexer names by file extension
_LANGUAGES = {
    ".py": "python",
    ".pyi": "python",
    ".js": "javascript",
    ".jsx": "jsx",
    ".mjs": "javascript",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
    ".kt": "kotlin",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".hpp": "cpp",
    ".cs": "csharp",
    ".rb": "ruby",
    ".php": "php",
    ".swift": "swift",
    ".sh": "bash",
    ".sql": "sql",
    ".html": "html",
    ".css": "css",
    ".scss": "scss",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".md": "markdown",
    ".tf": "terraform",
}

_SPECIAL_FILES = {
    "dockerfile": "docker",
    "makefile": "make",
}


def language_for(file_name: str) -> str:
    """Guess the highlighting language from a file name ("text" if unknown)."""
    path = PurePosixPath(file_name)
    special = _SPECIAL_FILES.get(path.name.lower())
    if special:
        return special
    return _LANGUAGES.get(path.suffix.lower(), "text")


def render_answer(message: ChatMessage) -> Markdown | Text:
    """Answer as Markdown, or the placeholder while no text has arrived."""
    if message.status is MessageStatus.FAILED and not message.answer:
        return Text("No answer (request failed)", style="italic")
    if not message.answer:
        if message.is_open:
            return Text(THINKING_PLACEHOLDER, style="dim italic")
        return Text(EMPTY_ANSWER_TEXT, style="dim italic")
    return Markdown(message.answer)


def render_source(source: Source) -> Syntax:
    """Syntax-highlighted view of a cited source."""
    code = source.source_code
    lines = code.splitlines()
    if len(lines) > SOURCE_VIEW_MAX_LINES:
        omitted = len(lines) - SOURCE_VIEW_MAX_LINES
        code = "\n".join(lines[:SOURCE_VIEW_MAX_LINES]) + f"\n... ({omitted} more lines)"
    return Syntax(
        code,
        language_for(source.file_name),
        theme=SOURCE_VIEW_THEME,
        line_numbers=True,
        word_wrap=False,
    )


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
