"""Tests for TUI text formatting."""
from rich.markdown import Markdown
from rich.syntax import Syntax
from rich.text import Text

from repochat.conversation import ChatMessage, MessageStatus, Source
from repochat.ui.config import (
    EMPTY_ANSWER_TEXT,
    EXAMPLE_QUESTIONS,
    THINKING_PLACEHOLDER,
    LogLevel,
)
from repochat.ui.formatting import language_for, render_answer, render_source, truncate


class TestLanguageFor:
    """Tests for language detection from file names."""

    def test_known_extensions(self):
        """Test language detection for known extensions."""
        assert language_for("src/app.py") == "python"
        assert language_for("app/page.tsx") == "tsx"
        assert language_for("lib/utils.TS") == "typescript"

    def test_special_file_names(self):
        """Test language detection for special file names."""
        assert language_for("docker/Dockerfile") == "docker"

    def test_unknown_extension(self):
        """Test that unknown extensions render as plain text."""
        assert language_for("data.xyz") == "text"
        assert language_for("LICENSE") == "text"


class TestRenderAnswer:
    """Tests for answer rendering."""

    def test_open_empty_answer_shows_placeholder(self):
        """Test that an open empty answer shows the placeholder."""
        rendered = render_answer(ChatMessage(query="q"))

        assert isinstance(rendered, Text)
        assert rendered.plain == THINKING_PLACEHOLDER

    def test_answer_rendered_as_markdown(self):
        """Test that answers render as markdown."""
        assert isinstance(render_answer(ChatMessage(query="q", answer="**bold**")), Markdown)

    def test_failed_without_answer(self):
        """Test rendering a failed message with no answer."""
        rendered = render_answer(ChatMessage(query="q", status=MessageStatus.FAILED))

        assert "failed" in rendered.plain

    def test_completed_empty_answer_not_thinking(self):
        """Test that a completed message with no text is not shown as thinking."""
        rendered = render_answer(ChatMessage(query="q", status=MessageStatus.COMPLETE))

        assert isinstance(rendered, Text)
        assert rendered.plain == EMPTY_ANSWER_TEXT


class TestRenderSource:
    """Tests for cited source rendering."""

    def test_long_source_truncated(self):
        """Test that long sources are truncated."""
        code = "\n".join(f"line {i}" for i in range(1000))
        source = Source(file_name="big.py", source_code=code, similarity=0.7)

        syntax = render_source(source)

        assert isinstance(syntax, Syntax)
        assert "more lines" in syntax.code
        assert "line 999" not in syntax.code


class TestConfig:
    """Tests for UI configuration values."""

    def test_example_questions(self):
        """Test the example question catalogue."""
        assert [title for title, _ in EXAMPLE_QUESTIONS] == [
            "Code Analysis", "Documentation", "Suggestions"
        ]
        assert all(len(questions) == 3 for _, questions in EXAMPLE_QUESTIONS)

    def test_log_level_from_string(self):
        """Test parsing log levels from strings."""
        assert LogLevel.from_string("WARNING") == LogLevel.WARNING
        assert LogLevel.from_string("bogus") == LogLevel.DEBUG

    def test_truncate(self):
        """Test truncating long text."""
        assert truncate("abc", 5) == "abc"
        assert truncate("abcdef", 3) == "abc..."
