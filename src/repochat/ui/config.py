"""UI configuration constants.

Centralizes display text and limits for the UI module.
"""


class LogLevel:
    """Log level constants with numeric values for comparison.

    DEBUG < INFO < WARNING < ERROR. A panel shows every message whose level
    is at or above its threshold.
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)


# Shown in place of the answer until the first fragment arrives
THINKING_PLACEHOLDER = "Thinking..."
EMPTY_ANSWER_TEXT = "(empty answer)"

WELCOME_TITLE = "Welcome to Code Assistant"
WELCOME_SUBTITLE = "Ask questions about your codebase and get detailed answers"

# (category title, questions) shown on the welcome screen
EXAMPLE_QUESTIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "Code Analysis",
        (
            "Can you explain how the authentication flow works in this project?",
            "What design patterns are used in this codebase?",
            "How is state management implemented across the application?",
        ),
    ),
    (
        "Documentation",
        (
            "What are the main components and their purposes?",
            "How should I structure new features in this project?",
            "What are the coding conventions used here?",
        ),
    ),
    (
        "Suggestions",
        (
            "How can I improve the error handling in this code?",
            "What performance optimizations would you recommend?",
            "Are there any security vulnerabilities I should address?",
        ),
    ),
)

# Input history configuration
INPUT_HISTORY_MAX_SIZE = 100

# Log panel configuration
LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500

# Source view configuration
SOURCE_VIEW_THEME = "monokai"
SOURCE_VIEW_MAX_LINES = 400

# Notification timeouts (seconds)
NOTIFY_TIMEOUT_SHORT = 2
NOTIFY_TIMEOUT_ERROR = 5
