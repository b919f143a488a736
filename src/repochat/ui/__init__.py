"""Terminal UI for repochat.

Module structure (each module hides a design decision):
- config.py: Display text, example questions and limits
- formatting.py: Answer and source rendering
- widgets.py: Transcript, citations, input bar and log panel
- styles.py: CSS styling (layout decisions)
- themes.py: Color palette
- app.py: Application orchestration (user interaction flow)
"""

from .app import CodeChatApp, run_textual_tui
from .config import LogLevel
from .widgets import ChatInputBar, DebugPanel, TranscriptWidget

__all__ = [
    "ChatInputBar",
    "CodeChatApp",
    "DebugPanel",
    "LogLevel",
    "TranscriptWidget",
    "run_textual_tui",
]
