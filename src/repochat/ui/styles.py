"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.
"""

APP_CSS = """
/* ============================================
   Main Screen Layout - single column
   ============================================ */
Screen {
    layout: vertical;
    background: $background;
}

/* ============================================
   Welcome Panel - example questions
   ============================================ */
WelcomePanel {
    height: 1fr;
    padding: 1 2;
    align-horizontal: center;
}

#welcome-title {
    width: 100%;
    content-align: center middle;
    text-style: bold;
    color: $foreground;
}

#welcome-subtitle {
    width: 100%;
    content-align: center middle;
    color: $text-muted;
    margin-bottom: 1;
}

#example-categories {
    height: auto;
}

.example-category {
    width: 1fr;
    height: auto;
    margin: 0 1;
    padding: 1;
    background: $surface;
    border: round $border;

    &:hover {
        border: round $primary 50%;
    }
}

.example-category-title {
    color: $primary;
    text-style: bold;
    margin-bottom: 1;
}

.example-question {
    width: 100%;
    height: auto;
    min-height: 1;
    border: none;
    background: transparent;
    color: $foreground 80%;
    content-align: left middle;
    text-align: left;
    padding: 0 1;

    &:hover {
        background: $surface-lighten-1;
        color: $primary;
    }
}

/* ============================================
   Transcript Panel
   ============================================ */
#transcript {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }
}

.chat-message {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
}

.message-query {
    width: 100%;
    height: auto;
    padding: 0 1;
    background: $surface;
    color: $foreground;
    text-style: bold;
    border-left: tall $primary;
}

.message-answer {
    width: 100%;
    height: auto;
    max-height: 40;
    overflow-y: auto;
    margin: 1 0 0 4;
    padding: 0 1;
    background: $surface 50%;
    border-left: tall $secondary;
}

.chat-message.-open .message-answer {
    border-left: tall $accent;
}

.chat-message.-failed .message-answer {
    border-left: tall $error;
    color: $text-muted;
}

/* ============================================
   Citations
   ============================================ */
.citation-bar {
    height: auto;
    margin: 1 0 0 4;
    padding: 0 1;
    background: $surface;
    overflow-x: auto;
}

.citation-chip {
    width: auto;
    height: 1;
    min-width: 4;
    margin-right: 1;
    border: none;
    background: transparent;
    color: $foreground 80%;

    &:hover {
        background: $surface-lighten-1;
    }

    &.-active {
        background: $primary;
        color: $background;
        text-style: bold;
    }
}

.source-view {
    height: auto;
    max-height: 30;
    margin: 0 0 0 4;
    overflow: auto;
    background: $background;
    border: round $primary 40%;
    border-title-color: $primary;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    display: none;
}

/* ============================================
   Debug/Log Panel
   ============================================ */
#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 12;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-x: auto;
}

/* ============================================
   Chat Input Bar - Text Entry + Send
   ============================================ */
ChatInputBar {
    height: 5;
    border: round $primary 60%;
    background: $panel;

    &:focus-within {
        border: round $primary;
    }

    &.-busy {
        border: round $accent 60%;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;
}

#send-btn {
    width: 10;
    height: 100%;
    margin: 0 0 0 1;
    border: tall $primary;
    background: $primary;
    color: $background;
    text-style: bold;

    &:hover {
        background: $primary-lighten-1;
    }

    &:disabled {
        background: $surface;
        border: tall $border;
        color: $text-disabled;
    }
}

/* ============================================
   Notification Toasts
   ============================================ */
Toast {
    background: $surface;
    border: tall $border;
    padding: 0 1;

    &.-information {
        border: tall $primary;
    }

    &.-error {
        border: tall $error;
        background: $error 12%;
    }

    &.-warning {
        border: tall $warning;
        background: $warning 12%;
    }
}

Header {
    background: $panel;
    height: 1;
}

Footer {
    background: $panel;
}
"""
