"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Slate dark theme: gray surfaces with an emerald accent
SLATE_NIGHT = Theme(
    name="slate-night",
    primary="#34d399",      # Emerald - main accent, active citation
    secondary="#60a5fa",    # Sky blue - answers
    accent="#fbbf24",       # Amber - highlights
    foreground="#e5e7eb",   # Gray 200
    background="#111827",   # Gray 900
    success="#4ade80",
    warning="#fb923c",
    error="#f87171",
    surface="#1f2937",      # Gray 800 - cards and messages
    panel="#161e2e",
    dark=True,
    variables={
        "block-cursor-foreground": "#111827",
        "block-cursor-background": "#34d399",
        "block-cursor-text-style": "bold",
        "block-hover-background": "#374151 30%",

        "input-cursor-background": "#e5e7eb",
        "input-cursor-foreground": "#111827",
        "input-selection-background": "#34d399 30%",

        "border": "#374151",
        "border-blurred": "#1f2937",

        "scrollbar": "#374151",
        "scrollbar-hover": "#4b5563",
        "scrollbar-active": "#34d399",
        "scrollbar-background": "#161e2e",
        "scrollbar-corner-color": "#161e2e",

        "footer-foreground": "#d1d5db",
        "footer-background": "#111827",
        "footer-key-foreground": "#fbbf24",
        "footer-key-background": "#374151",
        "footer-description-foreground": "#9ca3af",

        "text-muted": "#9ca3af",
        "text-disabled": "#4b5563",

        "button-foreground": "#e5e7eb",
        "button-color-foreground": "#111827",
        "button-focus-text-style": "bold",
    },
)
