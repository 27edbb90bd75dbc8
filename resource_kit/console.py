"""Shared Rich console instances for CLI output."""

from rich.console import Console
from rich.theme import Theme

THEME = Theme(
    {
        "yes": "green",
        "no": "red",
        "muted": "dim",
    }
)

console = Console(theme=THEME)
error_console = Console(stderr=True, theme=THEME)

__all__ = ["console", "error_console", "THEME"]
