"""Rich Console factory and theme for sdui output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SDUI_THEME = Theme(
    {
        "sdui.ok": "bold green",
        "sdui.error": "bold red",
        "sdui.warning": "bold yellow",
        "sdui.op": "bold cyan",
        "sdui.key": "dim",
        "sdui.id": "bold blue",
        "sdui.type": "magenta",
        "sdui.prop": "cyan",
        "sdui.value": "",
        "sdui.absent": "dim italic",
    }
)

_SEVERITY_STYLES: dict[str, str] = {
    "error": "sdui.error",
    "warning": "sdui.warning",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=SDUI_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_severity(severity: str) -> str:
    """Return the Rich style name for an issue severity."""
    return _SEVERITY_STYLES.get(severity, "")
