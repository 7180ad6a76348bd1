"""Rich console setup for audiocat output.

Rendering goes into an in-memory buffer so ``format_result`` can return a
plain string; click decides which stream it lands on. Off a terminal, rich
emits no color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

AUDIOCAT_THEME = Theme(
    {
        "cat.ok": "bold green",
        "cat.error": "bold red",
        "cat.op": "bold cyan",
        "cat.key": "dim",
        "cat.id": "bold blue",
        "cat.name": "bold",
        "cat.path": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Buffered console using the audiocat theme (120 columns by default)."""
    return Console(
        file=StringIO(),
        theme=AUDIOCAT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Everything printed to a console made by :func:`create_console`."""
    buffer = console.file
    assert isinstance(buffer, StringIO)
    return buffer.getvalue()
