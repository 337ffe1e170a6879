"""Rich Console factory and theme for leafpress output.

Consoles render into a StringIO buffer so formatters can keep returning
plain strings; Rich drops color codes when it detects no terminal (tests,
pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

LEAF_THEME = Theme(
    {
        "leaf.ok": "bold green",
        "leaf.error": "bold red",
        "leaf.warning": "bold yellow",
        "leaf.op": "bold cyan",
        "leaf.key": "dim",
        "leaf.slug": "bold blue",
        "leaf.path": "dim",
        "leaf.title": "bold",
        "leaf.draft": "yellow",
        "leaf.count": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=LEAF_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
