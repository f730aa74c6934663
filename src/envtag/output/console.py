"""Rich Console factory and theme for envtag output.

Consoles render into a StringIO buffer so every renderer keeps a
``-> str`` contract.  In non-TTY environments (tests, pipes) Rich drops
color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

ENVTAG_THEME = Theme(
    {
        "envtag.ok": "bold green",
        "envtag.error": "bold red",
        "envtag.key": "bold cyan",
        "envtag.path": "dim",
        "envtag.value": "bold",
        "envtag.unset": "dim italic",
        "envtag.code": "yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    return Console(
        file=StringIO(),
        theme=ENVTAG_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
