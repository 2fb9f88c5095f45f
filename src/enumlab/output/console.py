"""Rich Console factory and theme for enumlab output.

Consoles render into a StringIO buffer so that every renderer keeps the
``format_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich drops color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

ENUMLAB_THEME = Theme(
    {
        "enumlab.ok": "bold green",
        "enumlab.error": "bold red",
        "enumlab.warning": "bold yellow",
        "enumlab.op": "bold cyan",
        "enumlab.key": "dim",
        "enumlab.variant": "bold magenta",
        "enumlab.shape": "cyan",
        "enumlab.amount.credit": "green",
        "enumlab.amount.debit": "red",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (``[output] width`` in enumlab.toml).
    """
    return Console(
        file=StringIO(),
        theme=ENUMLAB_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 100,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_amount(amount: int) -> str:
    return "enumlab.amount.credit" if amount >= 0 else "enumlab.amount.debit"
