"""Rich Console factory and theme for reth-build output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

RETH_THEME = Theme(
    {
        "rb.ok": "bold green",
        "rb.error": "bold red",
        "rb.warning": "bold yellow",
        "rb.op": "bold cyan",
        "rb.key": "dim",
        "rb.image": "bold blue",
        "rb.path": "dim",
        "rb.command": "bold",
        "rb.mount.rw": "green",
        "rb.mount.ro": "yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=RETH_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_mount(spec: str) -> str:
    """Return the Rich style name for a ``source:destination:mode`` spec."""
    return "rb.mount.ro" if spec.endswith(":ro") else "rb.mount.rw"
