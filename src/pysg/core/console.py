"""User-facing diagnostics on stderr.

Matches go to stdout through the search driver. Everything meant for the
person at the terminal but not part of the results (per-file failures, the
``--stats`` summary) is printed here, on a Rich console bound to stderr.

Usage::

    from pysg.core.console import diagnostic, status

    diagnostic("src/broken.py", "invalid syntax (line 3, column 5)")
    status("12 files searched", style="info")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

# Resolves sys.stderr on every write, so redirected streams are honoured.
_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}


def _get_logger() -> BoundLogger:
    """Get logger lazily to respect runtime config."""
    from pysg.core.logging import get_logger

    return get_logger("console")


def get_console() -> Console:
    """Get the shared Rich console instance."""
    return _console


def diagnostic(name: str, message: str) -> None:
    """Print a per-file failure as ``<name>: <message>``.

    File names and parser messages are arbitrary text, so markup and
    highlighting are off and long lines are never wrapped.
    """
    _console.print(f"{name}: {message}", markup=False, highlight=False, soft_wrap=True)


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status message to stderr."""
    prefix = _STYLES.get(style, "")
    padding = " " * indent
    _console.print(f"{padding}{prefix}{message}", highlight=False, soft_wrap=True)

    _get_logger().debug("status", message=message, style=style)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return grammatically correct singular/plural form.

    Args:
        count: The number of items
        singular: Singular form (e.g., "file")
        plural: Plural form (default: singular + "s")

    Returns:
        Formatted string like "1 file" or "3 files"
    """
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"
