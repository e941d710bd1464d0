"""User-facing console output for instrumentation.

Advisory and warning messages are printed to stderr with Rich rather than
through structlog, so they stay visible regardless of the log configuration.

Usage::

    from buildtrace.core.progress import status

    status("Wrote broccoli-viz.build.0.json", style="success")
    status("Please set BROCCOLI_VIZ=1 ...", style="warning")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

_console = Console(stderr=True)

# Style prefixes
_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}


def _get_logger() -> BoundLogger:
    """Get logger lazily to respect runtime config."""
    from buildtrace.core.logging import get_logger

    return get_logger("progress")


def get_console() -> Console:
    """Get the shared Rich console instance."""
    return _console


def set_console(console: Console) -> Console:
    """Swap the shared console, returning the previous one."""
    global _console
    previous = _console
    _console = console
    return previous


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status message to stderr."""
    prefix = _STYLES.get(style, "")
    padding = " " * indent
    _console.print(f"{padding}{prefix}{message}", highlight=False)

    _get_logger().debug("status", message=message, style=style)


def format_duration(ns: int) -> str:
    """Render a nanosecond duration with a readable unit."""
    if ns >= 1_000_000_000:
        return f"{ns / 1_000_000_000:.2f}s"
    if ns >= 1_000_000:
        return f"{ns / 1_000_000:.1f}ms"
    if ns >= 1_000:
        return f"{ns / 1_000:.1f}µs"
    return f"{ns}ns"
