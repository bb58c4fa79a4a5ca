"""Terminal feedback for ``tpl`` commands.

Everything goes to stderr so ``--json`` output on stdout stays parseable::

    status("Registry updated", style="success")   # ✓ Registry updated

    with spinner("Extracting tokens from 240 files"):
        extract_all()   # console log handlers stay quiet meanwhile
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

import structlog
from rich.console import Console

_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}

# Depth of nested spinners; console logging resumes when it drops to zero
_quiet_depth: ContextVar[int] = ContextVar("quiet_depth", default=0)


def is_console_suppressed() -> bool:
    return _quiet_depth.get() > 0


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Silence console log handlers; file handlers are unaffected."""
    token = _quiet_depth.set(_quiet_depth.get() + 1)
    try:
        yield
    finally:
        _quiet_depth.reset(token)


def _is_tty() -> bool:
    isatty = getattr(sys.stderr, "isatty", None)
    return bool(isatty and isatty())


def get_console() -> Console:
    return _console


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print one styled line; unknown styles print the bare message."""
    line = " " * indent + _STYLES.get(style, "") + message
    _console.print(line, highlight=False)
    structlog.get_logger().debug("status", logger="progress", message=message, style=style)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """``pluralize(1, "file")`` -> ``"1 file"``, ``pluralize(3, "file")`` -> ``"3 files"``."""
    return f"{count} {singular if count == 1 else (plural or singular + 's')}"


@contextmanager
def spinner(message: str, *, indent: int = 0) -> Iterator[None]:
    """Animated status on a terminal, a single ``message...`` line otherwise."""
    text = " " * indent + message
    if not _is_tty():
        _console.print(f"{text}...")
        yield
        return
    with suppress_console_logs(), _console.status(f"[cyan]{text}[/cyan]", spinner="dots"):
        yield
