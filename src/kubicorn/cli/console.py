"""Stderr console with optional Rich support.

Rich is imported lazily so that bootstrap paths (``--help``,
``version``, ``completion``) keep working when it is not installed.
"""

from __future__ import annotations

import sys
from typing import Any

from kubicorn.exceptions import EnvironmentError, KubicornError


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


def get_rich_console(**options: Any) -> Any:
    """Create a Rich console targeting stderr."""
    console_class = _load_rich_console_class()
    return console_class(stderr=True, **options)


class _ConsoleProxy:
    """``print``-compatible stderr proxy with a plain fallback."""

    def print(self, *objects: object) -> None:
        """Render with Rich when available, else plain stderr print."""
        try:
            rich_console = get_rich_console(highlight=False)
        except EnvironmentError:
            print(*objects, file=sys.stderr)
            return
        rich_console.print(*objects)

    def print_error(self, exc: KubicornError) -> None:
        """Render *exc* and its hint."""
        try:
            rich_console = get_rich_console(highlight=False)
        except EnvironmentError:
            print(f"Error: {exc}", file=sys.stderr)
            if exc.hint:
                print(f"Hint: {exc.hint}", file=sys.stderr)
            return

        from rich.markup import escape

        rich_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            rich_console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")


console = _ConsoleProxy()
