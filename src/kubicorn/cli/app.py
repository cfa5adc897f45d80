"""CLI application entry point and error boundary for kubicorn.

This module is the **sole error boundary** for the entire application.
It catches :class:`~kubicorn.exceptions.KubicornError`,
``KeyboardInterrupt`` and any unexpected ``Exception``, renders a
user-facing message on stderr and maps the failure onto an exit code.

Architecture notes
------------------
* No command logic lives here; :func:`main` builds the registry and
  hands the argument vector to the dispatcher.
* This is the only place that translates between the domain world and
  the OS process exit code.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from pathlib import Path

from kubicorn.cli import exit_codes
from kubicorn.cli.console import console
from kubicorn.cli.dispatcher import Dispatcher
from kubicorn.cli.registry import build_registry
from kubicorn.exceptions import ConfigError, KubicornError, UsageError
from kubicorn.utils.logging import configure_logging


def main(
    argv: list[str] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    config_path: Path | None = None,
) -> int:
    """Run the kubicorn CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.
    environ:
        Environment mapping; ``os.environ`` when ``None``.
    config_path:
        Explicit configuration file, overriding the default location.

    Returns
    -------
    int
        OS process exit code.

    Raises
    ------
    KubicornError
        Dispatch and command failures propagate to :func:`cli`.
    """
    environ = os.environ if environ is None else environ
    configure_logging()

    registry = build_registry(environ=environ, config_path=config_path)
    dispatcher = Dispatcher(registry, environ=environ)
    return dispatcher.execute(sys.argv[1:] if argv is None else argv)


def exit_code_for(exc: KubicornError) -> int:
    if isinstance(exc, UsageError):
        return exit_codes.USAGE_ERROR
    if isinstance(exc, ConfigError):
        return exit_codes.CONFIG_ERROR
    return exit_codes.GENERAL_ERROR


def cli(argv: list[str] | None = None) -> None:
    """Top-level error boundary invoked by the console-script entry point.

    Wraps :func:`main` so the process never exits with a raw stack
    trace during normal usage.
    """
    try:
        code = main(argv)
        sys.exit(code)
    except KubicornError as exc:
        console.print_error(exc)
        sys.exit(exit_code_for(exc))
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
