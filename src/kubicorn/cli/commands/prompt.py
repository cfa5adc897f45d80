"""``kubicorn prompt`` — pick and run a command interactively.

This command is built by a late factory: it needs every other command
to exist already so it can offer them as choices.
"""

from __future__ import annotations

import shlex
from typing import Any

from kubicorn.cli import exit_codes
from kubicorn.cli.console import console
from kubicorn.core.command import CommandNode, Invocation, no_args
from kubicorn.core.registry import CommandRegistry
from kubicorn.exceptions import EnvironmentError, UsageError


def _import_questionary() -> Any:
    """Import questionary lazily for interactive selection."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def prompt_command(registry: CommandRegistry) -> CommandNode:
    """Build the prompt over the commands registered so far."""
    choices: tuple[tuple[str, str], ...] = tuple(
        (node.name, node.short) for node in registry.commands()
    )

    def run(invocation: Invocation) -> int:
        return _run_prompt(invocation, choices)

    return CommandNode(
        "prompt",
        short="Open an interactive prompt for Kubicorn",
        run=run,
        requires_config=False,
        args_validator=no_args,
        args_metavar="",
    )


def _run_prompt(invocation: Invocation, choices: tuple[tuple[str, str], ...]) -> int:
    questionary = _import_questionary()

    selected: str | None = questionary.select(
        "Select a command:",
        choices=[
            questionary.Choice(title=f"{name:<12} {short}", value=name)
            for name, short in choices
        ],
        use_arrow_keys=True,
        use_shortcuts=False,
    ).ask()  # Returns None on Ctrl+C / Esc
    if selected is None:
        console.print("[yellow]No command selected.[/yellow]")
        return exit_codes.SUCCESS

    raw_args: str | None = questionary.text(f"Arguments for '{selected}':").ask()
    if raw_args is None:
        console.print("[yellow]No command selected.[/yellow]")
        return exit_codes.SUCCESS

    try:
        extra = shlex.split(raw_args)
    except ValueError as exc:
        raise UsageError(f"Cannot parse arguments: {exc}") from exc

    return invocation.dispatcher.execute([selected, *extra])
