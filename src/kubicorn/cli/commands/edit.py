"""``kubicorn edit NAME`` — edit a cluster state in ``$EDITOR``."""

from __future__ import annotations

from kubicorn.cli import exit_codes
from kubicorn.cli.commands._common import cluster_service, state_store
from kubicorn.cli.console import console
from kubicorn.core.binder import OptionBinder
from kubicorn.core.command import CommandNode, Invocation, exact_args
from kubicorn.infra.editor import open_in_editor


def edit_command(binder: OptionBinder) -> CommandNode:
    return CommandNode(
        "edit",
        short="Edit a cluster state",
        long=(
            "Open the state file of a cluster in $VISUAL or $EDITOR (default: vi).\n"
            "The file is validated again once the editor exits."
        ),
        usage="edit NAME",
        run=_run_edit,
        args_validator=exact_args(1),
        args_metavar="NAME",
    )


def _run_edit(invocation: Invocation) -> int:
    name = invocation.args[0]
    service = cluster_service(invocation)
    service.get(name)

    open_in_editor(state_store(invocation).path_for(name), invocation.environ)

    service.get(name)
    console.print(f"[bold green]Saved[/bold green] cluster [bold]{name}[/bold].")
    return exit_codes.SUCCESS
