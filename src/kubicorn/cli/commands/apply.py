"""``kubicorn apply NAME`` — reconcile a cluster with its cloud."""

from __future__ import annotations

from kubicorn.cli import exit_codes
from kubicorn.cli.commands._common import cluster_service
from kubicorn.cli.console import console
from kubicorn.core.binder import OptionBinder
from kubicorn.core.command import CommandNode, Invocation, exact_args


def apply_command(binder: OptionBinder) -> CommandNode:
    return CommandNode(
        "apply",
        short="Apply a cluster resource to a cloud",
        long=(
            "Create or update the cloud resources described by a cluster state,\n"
            "using the provider plugin installed for its cloud."
        ),
        usage="apply NAME",
        run=_run_apply,
        args_validator=exact_args(1),
        args_metavar="NAME",
    )


def _run_apply(invocation: Invocation) -> int:
    cluster = cluster_service(invocation).apply(invocation.args[0])
    console.print(
        f"[bold green]Applied[/bold green] cluster [bold]{cluster.name}[/bold] "
        f"to {cluster.cloud}."
    )
    return exit_codes.SUCCESS
