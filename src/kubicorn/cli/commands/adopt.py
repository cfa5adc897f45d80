"""``kubicorn adopt NAME`` — take over existing cloud resources."""

from __future__ import annotations

from kubicorn.cli import exit_codes
from kubicorn.cli.commands._common import cluster_service
from kubicorn.cli.console import console
from kubicorn.core.binder import OptionBinder
from kubicorn.core.command import CommandNode, Invocation, exact_args


def adopt_command(binder: OptionBinder) -> CommandNode:
    return CommandNode(
        "adopt",
        short="Adopt a Kubernetes cluster into a Kubicorn state store",
        usage="adopt NAME",
        run=_run_adopt,
        args_validator=exact_args(1),
        args_metavar="NAME",
    )


def _run_adopt(invocation: Invocation) -> int:
    cluster = cluster_service(invocation).adopt(invocation.args[0])
    pools = len(cluster.server_pools)
    console.print(
        f"[bold green]Adopted[/bold green] cluster [bold]{cluster.name}[/bold] "
        f"({pools} server pool{'s' if pools != 1 else ''})."
    )
    return exit_codes.SUCCESS
