"""``kubicorn delete NAME`` — destroy a cluster and drop its state."""

from __future__ import annotations

from kubicorn.cli import exit_codes
from kubicorn.cli.commands._common import cluster_service
from kubicorn.cli.console import console
from kubicorn.core.binder import OptionBinder
from kubicorn.core.command import CommandNode, Invocation, exact_args

PURGE_OPTION: str = "purge"


def delete_command(binder: OptionBinder) -> CommandNode:
    node = CommandNode(
        "delete",
        short="Delete a Kubernetes cluster",
        long=(
            "Destroy the cloud resources of a cluster through its provider plugin,\n"
            "then remove its state.  --purge only removes the local state."
        ),
        usage="delete NAME",
        run=_run_delete,
        args_validator=exact_args(1),
        args_metavar="NAME",
    )
    binder.declare_bool(
        node, PURGE_OPTION, None, False, "Remove local state without contacting the cloud",
    )
    return node


def _run_delete(invocation: Invocation) -> int:
    name = invocation.args[0]
    purge = bool(invocation.option(PURGE_OPTION))
    cluster_service(invocation).delete(name, purge=purge)
    action = "Purged" if purge else "Deleted"
    console.print(f"[bold green]{action}[/bold green] cluster [bold]{name}[/bold].")
    return exit_codes.SUCCESS
