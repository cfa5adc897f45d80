"""``kubicorn create NAME`` — write a new cluster state from a profile."""

from __future__ import annotations

from kubicorn.cli import exit_codes
from kubicorn.cli.commands._common import cluster_service
from kubicorn.cli.console import console
from kubicorn.core.binder import OptionBinder
from kubicorn.core.command import CommandNode, Invocation, annotate, exact_args
from kubicorn.core.profiles import DEFAULT_PROFILE, profile_names

PROFILE_OPTION: str = "profile"


def create_command(binder: OptionBinder) -> CommandNode:
    node = CommandNode(
        "create",
        short="Create a Kubicorn API model from a profile",
        long=(
            "Create a cluster state from a starter profile.\n\n"
            f"Profiles: {', '.join(profile_names())}.\n"
            "Nothing is created in the cloud until 'kubicorn apply NAME'."
        ),
        usage="create NAME",
        run=_run_create,
        args_validator=exact_args(1),
        args_metavar="NAME",
    )
    binder.declare_string(
        node, PROFILE_OPTION, "p", DEFAULT_PROFILE, "Profile to build the cluster from",
    )
    annotate(node, PROFILE_OPTION, "__kubicorn_parse_profiles")
    return node


def _run_create(invocation: Invocation) -> int:
    name = invocation.args[0]
    cluster = cluster_service(invocation).create(name, invocation.option(PROFILE_OPTION))
    console.print(
        f"[bold green]Created[/bold green] cluster [bold]{cluster.name}[/bold] "
        f"({cluster.cloud}, {cluster.location})."
    )
    console.print(f"Run [bold]kubicorn apply {cluster.name}[/bold] to provision it.")
    return exit_codes.SUCCESS
