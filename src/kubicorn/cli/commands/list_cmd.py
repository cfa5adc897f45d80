"""``kubicorn list`` — names of every cluster in the state store.

With ``--no-headers`` the output is one bare name per line, which is
what the shell completion helpers consume.
"""

from __future__ import annotations

from kubicorn.cli import exit_codes
from kubicorn.cli.commands._common import cluster_service
from kubicorn.core.binder import OptionBinder
from kubicorn.core.command import CommandNode, Invocation, no_args

NO_HEADERS_OPTION: str = "no-headers"


def list_command(binder: OptionBinder) -> CommandNode:
    node = CommandNode(
        "list",
        short="List available states",
        run=_run_list,
        args_validator=no_args,
        args_metavar="",
    )
    binder.declare_bool(node, NO_HEADERS_OPTION, "n", False, "Print names only")
    return node


def _run_list(invocation: Invocation) -> int:
    names = cluster_service(invocation).names()
    if not invocation.option(NO_HEADERS_OPTION):
        invocation.out.write("NAME\n")
    for name in names:
        invocation.out.write(f"{name}\n")
    return exit_codes.SUCCESS
