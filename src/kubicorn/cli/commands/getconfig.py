"""``kubicorn get-config NAME`` — print a cluster's state as YAML."""

from __future__ import annotations

import yaml

from kubicorn.cli import exit_codes
from kubicorn.cli.commands._common import cluster_service
from kubicorn.core.binder import OptionBinder
from kubicorn.core.command import CommandNode, Invocation, exact_args


def get_config_command(binder: OptionBinder) -> CommandNode:
    return CommandNode(
        "get-config",
        short="Print the state of a cluster",
        usage="get-config NAME",
        run=_run_get_config,
        args_validator=exact_args(1),
        args_metavar="NAME",
    )


def _run_get_config(invocation: Invocation) -> int:
    document = cluster_service(invocation).document(invocation.args[0])
    invocation.out.write(yaml.safe_dump(document, sort_keys=False))
    return exit_codes.SUCCESS
