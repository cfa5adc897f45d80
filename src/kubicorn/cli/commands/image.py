"""``kubicorn image NAME`` — machine images used by a cluster."""

from __future__ import annotations

from kubicorn.cli import exit_codes
from kubicorn.cli.commands._common import cluster_service
from kubicorn.core.binder import OptionBinder
from kubicorn.core.command import CommandNode, Invocation, exact_args


def image_command(binder: OptionBinder) -> CommandNode:
    return CommandNode(
        "image",
        short="List the machine images of a cluster",
        usage="image NAME",
        run=_run_image,
        args_validator=exact_args(1),
        args_metavar="NAME",
    )


def _run_image(invocation: Invocation) -> int:
    for image in cluster_service(invocation).images(invocation.args[0]):
        invocation.out.write(f"{image}\n")
    return exit_codes.SUCCESS
