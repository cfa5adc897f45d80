"""``kubicorn version`` — print version information.

Needs no configuration, so it works even with a broken config file.
"""

from __future__ import annotations

import platform

from kubicorn.cli import exit_codes
from kubicorn.core.binder import OptionBinder
from kubicorn.core.command import CommandNode, Invocation, no_args
from kubicorn.version import __version__


def version_command(binder: OptionBinder) -> CommandNode:
    return CommandNode(
        "version",
        short="Verify Kubicorn version",
        run=_run_version,
        requires_config=False,
        args_validator=no_args,
        args_metavar="",
    )


def _run_version(invocation: Invocation) -> int:
    invocation.out.write(f"kubicorn {__version__}\n")
    invocation.out.write(
        f"{platform.python_implementation()} {platform.python_version()} "
        f"({platform.system()}/{platform.machine()})\n"
    )
    return exit_codes.SUCCESS
