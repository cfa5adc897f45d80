"""``kubicorn completion SHELL`` — print a shell completion script.

Load it with ``source <(kubicorn completion bash)``, or for zsh
``source <(kubicorn completion zsh)``.
"""

from __future__ import annotations

from kubicorn.cli import exit_codes
from kubicorn.core.binder import OptionBinder
from kubicorn.core.command import CommandNode, Invocation, exact_args
from kubicorn.core.completion import SUPPORTED_SHELLS, generate
from kubicorn.exceptions import UsageError


def completion_command(binder: OptionBinder) -> CommandNode:
    return CommandNode(
        "completion",
        short="Generate shell completion code",
        long=(
            "Print shell completion code for bash or zsh.\n\n"
            "    source <(kubicorn completion bash)\n"
            "    source <(kubicorn completion zsh)"
        ),
        usage="completion SHELL",
        run=_run_completion,
        requires_config=False,
        args_validator=exact_args(1),
        args_metavar="SHELL",
    )


def _run_completion(invocation: Invocation) -> int:
    shell = invocation.args[0]
    if shell not in SUPPORTED_SHELLS:
        raise UsageError(
            f"Unsupported shell '{shell}'.",
            hint=f"Choose one of: {', '.join(SUPPORTED_SHELLS)}.",
        )
    invocation.out.write(generate(invocation.node.root, shell))
    return exit_codes.SUCCESS
