"""The root ``kubicorn`` command.

Run without a subcommand it prints help through the writer selected for
this invocation.  It also carries the shell functions that generated
completion scripts embed.
"""

from __future__ import annotations

from kubicorn.cli import exit_codes
from kubicorn.cli.writers import select_writer
from kubicorn.core.command import CommandNode, Invocation
from kubicorn.exceptions import OptionUnresolvedError

PROG: str = "kubicorn"
FABULOUS_OPTION: str = "fab"

BANNER: str = r"""
                       \
                        \
                         \\
                          \\
                           >\/7
                       _.-(6'  \
                      (=___._/` \
                           )  \ |
                          /   / |
                         /    > /
                        j    < _\
                    _.-' :      ``.
                    \ r=._\        `.
"""

BASH_COMPLETION_FUNCTIONS: str = """
__kubicorn_parse_list()
{
    local kubicorn_out
    if kubicorn_out=$(kubicorn list --no-headers 2>/dev/null); then
        COMPREPLY=( $( compgen -W "${kubicorn_out[*]}" -- "$cur" ) )
    fi
}

__kubicorn_parse_profiles()
{
    local kubicorn_out
    if kubicorn_out=(amazon aws digitalocean do); then
        COMPREPLY=( $( compgen -W "${kubicorn_out[*]}" -- "$cur" ) )
    fi
}

__kubicorn_custom_func()
{
    case ${last_command} in
        kubicorn_apply | kubicorn_create | kubicorn_delete | kubicorn_get-config)
            __kubicorn_parse_list
            return
            ;;
        *)
            ;;
    esac
}
"""


def root_command() -> CommandNode:
    return CommandNode(
        PROG,
        short="Kubernetes cluster management, without any magic",
        long=f"Kubernetes cluster management, without any magic\n{BANNER}",
        run=_run_root,
        requires_config=False,
        args_metavar="",
        completion_function=BASH_COMPLETION_FUNCTIONS,
    )


def _fabulous_requested(invocation: Invocation) -> bool:
    try:
        return bool(invocation.option(FABULOUS_OPTION))
    except OptionUnresolvedError:
        # Configuration failed to load; the flag itself is still usable.
        return bool(invocation.flags.get(FABULOUS_OPTION, False))


def _run_root(invocation: Invocation) -> int:
    writer = select_writer(
        fabulous=_fabulous_requested(invocation),
        environ=invocation.environ,
    )
    writer.write(invocation.dispatcher.help_text(invocation.node))
    return exit_codes.SUCCESS
