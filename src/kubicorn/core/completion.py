"""Shell completion script generation from the command tree.

The generated bash script walks the words typed so far to find the
deepest matching command, then completes, in order:

1. the value of a flag annotated with a custom completion function;
2. flag names, when the current word starts with ``-``;
3. candidates from the root's custom completion function, if any;
4. subcommand names.

zsh reuses the bash script through ``bashcompinit``.
"""

from __future__ import annotations

from kubicorn.core.command import BASH_COMP_CUSTOM, CommandNode, Option
from kubicorn.core.options import OptionKind

SUPPORTED_SHELLS: tuple[str, ...] = ("bash", "zsh")

_MAIN_FUNCTION = """\
_%(prog)s()
{
    local cur prev last_command word c
    cur="${COMP_WORDS[COMP_CWORD]}"
    prev="${COMP_WORDS[COMP_CWORD-1]}"
    last_command="%(prog)s"
    c=1
    while [[ ${c} -lt ${COMP_CWORD} ]]; do
        word="${COMP_WORDS[c]}"
        case "${last_command}:${word}" in
%(transitions)s
        esac
        c=$((c + 1))
    done
    COMPREPLY=()

    if __%(prog)s_complete_flag_value; then
        return
    fi

    if [[ "${cur}" == -* ]]; then
        case "${last_command}" in
%(flag_words)s
        esac
        return
    fi

    if declare -F __%(prog)s_custom_func >/dev/null; then
        __%(prog)s_custom_func
        if [[ ${#COMPREPLY[@]} -gt 0 ]]; then
            return
        fi
    fi

    case "${last_command}" in
%(command_words)s
    esac
}

complete -o default -F _%(prog)s %(prog)s
"""


def command_id(node: CommandNode) -> str:
    """Identifier of *node* inside the script (``kubicorn_create``)."""
    return "_".join(member.name for member in node.path)


def takes_value(option: Option) -> bool:
    return option.descriptor.kind is not OptionKind.BOOL


def option_words(option: Option) -> list[str]:
    """Every spelling argparse accepts for *option*."""
    descriptor = option.descriptor
    words = [f"--{descriptor.name}"]
    if descriptor.negatable:
        words.append(f"--no-{descriptor.name}")
    if descriptor.shorthand:
        words.append(f"-{descriptor.shorthand}")
    return words


def _value_flag_words(option: Option) -> list[str]:
    words = [f"--{option.descriptor.name}"]
    if option.descriptor.shorthand:
        words.append(f"-{option.descriptor.shorthand}")
    return words


def _case_arm(pattern: str, body: list[str], indent: str = "            ") -> list[str]:
    return [
        f"{indent}{pattern})",
        *(f"{indent}    {line}" for line in body),
        f"{indent}    ;;",
    ]


def _flag_value_function(root: CommandNode) -> list[str]:
    prog = root.name
    lines = [f"__{prog}_complete_flag_value()", "{", '    case "${last_command}:${prev}" in']
    for node in root.walk():
        for option in node.visible_options():
            hints = option.annotations.get(BASH_COMP_CUSTOM)
            if not hints or not takes_value(option):
                continue
            pattern = " | ".join(
                f"{command_id(node)}:{word}" for word in _value_flag_words(option)
            )
            lines.extend(_case_arm(pattern, [*hints, "return 0"], indent="        "))
    lines.extend(["    esac", "    return 1", "}"])
    return lines


def _transitions(root: CommandNode) -> str:
    lines: list[str] = []
    for node in root.walk():
        for child in node.children:
            lines.extend(
                _case_arm(
                    f"{command_id(node)}:{child.name}",
                    [f'last_command="{command_id(child)}"'],
                ),
            )
    return "\n".join(lines)


def _flag_words(root: CommandNode) -> str:
    lines: list[str] = []
    for node in root.walk():
        words: list[str] = []
        for option in node.visible_options():
            words.extend(option_words(option))
        words.extend(["--help", "-h"])
        lines.extend(
            _case_arm(
                command_id(node),
                [f'COMPREPLY=( $(compgen -W "{" ".join(words)}" -- "${{cur}}") )'],
            ),
        )
    return "\n".join(lines)


def _command_words(root: CommandNode) -> str:
    lines: list[str] = []
    for node in root.walk():
        if not node.children:
            continue
        names = " ".join(child.name for child in node.children)
        lines.extend(
            _case_arm(
                command_id(node),
                [f'COMPREPLY=( $(compgen -W "{names}" -- "${{cur}}") )'],
            ),
        )
    return "\n".join(lines)


def generate_bash(root: CommandNode) -> str:
    """Return a bash completion script for the tree under *root*."""
    prog = root.name
    parts: list[str] = [f"# bash completion for {prog}", ""]
    if root.completion_function:
        parts.extend([root.completion_function.strip("\n"), ""])
    parts.extend(_flag_value_function(root))
    parts.append("")
    parts.append(
        _MAIN_FUNCTION
        % {
            "prog": prog,
            "transitions": _transitions(root),
            "flag_words": _flag_words(root),
            "command_words": _command_words(root),
        },
    )
    return "\n".join(parts)


def generate_zsh(root: CommandNode) -> str:
    """Return a zsh completion script wrapping the bash one."""
    return "\n".join(
        [
            f"#compdef {root.name}",
            "",
            "autoload -U +X bashcompinit && bashcompinit",
            "",
            generate_bash(root),
        ],
    )


def generate(root: CommandNode, shell: str) -> str:
    if shell == "zsh":
        return generate_zsh(root)
    return generate_bash(root)
