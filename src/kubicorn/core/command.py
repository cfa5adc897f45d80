"""Command tree model: nodes, declared options and completion annotations.

A :class:`CommandNode` is one addressable unit of command-line
functionality.  Nodes are assembled into a tree rooted at a single
top-level node before argument parsing.  Once the tree is finalized no
child can be added; completion annotations may still be attached.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

from kubicorn.core.options import OptionCell, OptionDescriptor
from kubicorn.exceptions import CommandTreeError, UsageError

if TYPE_CHECKING:
    from kubicorn.core.config import ConfigStore

BASH_COMP_CUSTOM: str = "bash_completion_custom"
"""Annotation key listing shell functions that complete a flag's value."""


class OutputWriter(Protocol):
    """Anything text can be written to (stdout, a decorated renderer)."""

    def write(self, text: str) -> Any:
        ...  # pragma: no cover


class CommandRunner(Protocol):
    """What an action may ask of the dispatcher that invoked it."""

    def execute(self, argv: Sequence[str] | None = None) -> int:
        ...  # pragma: no cover

    def help_text(self, node: CommandNode) -> str:
        ...  # pragma: no cover


@dataclass(frozen=True)
class Invocation:
    """Context handed to a command action."""

    node: CommandNode
    args: tuple[str, ...]
    """Remaining positional arguments."""

    flags: Mapping[str, Any]
    """Options explicitly supplied on the command line, by name."""

    config: ConfigStore
    dispatcher: CommandRunner
    environ: Mapping[str, str]
    out: OutputWriter

    def option(self, name: str) -> Any:
        """Resolved value of an option visible to this node.

        A flag supplied on this command line wins over the stored value,
        which may have been resolved by an earlier dispatch in the same
        process (the interactive prompt re-dispatches).
        """
        if name in self.flags:
            return self.flags[name]
        declared = self.node.lookup_option(name)
        if declared is None:
            return self.config.get(name)
        return declared.cell.value


Action = Callable[[Invocation], "int | None"]
ArgsValidator = Callable[["CommandNode", Sequence[str]], None]


@dataclass
class Option:
    """An option attached to a node, with its completion annotations."""

    descriptor: OptionDescriptor
    cell: OptionCell
    annotations: dict[str, list[str]] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.descriptor.name


class AnnotationOutcome(Enum):
    ATTACHED = "attached"
    OPTION_NOT_FOUND = "option-not-found"


# ---------------------------------------------------------------------------
# Positional argument validators
# ---------------------------------------------------------------------------

def no_args(node: CommandNode, args: Sequence[str]) -> None:
    if args:
        raise UsageError(
            f'unknown argument "{args[0]}" for "{node.full_name}"',
            hint=f"'{node.full_name}' takes no arguments.",
        )


def exact_args(count: int) -> ArgsValidator:
    """Require exactly *count* positional arguments."""

    def validate(node: CommandNode, args: Sequence[str]) -> None:
        if len(args) != count:
            raise UsageError(
                f"accepts {count} arg(s), received {len(args)}",
                hint=f"Usage: {node.full_usage}",
            )

    return validate


def maximum_args(count: int) -> ArgsValidator:
    """Accept at most *count* positional arguments."""

    def validate(node: CommandNode, args: Sequence[str]) -> None:
        if len(args) > count:
            raise UsageError(
                f"accepts at most {count} arg(s), received {len(args)}",
                hint=f"Usage: {node.full_usage}",
            )

    return validate


# ---------------------------------------------------------------------------
# Command node
# ---------------------------------------------------------------------------

class CommandNode:
    """A named, invocable unit of the command tree.

    Parameters
    ----------
    name:
        Unique among siblings.
    short, long:
        One-line and long help text.
    usage:
        Usage line without the parent path (``"create NAME"``).  Defaults
        to *name*.
    run:
        Action invoked with an :class:`Invocation`; ``None`` renders help.
    requires_config:
        When ``True`` the action refuses to run if configuration failed
        to load.
    args_validator:
        Checks positional arguments before the action runs.
    args_metavar:
        Placeholder shown for positional arguments in help output.
    completion_function:
        Shell source emitted verbatim into generated completion scripts.
    """

    def __init__(
        self,
        name: str,
        *,
        short: str = "",
        long: str = "",
        usage: str | None = None,
        run: Action | None = None,
        requires_config: bool = True,
        args_validator: ArgsValidator | None = None,
        args_metavar: str = "ARGS",
        completion_function: str | None = None,
    ) -> None:
        if not name or any(ch.isspace() for ch in name) or name.startswith("-"):
            raise CommandTreeError(f"Invalid command name {name!r}.")
        self.name: str = name
        self.short: str = short
        self.long: str = long
        self.usage: str = usage or name
        self.run: Action | None = run
        self.requires_config: bool = requires_config
        self.args_validator: ArgsValidator | None = args_validator
        self.args_metavar: str = args_metavar
        self.completion_function: str | None = completion_function
        self.parent: CommandNode | None = None
        self.options: dict[str, Option] = {}
        self._children: dict[str, CommandNode] = {}
        self._finalized: bool = False

    def __repr__(self) -> str:
        return f"CommandNode({self.full_name!r})"

    # ------------------------------------------------------------------
    # Tree structure
    # ------------------------------------------------------------------

    @property
    def children(self) -> tuple[CommandNode, ...]:
        return tuple(self._children.values())

    @property
    def root(self) -> CommandNode:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def path(self) -> tuple[CommandNode, ...]:
        """Nodes from the root down to this one."""
        chain: list[CommandNode] = []
        node: CommandNode | None = self
        while node is not None:
            chain.append(node)
            node = node.parent
        return tuple(reversed(chain))

    @property
    def full_name(self) -> str:
        return " ".join(node.name for node in self.path)

    @property
    def full_usage(self) -> str:
        prefix = " ".join(node.name for node in self.path[:-1])
        return f"{prefix} {self.usage}".strip()

    @property
    def runnable(self) -> bool:
        return self.run is not None

    @property
    def finalized(self) -> bool:
        return self._finalized

    def add_child(self, child: CommandNode) -> CommandNode:
        """Attach *child* and return it."""
        if self._finalized:
            raise CommandTreeError(
                f"Cannot add '{child.name}': '{self.full_name}' is finalized.",
            )
        if child.name in self._children:
            raise CommandTreeError(
                f"'{self.full_name}' already has a subcommand named '{child.name}'.",
            )
        if child.parent is not None:
            raise CommandTreeError(f"'{child.name}' already belongs to a tree.")
        child.parent = self
        self._children[child.name] = child
        return child

    def find_child(self, name: str) -> CommandNode | None:
        return self._children.get(name)

    def walk(self) -> Iterator[CommandNode]:
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self._children.values():
            yield from child.walk()

    def finalize(self) -> None:
        """Freeze this subtree against further structural changes."""
        for node in self.walk():
            node._finalized = True

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    def inherited_options(self) -> list[Option]:
        """Persistent options declared on ancestors."""
        found: list[Option] = []
        for ancestor in self.path[:-1]:
            found.extend(opt for opt in ancestor.options.values() if opt.descriptor.persistent)
        return found

    def visible_options(self) -> list[Option]:
        """Inherited persistent options followed by this node's own."""
        return [*self.inherited_options(), *self.options.values()]

    def lookup_option(self, name: str) -> Option | None:
        """Find an option by long name among the visible options."""
        for option in self.visible_options():
            if option.name == name:
                return option
        return None

    def lookup_shorthand(self, shorthand: str) -> Option | None:
        for option in self.visible_options():
            if option.descriptor.shorthand == shorthand:
                return option
        return None

    def validate_args(self, args: Sequence[str]) -> None:
        if self.args_validator is not None:
            self.args_validator(self, args)


# ---------------------------------------------------------------------------
# Completion annotations
# ---------------------------------------------------------------------------

def annotate(node: CommandNode, flag: str, completion: str) -> AnnotationOutcome:
    """Advertise that *flag* on *node* completes through *completion*.

    *completion* names a shell function from the root's completion
    source.  An unknown *flag* is left alone and reported as
    :attr:`AnnotationOutcome.OPTION_NOT_FOUND`.
    """
    option = node.lookup_option(flag)
    if option is None:
        return AnnotationOutcome.OPTION_NOT_FOUND
    option.annotations.setdefault(BASH_COMP_CUSTOM, []).append(completion)
    return AnnotationOutcome.ATTACHED
