"""Two-phase command registry.

Phase one registers every ordinary subcommand.  Phase two,
:meth:`CommandRegistry.finalize`, runs *late factories*: commands that
need to see the complete tree (an interactive prompt listing every
command, for example).  After finalization the tree is frozen.
"""

from __future__ import annotations

from collections.abc import Callable

from kubicorn.core.command import CommandNode
from kubicorn.core.config import ConfigStore
from kubicorn.exceptions import CommandTreeError, OptionDeclarationError
from kubicorn.utils.logging import get_logger

LateFactory = Callable[["CommandRegistry"], CommandNode]

logger = get_logger(__name__)


class CommandRegistry:
    """Owns the root node, its subcommands and the shared config store."""

    def __init__(self, root: CommandNode, store: ConfigStore) -> None:
        self.root: CommandNode = root
        self.store: ConfigStore = store
        self._late: list[LateFactory] = []
        self._finalized: bool = False

    @property
    def finalized(self) -> bool:
        return self._finalized

    def register(self, node: CommandNode) -> CommandNode:
        """Add *node* as a top-level subcommand."""
        if self._finalized:
            raise CommandTreeError(
                f"Cannot register '{node.name}': the registry is finalized.",
            )
        self._check_inherited_shorthands(node)
        self.root.add_child(node)
        return node

    def register_late(self, factory: LateFactory) -> None:
        """Queue *factory* to build a command once all others exist."""
        if self._finalized:
            raise CommandTreeError("Cannot queue a late command: the registry is finalized.")
        self._late.append(factory)

    def finalize(self) -> None:
        """Run late factories in queue order, then freeze the tree."""
        if self._finalized:
            return
        for factory in self._late:
            self.register(factory(self))
        self._late.clear()
        self.root.finalize()
        self._finalized = True
        logger.debug("registry.finalized", commands=[node.name for node in self.commands()])

    def commands(self) -> tuple[CommandNode, ...]:
        """Top-level subcommands in registration order."""
        return self.root.children

    def find(self, name: str) -> CommandNode | None:
        return self.root.find_child(name)

    def _check_inherited_shorthands(self, node: CommandNode) -> None:
        # Options on *node* were declared before it had a parent, so the
        # root's persistent shorthands were not visible to the binder.
        taken = {
            option.descriptor.shorthand: option.name
            for option in self.root.visible_options()
            if option.descriptor.persistent and option.descriptor.shorthand
        }
        for member in node.walk():
            for option in member.options.values():
                owner = taken.get(option.descriptor.shorthand)
                if owner is not None:
                    raise OptionDeclarationError(
                        f"Shorthand '-{option.descriptor.shorthand}' for "
                        f"'{option.name}' on '{member.name}' clashes with "
                        f"persistent option '{owner}'.",
                    )
