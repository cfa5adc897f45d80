"""Declare options on command nodes and link them into the config store.

Every declaration does two things at once: the option becomes
parseable on the node (and, when persistent, on all of its descendants),
and the same name is registered in :class:`~kubicorn.core.config.ConfigStore`
so any component can read the resolved value, whether it came from a
flag, an environment variable or the configuration file.
"""

from __future__ import annotations

from kubicorn.core.command import CommandNode, Option
from kubicorn.core.config import ConfigStore
from kubicorn.core.options import OptionCell, OptionDescriptor, OptionKind
from kubicorn.exceptions import OptionDeclarationError


class OptionBinder:
    """Declares integer, boolean and string options against one store."""

    def __init__(self, store: ConfigStore) -> None:
        self.store: ConfigStore = store

    def declare_int(
        self,
        node: CommandNode,
        name: str,
        shorthand: str | None,
        default: int,
        help: str,
        *,
        persistent: bool = False,
    ) -> OptionCell:
        return self._declare(
            node,
            OptionDescriptor(name, OptionKind.INT, default, shorthand, help, persistent),
        )

    def declare_bool(
        self,
        node: CommandNode,
        name: str,
        shorthand: str | None,
        default: bool,
        help: str,
        *,
        persistent: bool = False,
    ) -> OptionCell:
        return self._declare(
            node,
            OptionDescriptor(name, OptionKind.BOOL, default, shorthand, help, persistent),
        )

    def declare_string(
        self,
        node: CommandNode,
        name: str,
        shorthand: str | None,
        default: str,
        help: str,
        *,
        persistent: bool = False,
    ) -> OptionCell:
        return self._declare(
            node,
            OptionDescriptor(name, OptionKind.STRING, default, shorthand, help, persistent),
        )

    # ------------------------------------------------------------------

    def _declare(self, node: CommandNode, descriptor: OptionDescriptor) -> OptionCell:
        self._check_name(node, descriptor)
        self._check_shorthand(node, descriptor)

        cell = OptionCell(descriptor)
        self.store.register(cell)
        node.options[descriptor.name] = Option(descriptor, cell)
        return cell

    @staticmethod
    def _check_name(node: CommandNode, descriptor: OptionDescriptor) -> None:
        name = descriptor.name
        if not name or name.startswith("-") or any(ch.isspace() for ch in name):
            raise OptionDeclarationError(f"Invalid option name {name!r}.")
        if name == "help":
            raise OptionDeclarationError("Option name 'help' is reserved.")
        for other in node.root.walk():
            if name in other.options:
                raise OptionDeclarationError(
                    f"Option '{name}' is already declared on '{other.full_name}'.",
                )

    @staticmethod
    def _check_shorthand(node: CommandNode, descriptor: OptionDescriptor) -> None:
        shorthand = descriptor.shorthand
        if shorthand is None:
            return
        if len(shorthand) != 1 or not shorthand.isalnum():
            raise OptionDeclarationError(
                f"Shorthand {shorthand!r} for option '{descriptor.name}' "
                "must be a single letter or digit.",
            )
        if shorthand == "h":
            raise OptionDeclarationError("Shorthand 'h' is reserved for help.")

        # The new option is visible on the node and, if persistent, below it.
        scope: list[CommandNode] = list(node.walk()) if descriptor.persistent else [node]
        for member in scope:
            clash: Option | None = member.lookup_shorthand(shorthand)
            if clash is not None:
                raise OptionDeclarationError(
                    f"Shorthand '-{shorthand}' for '{descriptor.name}' is already "
                    f"used by '{clash.name}' on '{member.full_name}'.",
                )

