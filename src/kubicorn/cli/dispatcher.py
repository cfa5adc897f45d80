"""Argument dispatch over the command tree.

:class:`Dispatcher` turns the finalized tree into an argparse parser
(one sub-parser per node), finds the command an argument vector
addresses, fires the one-time configuration hook and invokes the
matched action.  Every failure surfaces as a
:class:`~kubicorn.exceptions.KubicornError`; argparse never calls
``sys.exit`` except for ``--help``.
"""

from __future__ import annotations

import argparse
import difflib
import os
import sys
from collections.abc import Mapping, Sequence
from typing import Any, NoReturn

from kubicorn.cli import exit_codes
from kubicorn.cli.writers import PlainWriter
from kubicorn.core.command import CommandNode, Invocation, Option
from kubicorn.core.completion import takes_value
from kubicorn.core.options import OptionKind
from kubicorn.core.registry import CommandRegistry
from kubicorn.exceptions import CommandNotFoundError, UsageError
from kubicorn.utils.logging import DEFAULT_VERBOSITY, configure_logging, get_logger

VERBOSITY_OPTION: str = "verbose"
COLOR_OPTION: str = "color"

_ARGS_DEST = "_kubicorn_args"

logger = get_logger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """Parser that raises :class:`UsageError` instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message, hint=f"Run '{self.prog} --help' for usage.")


class Dispatcher:
    """Parses arguments against the tree and runs the matched command.

    Parameters
    ----------
    registry:
        The command registry; finalized on first use.
    environ:
        Environment mapping handed to actions.  Defaults to ``os.environ``.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        *,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.registry: CommandRegistry = registry
        self.environ: Mapping[str, str] = os.environ if environ is None else environ
        self._parser: _ArgumentParser | None = None
        self._parsers: dict[CommandNode, _ArgumentParser] = {}
        self._initialized: bool = False

    # ------------------------------------------------------------------
    # Parser construction
    # ------------------------------------------------------------------

    @property
    def parser(self) -> _ArgumentParser:
        if self._parser is None:
            self.registry.finalize()
            root = self.registry.root
            self._parser = _ArgumentParser(
                prog=root.name,
                description=root.long or root.short,
                formatter_class=argparse.RawDescriptionHelpFormatter,
            )
            self._populate(self._parser, root)
        return self._parser

    def _populate(self, parser: _ArgumentParser, node: CommandNode) -> None:
        self._parsers[node] = parser
        for option in node.visible_options():
            self._add_option(parser, option)

        if node.children:
            subparsers = parser.add_subparsers(title="commands", metavar="<command>")
            for child in node.children:
                usage_tail = _escape(child.usage[len(child.name):].strip())
                child_parser = subparsers.add_parser(
                    child.name,
                    help=child.short,
                    description=child.long or child.short,
                    usage=" ".join(part for part in ("%(prog)s", usage_tail, "[options]") if part),
                    formatter_class=argparse.RawDescriptionHelpFormatter,
                )
                self._populate(child_parser, child)
        elif node.args_metavar:
            parser.add_argument(
                _ARGS_DEST,
                nargs="*",
                metavar=node.args_metavar,
                help=argparse.SUPPRESS,
            )

    @staticmethod
    def _add_option(parser: _ArgumentParser, option: Option) -> None:
        descriptor = option.descriptor
        names = [f"--{descriptor.name}"]
        if descriptor.shorthand:
            names.insert(0, f"-{descriptor.shorthand}")

        kwargs: dict[str, Any] = {
            "dest": descriptor.dest,
            "default": argparse.SUPPRESS,
            "help": _escape(f"{descriptor.help} (default: {descriptor.default})"),
        }
        if descriptor.negatable:
            kwargs["action"] = argparse.BooleanOptionalAction
        elif descriptor.kind is OptionKind.BOOL:
            kwargs["action"] = "store_true"
        elif descriptor.kind is OptionKind.INT:
            kwargs["type"] = int
            kwargs["metavar"] = "INT"
        else:
            kwargs["metavar"] = "STRING"
        parser.add_argument(*names, **kwargs)

    def help_text(self, node: CommandNode) -> str:
        """Full argparse help for *node*."""
        _ = self.parser
        return self._parsers[node].format_help()

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, argv: Sequence[str]) -> CommandNode:
        """Return the node *argv* addresses.

        Option tokens, and the values of options that take one, are
        skipped.  The first other token under a node with children must
        name one of them.

        Raises
        ------
        CommandNotFoundError
            When a token names no child of the current node.
        """
        self.registry.finalize()
        node = self.registry.root
        index = 0
        while index < len(argv):
            token = argv[index]
            if token == "--":
                break
            if token.startswith("-") and token != "-":
                index += 2 if self._consumes_next(node, token) else 1
                continue
            if not node.children:
                break
            child = node.find_child(token)
            if child is None:
                raise CommandNotFoundError(
                    f'unknown command "{token}" for "{node.full_name}"',
                    hint=_suggestion_hint(node, token),
                )
            node = child
            index += 1
        return node

    @staticmethod
    def _consumes_next(node: CommandNode, token: str) -> bool:
        if token.startswith("--"):
            if "=" in token:
                return False
            option = node.lookup_option(token[2:])
            return option is not None and takes_value(option)

        # Clustered shorthands (-fv 3): the first value-taking one swallows
        # the rest of the token, or the next token when it is last.
        cluster = token[1:]
        for index, shorthand in enumerate(cluster):
            option = node.lookup_shorthand(shorthand)
            if option is None:
                return False
            if takes_value(option):
                return index == len(cluster) - 1
        return False

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(self, argv: Sequence[str] | None = None) -> int:
        """Parse *argv*, initialize configuration once, run the command.

        Returns
        -------
        int
            The action's exit code (``None`` from an action means success).
        """
        arguments = list(sys.argv[1:] if argv is None else argv)
        node = self.resolve(arguments)
        namespace = self.parser.parse_args(arguments)

        flags = {
            option.name: getattr(namespace, option.descriptor.dest)
            for option in node.visible_options()
            if hasattr(namespace, option.descriptor.dest)
        }
        args = tuple(getattr(namespace, _ARGS_DEST, None) or ())
        node.validate_args(args)

        self._initialize(flags)

        if node.run is None:
            PlainWriter().write(self.help_text(node))
            return exit_codes.SUCCESS

        store = self.registry.store
        if node.requires_config:
            store.require()

        invocation = Invocation(
            node=node,
            args=args,
            flags=flags,
            config=store,
            dispatcher=self,
            environ=self.environ,
            out=PlainWriter(),
        )
        logger.debug("dispatch.invoke", command=node.full_name, args=list(args))
        code = node.run(invocation)
        return exit_codes.SUCCESS if code is None else code

    def _initialize(self, flags: Mapping[str, Any]) -> None:
        """One-time hook: resolve configuration, then reconfigure logging."""
        if self._initialized:
            return
        self._initialized = True

        store = self.registry.store
        error = store.initialize(flags)
        values = store.as_dict() if error is None else store.fallback(flags)
        configure_logging(
            int(values.get(VERBOSITY_OPTION, DEFAULT_VERBOSITY)),
            color=bool(values.get(COLOR_OPTION, True)),
        )


def _escape(text: str) -> str:
    """Protect ``%`` from argparse's help interpolation."""
    return text.replace("%", "%%")


def _suggestion_hint(node: CommandNode, token: str) -> str:
    names = [child.name for child in node.children]
    matches = difflib.get_close_matches(token, names, n=3, cutoff=0.6)
    if matches:
        return "Did you mean this?\n" + "\n".join(f"    {name}" for name in matches)
    return f"Run '{node.full_name} --help' for usage."
