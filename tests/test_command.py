"""Tests for the command tree, option declaration and the registry.

Covers core/command.py, core/binder.py and core/registry.py.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from kubicorn.core.binder import OptionBinder
from kubicorn.core.command import (
    BASH_COMP_CUSTOM,
    AnnotationOutcome,
    CommandNode,
    annotate,
    exact_args,
    maximum_args,
    no_args,
)
from kubicorn.core.config import ConfigStore
from kubicorn.core.registry import CommandRegistry
from kubicorn.exceptions import CommandTreeError, OptionDeclarationError, UsageError


@pytest.fixture()
def store() -> ConfigStore:
    return ConfigStore(Path("kubicorn.cfg"), loader=MagicMock(return_value={}), environ={})


@pytest.fixture()
def binder(store: ConfigStore) -> OptionBinder:
    return OptionBinder(store)


@pytest.fixture()
def root(binder: OptionBinder) -> CommandNode:
    node = CommandNode("kubicorn", short="root")
    binder.declare_int(node, "verbose", "v", 3, "Log level", persistent=True)
    return node


# ---------------------------------------------------------------------------
# Tree structure
# ---------------------------------------------------------------------------

class TestTree:
    def test_full_name_and_usage(self) -> None:
        root = CommandNode("kubicorn")
        create = root.add_child(CommandNode("create", usage="create NAME"))
        assert create.full_name == "kubicorn create"
        assert create.full_usage == "kubicorn create NAME"
        assert create.root is root
        assert create.path == (root, create)

    def test_duplicate_child_rejected(self) -> None:
        root = CommandNode("kubicorn")
        root.add_child(CommandNode("list"))
        with pytest.raises(CommandTreeError, match="already has"):
            root.add_child(CommandNode("list"))

    def test_child_with_parent_rejected(self) -> None:
        first, second = CommandNode("a"), CommandNode("b")
        child = first.add_child(CommandNode("c"))
        with pytest.raises(CommandTreeError):
            second.add_child(child)

    def test_finalized_tree_is_frozen(self) -> None:
        root = CommandNode("kubicorn")
        child = root.add_child(CommandNode("list"))
        root.finalize()
        assert child.finalized
        with pytest.raises(CommandTreeError, match="finalized"):
            child.add_child(CommandNode("more"))

    @pytest.mark.parametrize("name", ["", "two words", "-dash"])
    def test_invalid_names(self, name: str) -> None:
        with pytest.raises(CommandTreeError):
            CommandNode(name)

    def test_walk_is_depth_first(self) -> None:
        root = CommandNode("r")
        a = root.add_child(CommandNode("a"))
        a.add_child(CommandNode("a1"))
        root.add_child(CommandNode("b"))
        assert [node.name for node in root.walk()] == ["r", "a", "a1", "b"]

    def test_runnable(self) -> None:
        assert not CommandNode("x").runnable
        assert CommandNode("x", run=lambda inv: 0).runnable


# ---------------------------------------------------------------------------
# Positional validators
# ---------------------------------------------------------------------------

class TestValidators:
    def test_no_args(self) -> None:
        node = CommandNode("list")
        no_args(node, [])
        with pytest.raises(UsageError, match='unknown argument "x"'):
            no_args(node, ["x"])

    def test_exact_args(self) -> None:
        node = CommandNode("create", usage="create NAME")
        exact_args(1)(node, ["a"])
        with pytest.raises(UsageError, match="accepts 1 arg"):
            exact_args(1)(node, [])

    def test_maximum_args(self) -> None:
        node = CommandNode("completion")
        maximum_args(1)(node, [])
        with pytest.raises(UsageError, match="at most 1"):
            maximum_args(1)(node, ["bash", "zsh"])


# ---------------------------------------------------------------------------
# Option declaration
# ---------------------------------------------------------------------------

class TestBinder:
    def test_declaration_registers_in_store(
        self, binder: OptionBinder, store: ConfigStore, root: CommandNode
    ) -> None:
        cell = store.cell("verbose")
        assert root.options["verbose"].cell is cell
        assert cell.descriptor.persistent

    def test_persistent_option_visible_to_descendants(
        self, binder: OptionBinder, root: CommandNode
    ) -> None:
        child = root.add_child(CommandNode("create"))
        binder.declare_string(child, "profile", "p", "amazon", "Profile")
        assert [option.name for option in child.visible_options()] == ["verbose", "profile"]
        assert child.lookup_shorthand("v") is root.options["verbose"]
        assert [option.name for option in root.visible_options()] == ["verbose"]

    def test_local_option_not_inherited(self, binder: OptionBinder, root: CommandNode) -> None:
        child = root.add_child(CommandNode("create"))
        grandchild = child.add_child(CommandNode("deep"))
        binder.declare_bool(child, "purge", None, False, "Purge")
        assert grandchild.lookup_option("purge") is None

    def test_duplicate_name_anywhere_in_tree(
        self, binder: OptionBinder, root: CommandNode
    ) -> None:
        child = root.add_child(CommandNode("create"))
        with pytest.raises(OptionDeclarationError, match="already declared"):
            binder.declare_int(child, "verbose", None, 1, "again")

    def test_help_is_reserved(self, binder: OptionBinder, root: CommandNode) -> None:
        with pytest.raises(OptionDeclarationError, match="reserved"):
            binder.declare_bool(root, "help", None, False, "")

    def test_h_shorthand_is_reserved(self, binder: OptionBinder, root: CommandNode) -> None:
        with pytest.raises(OptionDeclarationError, match="reserved"):
            binder.declare_bool(root, "hidden", "h", False, "")

    @pytest.mark.parametrize("shorthand", ["ab", "-", ""])
    def test_bad_shorthand(
        self, binder: OptionBinder, root: CommandNode, shorthand: str
    ) -> None:
        with pytest.raises(OptionDeclarationError):
            binder.declare_bool(root, "other", shorthand, False, "")

    def test_shorthand_clash_with_inherited(
        self, binder: OptionBinder, root: CommandNode
    ) -> None:
        child = root.add_child(CommandNode("create"))
        with pytest.raises(OptionDeclarationError, match="-v"):
            binder.declare_bool(child, "validate", "v", False, "")

    @pytest.mark.parametrize("name", ["", "--x", "two words"])
    def test_invalid_option_names(
        self, binder: OptionBinder, root: CommandNode, name: str
    ) -> None:
        with pytest.raises(OptionDeclarationError, match="Invalid option name"):
            binder.declare_bool(root, name, None, False, "")


# ---------------------------------------------------------------------------
# Completion annotations
# ---------------------------------------------------------------------------

class TestAnnotate:
    def test_attach(self, binder: OptionBinder, root: CommandNode) -> None:
        child = root.add_child(CommandNode("create"))
        binder.declare_string(child, "profile", "p", "amazon", "Profile")
        outcome = annotate(child, "profile", "__kubicorn_parse_profiles")
        assert outcome is AnnotationOutcome.ATTACHED
        assert child.options["profile"].annotations == {
            BASH_COMP_CUSTOM: ["__kubicorn_parse_profiles"],
        }

    def test_append_to_existing(self, binder: OptionBinder, root: CommandNode) -> None:
        annotate(root, "verbose", "first")
        annotate(root, "verbose", "second")
        assert root.options["verbose"].annotations[BASH_COMP_CUSTOM] == ["first", "second"]

    def test_unknown_flag_is_a_no_op(self, root: CommandNode) -> None:
        before = {name: dict(opt.annotations) for name, opt in root.options.items()}
        assert annotate(root, "nope", "fn") is AnnotationOutcome.OPTION_NOT_FOUND
        assert {name: dict(opt.annotations) for name, opt in root.options.items()} == before

    def test_allowed_after_finalize(self, root: CommandNode) -> None:
        root.finalize()
        assert annotate(root, "verbose", "fn") is AnnotationOutcome.ATTACHED


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class TestRegistry:
    def test_late_factory_sees_all_earlier_commands(
        self, root: CommandNode, store: ConfigStore
    ) -> None:
        registry = CommandRegistry(root, store)
        registry.register(CommandNode("list"))
        seen: list[str] = []

        def late(reg: CommandRegistry) -> CommandNode:
            seen.extend(node.name for node in reg.commands())
            return CommandNode("prompt")

        registry.register_late(late)
        registry.register(CommandNode("version"))
        registry.finalize()

        assert seen == ["list", "version"]
        assert [node.name for node in registry.commands()] == ["list", "version", "prompt"]
        assert registry.finalized
        assert root.finalized

    def test_finalize_is_idempotent(self, root: CommandNode, store: ConfigStore) -> None:
        registry = CommandRegistry(root, store)
        factory = MagicMock(return_value=CommandNode("prompt"))
        registry.register_late(factory)
        registry.finalize()
        registry.finalize()
        factory.assert_called_once_with(registry)

    def test_no_registration_after_finalize(
        self, root: CommandNode, store: ConfigStore
    ) -> None:
        registry = CommandRegistry(root, store)
        registry.finalize()
        with pytest.raises(CommandTreeError):
            registry.register(CommandNode("late"))
        with pytest.raises(CommandTreeError):
            registry.register_late(lambda reg: CommandNode("later"))

    def test_detached_shorthand_clash_detected(
        self, binder: OptionBinder, root: CommandNode, store: ConfigStore
    ) -> None:
        registry = CommandRegistry(root, store)
        node = CommandNode("create")
        binder.declare_bool(node, "validate", "v", False, "")
        with pytest.raises(OptionDeclarationError, match="clashes"):
            registry.register(node)

    def test_find(self, root: CommandNode, store: ConfigStore) -> None:
        registry = CommandRegistry(root, store)
        listed = registry.register(CommandNode("list"))
        assert registry.find("list") is listed
        assert registry.find("nope") is None
