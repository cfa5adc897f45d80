"""Assembly of the kubicorn command tree.

:func:`build_registry` creates the config store, declares the
persistent options on the root, registers the fixed set of top-level
subcommands, queues the prompt as a late command and finalizes.
Nothing here is module-level state: every call builds a fresh tree and
a fresh store.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from pathlib import Path

from kubicorn.cli.commands import (
    adopt_command,
    apply_command,
    completion_command,
    create_command,
    delete_command,
    edit_command,
    get_config_command,
    image_command,
    list_command,
    prompt_command,
    version_command,
)
from kubicorn.cli.commands._common import STATE_STORE_OPTION
from kubicorn.cli.dispatcher import COLOR_OPTION, VERBOSITY_OPTION
from kubicorn.cli.root import FABULOUS_OPTION, root_command
from kubicorn.core.binder import OptionBinder
from kubicorn.core.command import CommandNode
from kubicorn.core.config import ConfigStore
from kubicorn.core.registry import CommandRegistry
from kubicorn.infra.config_file import read_config_file
from kubicorn.utils.logging import DEFAULT_VERBOSITY
from kubicorn.utils.paths import config_path_from_env, default_config_path, default_state_store_path

CommandFactory = Callable[[OptionBinder], CommandNode]

TOP_LEVEL_COMMANDS: tuple[CommandFactory, ...] = (
    adopt_command,
    apply_command,
    completion_command,
    create_command,
    delete_command,
    edit_command,
    get_config_command,
    image_command,
    list_command,
    version_command,
)


def build_registry(
    *,
    environ: Mapping[str, str] | None = None,
    config_path: Path | None = None,
) -> CommandRegistry:
    """Build and finalize the full command tree.

    Parameters
    ----------
    environ:
        Environment for the ``KUBICORN_*`` overlay; ``os.environ`` when
        ``None``.
    config_path:
        Explicit configuration file.  When omitted, ``KUBICORN_CONFIG_FILE``
        is honoured, then the per-user default.  A missing file is only
        an error when the path was chosen explicitly.
    """
    environ = os.environ if environ is None else environ
    explicit = config_path or config_path_from_env(environ)
    store = ConfigStore(
        explicit or default_config_path(),
        loader=read_config_file,
        environ=environ,
        path_required=explicit is not None,
    )
    binder = OptionBinder(store)

    root = root_command()
    binder.declare_int(
        root, VERBOSITY_OPTION, "v", DEFAULT_VERBOSITY,
        "Log level (0 silent .. 4 debug)", persistent=True,
    )
    binder.declare_bool(root, COLOR_OPTION, "C", True, "Toggle colorized logs", persistent=True)
    binder.declare_bool(root, FABULOUS_OPTION, "f", False, "Toggle fabulous output", persistent=True)
    binder.declare_string(
        root, STATE_STORE_OPTION, "S", str(default_state_store_path()),
        "Directory holding cluster state files", persistent=True,
    )

    registry = CommandRegistry(root, store)
    for factory in TOP_LEVEL_COMMANDS:
        registry.register(factory(binder))
    registry.register_late(prompt_command)
    registry.finalize()
    return registry
