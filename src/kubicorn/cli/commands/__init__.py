"""Subcommand factories.

Each factory takes the :class:`~kubicorn.core.binder.OptionBinder` and
returns a :class:`~kubicorn.core.command.CommandNode`; the prompt
factory takes the registry instead and runs during finalization.
"""

from kubicorn.cli.commands.adopt import adopt_command
from kubicorn.cli.commands.apply import apply_command
from kubicorn.cli.commands.completion import completion_command
from kubicorn.cli.commands.create import create_command
from kubicorn.cli.commands.delete import delete_command
from kubicorn.cli.commands.edit import edit_command
from kubicorn.cli.commands.getconfig import get_config_command
from kubicorn.cli.commands.image import image_command
from kubicorn.cli.commands.list_cmd import list_command
from kubicorn.cli.commands.prompt import prompt_command
from kubicorn.cli.commands.version import version_command

__all__: list[str] = [
    "adopt_command",
    "apply_command",
    "completion_command",
    "create_command",
    "delete_command",
    "edit_command",
    "get_config_command",
    "image_command",
    "list_command",
    "prompt_command",
    "version_command",
]
