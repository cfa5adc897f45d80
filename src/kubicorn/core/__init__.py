"""Core layer — command tree, option resolution and cluster logic.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O; file reading is injected.
* No imports from ``cli`` or ``infra``.
"""

from kubicorn.core.binder import OptionBinder
from kubicorn.core.command import AnnotationOutcome, CommandNode, Invocation, annotate
from kubicorn.core.config import ConfigState, ConfigStore
from kubicorn.core.options import (
    OptionCell,
    OptionDescriptor,
    OptionKind,
    ResolvedValue,
    ValueSource,
    resolve_options,
)
from kubicorn.core.registry import CommandRegistry

__all__: list[str] = [
    "AnnotationOutcome",
    "CommandNode",
    "CommandRegistry",
    "ConfigState",
    "ConfigStore",
    "Invocation",
    "OptionBinder",
    "OptionCell",
    "OptionDescriptor",
    "OptionKind",
    "ResolvedValue",
    "ValueSource",
    "annotate",
    "resolve_options",
]
