"""Infrastructure layer — filesystem, YAML, plugins and subprocesses.

Every raw third-party exception is caught here and re-raised as a
:class:`~kubicorn.exceptions.KubicornError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output.
"""

from kubicorn.infra.config_file import read_config_file
from kubicorn.infra.editor import open_in_editor
from kubicorn.infra.providers import available_providers, load_provider
from kubicorn.infra.state_store import FileStateStore

__all__: list[str] = [
    "FileStateStore",
    "available_providers",
    "load_provider",
    "open_in_editor",
    "read_config_file",
]
