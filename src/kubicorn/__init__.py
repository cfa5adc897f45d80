"""kubicorn — Kubernetes cluster management, without any magic.

The entry-point shell: a registry of subcommands, layered configuration
(flag > environment > file > default) and one-time initialization ahead
of whichever subcommand runs.
"""

from kubicorn.version import __version__

__all__: list[str] = ["__version__"]
