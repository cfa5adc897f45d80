"""Custom exception hierarchy for kubicorn.

Every error that crosses a layer boundary inherits from
:class:`KubicornError`.  Raw third-party exceptions (PyYAML, OS errors,
plugin failures) are caught at the infrastructure boundary and re-raised
as one of the typed subclasses below, so the CLI error boundary can
render a clean message and pick an exit code.

Hierarchy
---------
KubicornError
├── UsageError
│   └── CommandNotFoundError
├── CommandTreeError
├── OptionError
│   ├── OptionDeclarationError
│   └── OptionUnresolvedError
├── ConfigError
│   ├── ConfigReadError
│   │   └── ConfigFileNotFoundError
│   ├── ConfigParseError
│   ├── ConfigValueError
│   └── ConfigUnavailableError
├── StateError
│   ├── ClusterNotFoundError
│   └── ClusterExistsError
├── ProviderUnavailableError
└── EnvironmentError
"""

from __future__ import annotations


class KubicornError(Exception):
    """Base exception for all kubicorn errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Dispatch --------------------------------------------------------------

class UsageError(KubicornError):
    """Raised when the command line cannot be parsed."""


class CommandNotFoundError(UsageError):
    """Raised when an argument names a subcommand that does not exist."""


class CommandTreeError(KubicornError):
    """Raised when the command tree is assembled incorrectly."""


# --- Options ---------------------------------------------------------------

class OptionError(KubicornError):
    """Base class for option declaration and lookup failures."""


class OptionDeclarationError(OptionError):
    """Raised for duplicate option names or unusable shorthands."""


class OptionUnresolvedError(OptionError):
    """Raised when an option value is read before it was resolved."""


# --- Configuration ---------------------------------------------------------

class ConfigError(KubicornError):
    """Base class for configuration loading and resolution failures."""


class ConfigReadError(ConfigError):
    """Raised when the configuration file cannot be read."""


class ConfigFileNotFoundError(ConfigReadError):
    """Raised when an explicitly chosen configuration file is missing."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file is not a valid YAML mapping."""


class ConfigValueError(ConfigError):
    """Raised when a configured value cannot be coerced to its option type."""


class ConfigUnavailableError(ConfigError):
    """Raised when a command needs configuration that failed to load.

    The original failure is kept as ``__cause__``.
    """


# --- Cluster state ---------------------------------------------------------

class StateError(KubicornError):
    """Raised when the local cluster state store is unusable."""


class ClusterNotFoundError(StateError):
    """Raised when no state exists for the requested cluster name."""


class ClusterExistsError(StateError):
    """Raised when creating a cluster whose state already exists."""


# --- Collaborators ---------------------------------------------------------

class ProviderUnavailableError(KubicornError):
    """Raised when no cloud provider plugin handles a cluster's cloud."""


class EnvironmentError(KubicornError):
    """Raised when a required runtime dependency is not available."""
