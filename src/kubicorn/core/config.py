"""Process-scoped layered configuration store.

A :class:`ConfigStore` is created empty by the registry, receives one
:class:`~kubicorn.core.options.OptionCell` per declared option, and is
initialized exactly once right before the first command action runs.
Initialization reads the YAML file through an injected loader, overlays
``KUBICORN_*`` environment variables and explicitly supplied flags, then
binds every cell.

A failed initialization does not abort the process.  The store moves to
``UNAVAILABLE`` and keeps a :class:`ConfigUnavailableError`; only code
that actually reads a value sees it.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from kubicorn.core.options import (
    ENV_PREFIX,
    OptionCell,
    OptionDescriptor,
    ResolvedValue,
    ValueSource,
    resolve_options,
)
from kubicorn.exceptions import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigUnavailableError,
    OptionDeclarationError,
    OptionError,
)
from kubicorn.utils.logging import get_logger

ConfigLoader = Callable[[Path], Mapping[str, Any]]
"""Reads a configuration file and returns its top-level mapping."""

logger = get_logger(__name__)


class ConfigState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    UNAVAILABLE = "unavailable"


class ConfigStore:
    """Resolve-once, read-many view of every declared option.

    Parameters
    ----------
    path:
        Location of the YAML configuration file.
    loader:
        Callable reading *path*; see :func:`kubicorn.infra.config_file.read_config_file`.
    environ:
        Environment mapping; defaults to ``os.environ``.
    env_prefix:
        Prefix of overlaying environment variables.
    path_required:
        When ``False`` a missing file is an empty layer.  When ``True``
        (the user chose the path explicitly) it is an error.
    """

    def __init__(
        self,
        path: Path,
        *,
        loader: ConfigLoader,
        environ: Mapping[str, str] | None = None,
        env_prefix: str = ENV_PREFIX,
        path_required: bool = False,
    ) -> None:
        self.path: Path = path
        self.env_prefix: str = env_prefix
        self.path_required: bool = path_required
        self._loader: ConfigLoader = loader
        self._environ: Mapping[str, str] = os.environ if environ is None else environ
        self._cells: dict[str, OptionCell] = {}
        self._state: ConfigState = ConfigState.UNINITIALIZED
        self._error: ConfigUnavailableError | None = None

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, cell: OptionCell) -> None:
        """Link a declared option's cell into the store by name."""
        name = cell.descriptor.name
        if self._state is not ConfigState.UNINITIALIZED:
            raise OptionDeclarationError(
                f"Cannot declare option '{name}' after configuration was initialized.",
            )
        if name in self._cells:
            raise OptionDeclarationError(f"Option '{name}' is already declared.")
        self._cells[name] = cell

    @property
    def descriptors(self) -> tuple[OptionDescriptor, ...]:
        return tuple(cell.descriptor for cell in self._cells.values())

    def cell(self, name: str) -> OptionCell:
        try:
            return self._cells[name]
        except KeyError:
            raise OptionError(f"Unknown option '{name}'.") from None

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    @property
    def state(self) -> ConfigState:
        return self._state

    @property
    def error(self) -> ConfigUnavailableError | None:
        """The initialization failure, if any."""
        return self._error

    def initialize(self, flags: Mapping[str, Any]) -> ConfigUnavailableError | None:
        """Resolve and bind every option.  Runs at most once.

        Later calls return the outcome of the first one and ignore their
        *flags*.

        Returns
        -------
        ConfigUnavailableError | None
            ``None`` on success, else the error explaining why values are
            unavailable.
        """
        if self._state is not ConfigState.UNINITIALIZED:
            return self._error

        try:
            file_values = self._read_file()
            resolved = resolve_options(
                self.descriptors,
                flags=flags,
                environ=self._environ,
                file_values=file_values,
                env_prefix=self.env_prefix,
            )
        except ConfigError as exc:
            error = ConfigUnavailableError(
                f"Configuration unavailable: {exc}",
                hint=exc.hint or f"Fix or remove {self.path}.",
            )
            error.__cause__ = exc
            self._error = error
            self._state = ConfigState.UNAVAILABLE
            logger.warning("config.unavailable", path=str(self.path), reason=str(exc))
            return error

        for name, value in resolved.items():
            self._cells[name].bind(value)
        self._state = ConfigState.INITIALIZED
        logger.debug(
            "config.initialized",
            path=str(self.path),
            sources={name: value.source.value for name, value in resolved.items()},
        )
        return None

    def _read_file(self) -> Mapping[str, Any]:
        try:
            return self._loader(self.path)
        except ConfigFileNotFoundError:
            if self.path_required:
                raise
            logger.debug("config.file_missing", path=str(self.path))
            return {}

    def fallback(self, flags: Mapping[str, Any]) -> dict[str, Any]:
        """Resolve from flags, environment and defaults only.

        Used for ambient bootstrap (logging) when the file layer failed.
        An uncoercible environment value falls back to the default.
        """
        values: dict[str, Any] = {}
        for descriptor in self.descriptors:
            try:
                resolved = resolve_options(
                    (descriptor,),
                    flags=flags,
                    environ=self._environ,
                    env_prefix=self.env_prefix,
                )[descriptor.name]
            except ConfigError:
                resolved = ResolvedValue(descriptor.default, ValueSource.DEFAULT)
            values[descriptor.name] = resolved.value
        return values

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def require(self) -> None:
        """Raise unless the store initialized successfully."""
        if self._state is ConfigState.INITIALIZED:
            return
        if self._error is not None:
            raise self._error
        raise ConfigUnavailableError(
            "Configuration has not been initialized yet.",
        )

    def get(self, name: str) -> Any:
        """Return the resolved value of option *name*."""
        cell = self.cell(name)
        self.require()
        return cell.value

    def source(self, name: str) -> ValueSource:
        """Return the layer that supplied option *name*."""
        cell = self.cell(name)
        self.require()
        return cell.source

    def as_dict(self) -> dict[str, Any]:
        self.require()
        return {name: cell.value for name, cell in self._cells.items()}
