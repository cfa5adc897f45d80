"""Default filesystem locations and user path expansion."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

APP_NAME: str = "kubicorn"
CONFIG_FILE_NAME: str = "kubicorn.cfg"
CONFIG_FILE_ENV: str = "KUBICORN_CONFIG_FILE"
"""Overrides the configuration file location when set."""


def expand(path: str | os.PathLike[str]) -> Path:
    """Expand ``~`` and ``$VARS`` in a user-supplied path."""
    return Path(os.path.expandvars(os.path.expanduser(os.fspath(path))))


def default_config_path() -> Path:
    """``kubicorn.cfg`` inside the per-user configuration directory."""
    return Path(user_config_dir(APP_NAME)) / CONFIG_FILE_NAME


def default_state_store_path() -> Path:
    """Directory holding one YAML state file per cluster."""
    return Path(user_data_dir(APP_NAME)) / "state"


def config_path_from_env(environ: Mapping[str, str]) -> Path | None:
    """Explicit configuration path from ``KUBICORN_CONFIG_FILE``, if set."""
    raw = environ.get(CONFIG_FILE_ENV, "")
    if not raw:
        return None
    return expand(raw)
