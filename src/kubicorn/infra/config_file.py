"""YAML configuration file reader.

This is the only module that opens the configuration file.  PyYAML and
OS errors are mapped onto the :class:`~kubicorn.exceptions.ConfigError`
family here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from kubicorn.exceptions import ConfigFileNotFoundError, ConfigParseError, ConfigReadError


def read_config_file(path: Path) -> dict[str, Any]:
    """Load the YAML mapping stored at *path*.

    An empty document yields ``{}``.  The file handle is closed whether
    or not parsing succeeds.

    Raises
    ------
    ConfigFileNotFoundError
        When *path* does not exist.
    ConfigReadError
        When *path* exists but cannot be read.
    ConfigParseError
        When the content is not YAML, or not a mapping at the top level.
    """
    try:
        with open(path, encoding="utf-8") as handle:
            content = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ConfigFileNotFoundError(
            f"Configuration file not found: {path}",
            hint="Create it, or unset KUBICORN_CONFIG_FILE.",
        ) from exc
    except OSError as exc:
        raise ConfigReadError(f"Cannot read configuration file {path}: {exc.strerror}") from exc
    except yaml.YAMLError as exc:
        raise ConfigParseError(
            f"Configuration file {path} is not valid YAML.",
            hint=str(exc),
        ) from exc

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigParseError(
            f"Configuration file {path} must contain a mapping, "
            f"got {type(content).__name__}.",
            hint="Write one 'option: value' pair per line, e.g. 'verbose: 4'.",
        )
    return {str(key): value for key, value in content.items()}
