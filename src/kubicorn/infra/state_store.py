"""YAML-file implementation of :class:`~kubicorn.core.protocols.StateStore`.

Each cluster lives in ``<root>/<name>.yaml``.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml

from kubicorn.exceptions import ClusterNotFoundError, StateError

_VALID_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class FileStateStore:
    """Cluster state documents stored as YAML files under *root*."""

    def __init__(self, root: Path) -> None:
        self.root: Path = root

    def path_for(self, name: str) -> Path:
        if not _VALID_NAME.match(name):
            raise StateError(
                f"Invalid cluster name '{name}'.",
                hint="Use letters, digits, '.', '_' and '-' only.",
            )
        return self.root / f"{name}.yaml"

    def names(self) -> list[str]:
        if not self.root.is_dir():
            return []
        return sorted(path.stem for path in self.root.glob("*.yaml") if path.is_file())

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def read(self, name: str) -> dict[str, Any]:
        path = self.path_for(name)
        try:
            with open(path, encoding="utf-8") as handle:
                document = yaml.safe_load(handle)
        except FileNotFoundError as exc:
            raise ClusterNotFoundError(
                f"No state found for cluster '{name}'.",
                hint="Run 'kubicorn list' to see known clusters.",
            ) from exc
        except (OSError, yaml.YAMLError) as exc:
            raise StateError(f"Cannot load state for cluster '{name}': {exc}") from exc

        if not isinstance(document, dict):
            raise StateError(
                f"State for cluster '{name}' is not a mapping.",
                hint=f"Inspect {path}.",
            )
        return document

    def write(self, name: str, document: dict[str, Any]) -> None:
        path = self.path_for(name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as handle:
                yaml.safe_dump(document, handle, sort_keys=False)
        except OSError as exc:
            raise StateError(f"Cannot write state for cluster '{name}': {exc}") from exc

    def remove(self, name: str) -> None:
        path = self.path_for(name)
        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise ClusterNotFoundError(f"No state found for cluster '{name}'.") from exc
        except OSError as exc:
            raise StateError(f"Cannot remove state for cluster '{name}': {exc}") from exc
