"""Launch the user's editor on a file."""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Mapping
from pathlib import Path

from kubicorn.exceptions import EnvironmentError

DEFAULT_EDITOR: str = "vi"


def editor_command(environ: Mapping[str, str]) -> list[str]:
    """``$VISUAL``, then ``$EDITOR``, then ``vi``, split into argv."""
    raw = environ.get("VISUAL") or environ.get("EDITOR") or DEFAULT_EDITOR
    return shlex.split(raw)


def open_in_editor(path: Path, environ: Mapping[str, str]) -> None:
    """Block until the editor exits.

    Raises
    ------
    EnvironmentError
        When the editor cannot be started or exits non-zero.
    """
    command = [*editor_command(environ), str(path)]
    try:
        completed = subprocess.run(command, check=False)
    except OSError as exc:
        raise EnvironmentError(
            f"Cannot start editor '{command[0]}': {exc.strerror}",
            hint="Set $EDITOR to an installed editor.",
        ) from exc
    if completed.returncode != 0:
        raise EnvironmentError(
            f"Editor '{command[0]}' exited with status {completed.returncode}.",
        )
