"""Shared pytest fixtures and configuration for the kubicorn test suite.

Guidelines
----------
* No network access and no real cloud provider in any test.
* Tests never read the real per-user configuration or state directories:
  default locations are redirected into ``tmp_path``.
* Provider plugins are mocked at the ``load_provider`` seam.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from kubicorn.utils.logging import configure_logging


@pytest.fixture(autouse=True)
def quiet_logging() -> None:
    configure_logging(0, color=False)


@pytest.fixture(autouse=True)
def isolated_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point default config/state locations into the test's tmp dir."""
    home = tmp_path / "home"
    monkeypatch.setattr(
        "kubicorn.cli.registry.default_config_path",
        lambda: home / "config" / "kubicorn.cfg",
    )
    monkeypatch.setattr(
        "kubicorn.cli.registry.default_state_store_path",
        lambda: home / "state",
    )
    monkeypatch.delenv("KUBICORN_CONFIG_FILE", raising=False)
    monkeypatch.delenv("KUBICORN_TRUECOLOR", raising=False)
    return home


@pytest.fixture
def state_dir(tmp_path: Path) -> Path:
    return tmp_path / "state"


@pytest.fixture
def env(state_dir: Path) -> dict[str, str]:
    """Minimal environment with an isolated state store."""
    return {"KUBICORN_STATE_STORE_PATH": str(state_dir)}


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    """Write YAML text to a config file and return its path."""

    def write(content: str) -> Path:
        path = tmp_path / "kubicorn.cfg"
        path.write_text(content, encoding="utf-8")
        return path

    return write
