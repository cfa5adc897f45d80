"""Helpers shared by the cluster subcommands."""

from __future__ import annotations

from kubicorn.core.cluster_service import ClusterService
from kubicorn.core.command import Invocation
from kubicorn.infra.providers import load_provider
from kubicorn.infra.state_store import FileStateStore
from kubicorn.utils.paths import expand

STATE_STORE_OPTION: str = "state-store-path"


def state_store(invocation: Invocation) -> FileStateStore:
    """State store rooted at the resolved ``--state-store-path``."""
    return FileStateStore(expand(invocation.option(STATE_STORE_OPTION)))


def cluster_service(invocation: Invocation) -> ClusterService:
    return ClusterService(state_store(invocation), load_provider)
