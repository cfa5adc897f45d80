"""Protocols (interfaces) consumed by the core layer.

Infrastructure adapters satisfy these structurally; core code depends
only on the protocols.
"""

from __future__ import annotations

from typing import Any, Protocol

from kubicorn.core.models import Cluster


class StateStore(Protocol):
    """Persistence for raw cluster state documents, keyed by name."""

    def names(self) -> list[str]:
        """Return stored cluster names, sorted."""
        ...  # pragma: no cover

    def exists(self, name: str) -> bool:
        ...  # pragma: no cover

    def read(self, name: str) -> dict[str, Any]:
        """Return the raw document for *name*.

        Raises
        ------
        ClusterNotFoundError
            When nothing is stored under *name*.
        StateError
            When the stored document cannot be parsed.
        """
        ...  # pragma: no cover

    def write(self, name: str, document: dict[str, Any]) -> None:
        ...  # pragma: no cover

    def remove(self, name: str) -> None:
        ...  # pragma: no cover


class CloudProvider(Protocol):
    """Contract for cloud reconcilers loaded as plugins.

    Implementations map every backend failure to a
    :class:`~kubicorn.exceptions.KubicornError` subclass.
    """

    def apply(self, cluster: Cluster) -> Cluster:
        """Create or update cloud resources; return the reconciled state."""
        ...  # pragma: no cover

    def adopt(self, cluster: Cluster) -> Cluster:
        """Discover existing resources matching *cluster* and return them."""
        ...  # pragma: no cover

    def destroy(self, cluster: Cluster) -> None:
        """Delete every cloud resource belonging to *cluster*."""
        ...  # pragma: no cover
