"""Core cluster service — orchestrates the cluster lifecycle commands.

The service delegates persistence to a
:class:`~kubicorn.core.protocols.StateStore` and cloud work to a
:class:`~kubicorn.core.protocols.CloudProvider` obtained from a factory
injected at construction time.  It is responsible for:

* Converting raw state documents to :class:`Cluster` models and back.
* Enforcing create / read / delete preconditions.
* Making sure only :class:`~kubicorn.exceptions.KubicornError`
  subclasses escape.

Guarantees
----------
* No filesystem access, no ``print()``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from kubicorn.core.models import Cluster, ServerPool
from kubicorn.core.profiles import build_from_profile
from kubicorn.core.protocols import CloudProvider, StateStore
from kubicorn.exceptions import ClusterExistsError, StateError
from kubicorn.utils.logging import get_logger

ProviderFactory = Callable[[str], CloudProvider]
"""Returns the provider handling a canonical cloud name."""

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Document <-> model conversion (pure)
# ---------------------------------------------------------------------------

def cluster_to_document(cluster: Cluster) -> dict[str, Any]:
    return {
        "name": cluster.name,
        "cloud": cluster.cloud,
        "location": cluster.location,
        "kubernetesVersion": cluster.kubernetes_version,
        "applied": cluster.applied,
        "serverPools": [
            {
                "name": pool.name,
                "role": pool.role,
                "image": pool.image,
                "size": pool.size,
                "count": pool.count,
            }
            for pool in cluster.server_pools
        ],
    }


def cluster_from_document(document: dict[str, Any]) -> Cluster:
    """Parse a raw state document.

    Raises
    ------
    StateError
        When a required key is missing or has the wrong type.
    """
    try:
        pools = tuple(
            ServerPool(
                name=str(raw["name"]),
                role=str(raw["role"]),
                image=str(raw["image"]),
                size=str(raw["size"]),
                count=int(raw.get("count", 1)),
            )
            for raw in document.get("serverPools") or []
        )
        return Cluster(
            name=str(document["name"]),
            cloud=str(document["cloud"]),
            location=str(document["location"]),
            kubernetes_version=str(document.get("kubernetesVersion", "")),
            server_pools=pools,
            applied=bool(document.get("applied", False)),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise StateError(
            f"Malformed cluster state: {exc}",
            hint="Run 'kubicorn edit NAME' to repair the state file.",
        ) from exc


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class ClusterService:
    """Cluster lifecycle operations over a state store and provider plugins.

    Parameters
    ----------
    store:
        Any object satisfying the :class:`StateStore` protocol.
    provider_factory:
        Callable returning the :class:`CloudProvider` for a cloud name.
    """

    def __init__(self, store: StateStore, provider_factory: ProviderFactory) -> None:
        self._store: StateStore = store
        self._provider_factory: ProviderFactory = provider_factory

    def names(self) -> list[str]:
        return self._store.names()

    def get(self, name: str) -> Cluster:
        return cluster_from_document(self._store.read(name))

    def document(self, name: str) -> dict[str, Any]:
        """Raw state, validated, for display."""
        document = self._store.read(name)
        cluster_from_document(document)
        return document

    def create(self, name: str, profile: str) -> Cluster:
        if self._store.exists(name):
            raise ClusterExistsError(
                f"Cluster '{name}' already exists.",
                hint=f"Use 'kubicorn edit {name}' or pick another name.",
            )
        cluster = build_from_profile(name, profile)
        self._store.write(name, cluster_to_document(cluster))
        logger.info("cluster.created", cluster=name, cloud=cluster.cloud)
        return cluster

    def apply(self, name: str) -> Cluster:
        cluster = self.get(name)
        provider = self._provider_factory(cluster.cloud)
        logger.info("cluster.applying", cluster=name, cloud=cluster.cloud)
        reconciled = provider.apply(cluster)
        self._save(name, reconciled, applied=True)
        return reconciled

    def adopt(self, name: str) -> Cluster:
        cluster = self.get(name)
        provider = self._provider_factory(cluster.cloud)
        logger.info("cluster.adopting", cluster=name, cloud=cluster.cloud)
        adopted = provider.adopt(cluster)
        self._save(name, adopted, applied=True)
        return adopted

    def delete(self, name: str, *, purge: bool = False) -> None:
        """Destroy cloud resources, then drop the state.

        With *purge* the provider is not contacted.
        """
        cluster = self.get(name)
        if not purge:
            provider = self._provider_factory(cluster.cloud)
            logger.info("cluster.destroying", cluster=name, cloud=cluster.cloud)
            provider.destroy(cluster)
        self._store.remove(name)
        logger.info("cluster.deleted", cluster=name, purge=purge)

    def images(self, name: str) -> tuple[str, ...]:
        return self.get(name).images

    def _save(self, name: str, cluster: Cluster, *, applied: bool) -> None:
        document = cluster_to_document(cluster)
        document["applied"] = applied
        self._store.write(name, document)
