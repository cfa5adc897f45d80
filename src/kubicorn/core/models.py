"""Domain models for cluster state.

Frozen dataclasses: immutable value objects with no I/O and no
dependencies on external packages.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ServerPool:
    """A group of identical machines inside a cluster."""

    name: str
    role: str
    """``"master"`` or ``"node"``."""

    image: str
    """Cloud machine image the pool boots from."""

    size: str
    """Cloud instance size / droplet slug."""

    count: int


@dataclass(frozen=True, slots=True)
class Cluster:
    """Desired state of one Kubernetes cluster."""

    name: str
    cloud: str
    """Canonical cloud name (``"amazon"``, ``"digitalocean"``)."""

    location: str
    kubernetes_version: str
    server_pools: tuple[ServerPool, ...]
    applied: bool = False
    """Whether a provider has reconciled this state at least once."""

    @property
    def images(self) -> tuple[str, ...]:
        """Distinct machine images, in pool order."""
        return tuple(dict.fromkeys(pool.image for pool in self.server_pools))
