"""Starter cluster profiles used by ``kubicorn create``.

A profile is a pure function returning a new :class:`Cluster` for a
given name.  Aliases map the short spellings users type onto the
canonical cloud names.
"""

from __future__ import annotations

from collections.abc import Callable

from kubicorn.core.models import Cluster, ServerPool
from kubicorn.exceptions import UsageError

DEFAULT_PROFILE: str = "amazon"
KUBERNETES_VERSION: str = "1.7.0"

ProfileFactory = Callable[[str], Cluster]


def amazon_profile(name: str) -> Cluster:
    """Ubuntu masters and nodes on AWS EC2 in us-west-2."""
    image = "ami-835b4efa"
    return Cluster(
        name=name,
        cloud="amazon",
        location="us-west-2",
        kubernetes_version=KUBERNETES_VERSION,
        server_pools=(
            ServerPool(f"{name}.master", "master", image, "t2.medium", 1),
            ServerPool(f"{name}.node", "node", image, "t2.medium", 1),
        ),
    )


def digitalocean_profile(name: str) -> Cluster:
    """Ubuntu droplets in DigitalOcean's sfo2 region."""
    image = "ubuntu-16-04-x64"
    return Cluster(
        name=name,
        cloud="digitalocean",
        location="sfo2",
        kubernetes_version=KUBERNETES_VERSION,
        server_pools=(
            ServerPool(f"{name}.master", "master", image, "2gb", 1),
            ServerPool(f"{name}.node", "node", image, "1gb", 1),
        ),
    )


PROFILES: dict[str, ProfileFactory] = {
    "amazon": amazon_profile,
    "digitalocean": digitalocean_profile,
}

PROFILE_ALIASES: dict[str, str] = {
    "aws": "amazon",
    "do": "digitalocean",
}


def profile_names() -> tuple[str, ...]:
    """Every accepted spelling, canonical names first."""
    return (*PROFILES, *PROFILE_ALIASES)


def canonical_profile(profile: str) -> str:
    key = profile.strip().lower()
    key = PROFILE_ALIASES.get(key, key)
    if key not in PROFILES:
        raise UsageError(
            f"Unknown profile '{profile}'.",
            hint=f"Choose one of: {', '.join(profile_names())}.",
        )
    return key


def build_from_profile(name: str, profile: str) -> Cluster:
    return PROFILES[canonical_profile(profile)](name)
