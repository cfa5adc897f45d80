"""Cloud provider plugin discovery.

Providers are installed separately and advertise themselves through the
``kubicorn.providers`` entry-point group; the entry-point name is the
canonical cloud name (``amazon``, ``digitalocean``) and the object it
points at is a zero-argument factory returning a
:class:`~kubicorn.core.protocols.CloudProvider`.
"""

from __future__ import annotations

from importlib.metadata import entry_points

from kubicorn.core.protocols import CloudProvider
from kubicorn.exceptions import ProviderUnavailableError
from kubicorn.utils.logging import get_logger

ENTRY_POINT_GROUP: str = "kubicorn.providers"

logger = get_logger(__name__)


def available_providers() -> list[str]:
    """Names of every installed provider plugin, sorted."""
    return sorted({ep.name for ep in entry_points(group=ENTRY_POINT_GROUP)})


def load_provider(cloud: str) -> CloudProvider:
    """Instantiate the provider plugin registered for *cloud*.

    Raises
    ------
    ProviderUnavailableError
        When no plugin is registered for *cloud*, or it fails to load.
    """
    matches = [ep for ep in entry_points(group=ENTRY_POINT_GROUP) if ep.name == cloud]
    if not matches:
        installed = ", ".join(available_providers()) or "none"
        raise ProviderUnavailableError(
            f"No provider plugin is installed for cloud '{cloud}'.",
            hint=f"Install a package exposing the '{ENTRY_POINT_GROUP}' entry point "
            f"'{cloud}' (installed: {installed}).",
        )

    entry_point = matches[0]
    try:
        factory = entry_point.load()
        provider = factory()
    except Exception as exc:  # noqa: BLE001
        raise ProviderUnavailableError(
            f"Provider plugin for '{cloud}' failed to load: {exc}",
            hint=f"Check the package providing {entry_point.value}.",
        ) from exc

    logger.debug("provider.loaded", cloud=cloud, entry_point=entry_point.value)
    return provider
