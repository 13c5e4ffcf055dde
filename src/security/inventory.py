"""
Installed package inventory.

Reads name/version pairs from the running environment's distribution
metadata and filters them down to what should be sent to the advisory
service.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from importlib import metadata

logger = logging.getLogger(__name__)

# Zero-argument callable returning every known package, version may be missing
PackageSource = Callable[[], Mapping[str, str | None]]


def installed_distributions() -> dict[str, str | None]:
    """Return all installed distributions as ``{name: version}``.

    When a name is visible through several path entries the first one wins,
    which mirrors import precedence.
    """
    packages: dict[str, str | None] = {}
    for dist in metadata.distributions():
        name = dist.metadata.get("Name") if dist.metadata else None
        if not name or name in packages:
            continue
        packages[name] = dist.version
    return packages


def list_installed_packages(
    ignore: Iterable[str] = (),
    source: PackageSource | None = None,
) -> dict[str, str]:
    """Build the inventory sent to the advisory service.

    Args:
        ignore: Package names to leave out
        source: Optional replacement for the installed-distribution reader

    Returns:
        Mapping of package name to installed version; empty when nothing
        with a resolvable version is installed
    """
    ignored = set(ignore)
    raw = (source or installed_distributions)()
    inventory: dict[str, str] = {}
    for name, version in raw.items():
        if not version:
            continue
        if name in ignored:
            continue
        inventory[name] = str(version)

    logger.debug(
        f"Inventory: {len(inventory)} packages ({len(raw) - len(inventory)} ignored or unversioned)"
    )
    return inventory
