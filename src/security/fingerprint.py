"""Inventory fingerprinting for result caching."""

from __future__ import annotations

import hashlib
from collections.abc import Mapping

from src.constants import CACHE_KEY_PREFIX


def inventory_fingerprint(inventory: Mapping[str, str]) -> str:
    """Return a stable 32-character hex fingerprint of an inventory.

    Insertion order does not matter; any change to a name or version does.
    """
    canonical = "\n".join(f"{name}@{inventory[name]}" for name in sorted(inventory))
    return hashlib.md5(canonical.encode("utf-8")).hexdigest()


def cache_key(fingerprint: str) -> str:
    return f"{CACHE_KEY_PREFIX}:{fingerprint}"
