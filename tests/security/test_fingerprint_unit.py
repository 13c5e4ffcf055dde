from __future__ import annotations

import re

import pytest

from src.security.fingerprint import cache_key, inventory_fingerprint


def test_fingerprint_is_32_hex_chars():
    assert re.fullmatch(r"[a-f0-9]{32}", inventory_fingerprint({"a/b": "1.0"}))


def test_fingerprint_ignores_insertion_order():
    first = {"vendor/package": "1.2.3", "acme/widgets": "2.0.0", "zeta/z": "0.1"}
    second = dict(reversed(list(first.items())))
    assert list(first) != list(second)
    assert inventory_fingerprint(first) == inventory_fingerprint(second)


@pytest.mark.parametrize(
    "changed",
    [
        {"vendor/package": "1.2.4", "acme/widgets": "2.0.0"},
        {"vendor/package": "1.2.3"},
        {"vendor/package": "1.2.3", "acme/widgets": "2.0.0", "new/pkg": "1.0"},
        {"vendor/renamed": "1.2.3", "acme/widgets": "2.0.0"},
    ],
)
def test_fingerprint_changes_with_inventory(changed):
    base = {"vendor/package": "1.2.3", "acme/widgets": "2.0.0"}
    assert inventory_fingerprint(changed) != inventory_fingerprint(base)


def test_empty_inventory_has_stable_fingerprint():
    assert inventory_fingerprint({}) == inventory_fingerprint({})


def test_cache_key_format():
    fp = inventory_fingerprint({"a/b": "1.0"})
    assert re.fullmatch(r"security-advisories:[a-f0-9]{32}", cache_key(fp))
