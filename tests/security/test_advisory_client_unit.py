from __future__ import annotations

import pytest

from src.security.advisory_client import AdvisoryClient
from src.security.errors import AdvisoryResponseError


def test_build_payload_encodes_each_package():
    payload = AdvisoryClient.build_payload({"vendor/package": "1.2.3", "acme/widgets": "2.0.0"})
    assert payload == {
        "packages[acme/widgets]": "2.0.0",
        "packages[vendor/package]": "1.2.3",
    }


def test_parse_response_omits_packages_without_advisories(advisory):
    collection = AdvisoryClient.parse_response(
        {"advisories": {"vendor/package": [advisory], "acme/widgets": []}}
    )
    assert collection.package_names() == ["vendor/package"]
    assert collection.for_package("vendor/package")[0]["advisoryId"] == advisory["advisoryId"]
    # Extra service fields are passed through untouched
    assert collection.for_package("vendor/package")[0]["cve"] == "CVE-2024-12345"


def test_parse_response_accepts_empty_list_as_no_advisories():
    assert AdvisoryClient.parse_response({"advisories": []}).is_empty()
    assert AdvisoryClient.parse_response({"advisories": {}}).is_empty()


@pytest.mark.parametrize(
    "body",
    [
        [],
        "advisories",
        {},
        {"advisories": None},
        {"advisories": {"vendor/package": "oops"}},
        {"advisories": {"vendor/package": ["oops"]}},
    ],
)
def test_parse_response_rejects_malformed_bodies(body):
    with pytest.raises(AdvisoryResponseError):
        AdvisoryClient.parse_response(body, 200)


def test_collection_is_read_only_snapshot(advisory):
    collection = AdvisoryClient.parse_response({"advisories": {"vendor/package": [advisory]}})
    exported = collection.to_dict()
    exported["vendor/package"][0]["title"] = "changed"
    exported["other"] = []
    assert collection.for_package("vendor/package")[0]["title"] == advisory["title"]
    assert "other" not in collection
    with pytest.raises(TypeError):
        collection._by_package["x"] = ()  # type: ignore[index]
