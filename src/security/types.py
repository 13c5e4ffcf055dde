"""
Typed types for security-related data structures.
"""

from __future__ import annotations

from typing import NotRequired, TypedDict


class AdvisoryRecord(TypedDict):
    """One advisory as reported by the advisory service.

    Only the fields below are relied upon; anything else the service sends
    (links, CVE ids, severity, sources) is carried along untouched.
    """

    advisoryId: str
    affectedVersions: str
    title: str
    packageName: NotRequired[str]


# Serialized form of an AdvisoryCollection: package name -> advisories
AdvisoryMap = dict[str, list[AdvisoryRecord]]
