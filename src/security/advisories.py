from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, cast

from src.security.types import AdvisoryMap, AdvisoryRecord


@dataclass(frozen=True)
class AdvisoryCollection:
    """Advisories grouped by package name, in the order the service reported them.

    Packages without advisories are never present, so an empty collection
    means "no known issues". Instances are read-only; ``to_dict`` returns a
    fresh copy safe for callers to mutate.
    """

    _by_package: Mapping[str, tuple[AdvisoryRecord, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_mapping(cls, advisories: Mapping[str, Any]) -> AdvisoryCollection:
        by_package: dict[str, tuple[AdvisoryRecord, ...]] = {}
        for package_name, records in advisories.items():
            if not records:
                continue
            by_package[str(package_name)] = tuple(
                cast(AdvisoryRecord, copy.deepcopy(dict(record))) for record in records
            )
        return cls(MappingProxyType(by_package))

    def is_empty(self) -> bool:
        return not self._by_package

    def package_names(self) -> list[str]:
        return list(self._by_package)

    def for_package(self, package_name: str) -> tuple[AdvisoryRecord, ...]:
        return self._by_package.get(package_name, ())

    def to_dict(self) -> AdvisoryMap:
        return {
            name: [cast(AdvisoryRecord, copy.deepcopy(dict(r))) for r in records]
            for name, records in self._by_package.items()
        }

    def __len__(self) -> int:
        return len(self._by_package)

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_package)

    def __contains__(self, package_name: object) -> bool:
        return package_name in self._by_package
