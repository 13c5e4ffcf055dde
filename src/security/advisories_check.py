#!/usr/bin/env python3
"""
Security Advisories Check

Reports whether any installed package has a known security advisory:
- Inventory of installed packages, minus ignored names
- One advisory lookup per run, retried through gateway outages
- Optional result caching keyed by the inventory fingerprint
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from src.constants import (
    CHECK_LABEL,
    CHECK_NAME,
    DEFAULT_RETRY_TIMES,
    MESSAGE_ADVISORIES_FOUND,
    MESSAGE_NO_ADVISORIES,
    MESSAGE_UNREACHABLE,
    RETRY_SLEEP_SECONDS,
)
from src.health.result import Result
from src.security.advisories import AdvisoryCollection
from src.security.advisory_client import AdvisoryClient, AdvisoryClientProtocol
from src.security.config import AdvisoryCheckConfig
from src.security.errors import AdvisoryServiceUnreachable
from src.security.fingerprint import cache_key, inventory_fingerprint
from src.security.inventory import PackageSource, list_installed_packages
from src.security.result_cache import CacheStoreProvider, ResultCache
from src.security.retry import RetryState, with_retry

logger = logging.getLogger(__name__)


def join_package_names(names: Iterable[str]) -> str:
    """Render names as "`a`, `b` and `c`"."""
    quoted = [f"`{name}`" for name in names]
    if len(quoted) <= 1:
        return "".join(quoted)
    return f"{', '.join(quoted[:-1])} and {quoted[-1]}"


class SecurityAdvisoriesCheck:
    """Health check that fails when installed packages have security advisories."""

    name: str = CHECK_NAME
    label: str = CHECK_LABEL

    def __init__(
        self,
        client: AdvisoryClientProtocol | None = None,
        cache_store_provider: CacheStoreProvider | None = None,
        package_source: PackageSource | None = None,
        sleep_seconds: float = RETRY_SLEEP_SECONDS,
    ) -> None:
        self.client: AdvisoryClientProtocol = client if client is not None else AdvisoryClient()
        self.package_source = package_source
        self.sleep_seconds = sleep_seconds
        self._ignored_packages: list[str] = []
        self._retry_times: int = DEFAULT_RETRY_TIMES
        self._cache_ttl_seconds: int = 0
        self._cache = ResultCache(cache_store_provider)

    @classmethod
    def from_config(
        cls,
        config: AdvisoryCheckConfig,
        cache_store_provider: CacheStoreProvider | None = None,
        package_source: PackageSource | None = None,
    ) -> SecurityAdvisoriesCheck:
        client = AdvisoryClient(base_url=config.api_url, timeout_s=config.timeout_s)
        return (
            cls(client, cache_store_provider=cache_store_provider, package_source=package_source)
            .ignored_packages(config.ignored_packages)
            .retry_times(config.retry_times)
            .cache_results_for_minutes(config.cache_minutes)
        )

    def ignore_package(self, package_name: str) -> SecurityAdvisoriesCheck:
        self._ignored_packages.append(package_name)
        return self

    def ignored_packages(self, package_names: Iterable[str]) -> SecurityAdvisoriesCheck:
        for package_name in package_names:
            self.ignore_package(package_name)
        return self

    def retry_times(self, times: int) -> SecurityAdvisoriesCheck:
        if times < 1:
            raise ValueError(f"retry times must be at least 1, got {times}")
        self._retry_times = times
        return self

    def cache_results_for_minutes(self, minutes: int) -> SecurityAdvisoriesCheck:
        self._cache_ttl_seconds = max(minutes, 0) * 60
        return self

    @property
    def ignored(self) -> tuple[str, ...]:
        return tuple(self._ignored_packages)

    @property
    def cache_ttl_seconds(self) -> int:
        return self._cache_ttl_seconds

    async def run(self) -> Result:
        packages = list_installed_packages(self._ignored_packages, source=self.package_source)
        fingerprint = inventory_fingerprint(packages)
        logger.info(f"🔍 Checking {len(packages)} packages for advisories ({fingerprint})")

        try:
            advisories = await self._cache.get_or_compute(
                cache_key(fingerprint),
                self._cache_ttl_seconds,
                lambda: self._fetch_with_retry(packages),
            )
        except AdvisoryServiceUnreachable as e:
            logger.warning(f"⚠️  {MESSAGE_UNREACHABLE} after {e.attempts} attempts")
            return Result.make(MESSAGE_UNREACHABLE).ok()

        return self.render(advisories)

    async def _fetch_with_retry(self, packages: dict[str, str]) -> AdvisoryCollection:
        state = RetryState()
        advisories = await with_retry(
            self._retry_times,
            lambda: self.client.fetch_advisories(packages),
            sleep_seconds=self.sleep_seconds,
            state=state,
        )
        if state.attempts > 1:
            logger.info(
                f"🔄 Advisory lookup succeeded on attempt {state.attempts} "
                f"({state.gateway_failures} gateway failures)"
            )
        return advisories

    @staticmethod
    def render(advisories: AdvisoryCollection) -> Result:
        if advisories.is_empty():
            logger.info(f"✅ {MESSAGE_NO_ADVISORIES}")
            return Result.make(MESSAGE_NO_ADVISORIES).ok()

        package_names = join_package_names(advisories.package_names())
        message = MESSAGE_ADVISORIES_FOUND.format(packages=package_names)
        logger.info(f"🚨 {message}")
        return (
            Result.make()
            .meta(advisories.to_dict())
            .short_summary(f"{len(advisories)} affected")
            .failed(message)
        )
