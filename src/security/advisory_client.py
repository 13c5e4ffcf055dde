from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from src.constants import ADVISORY_API_URL, DEFAULT_HTTP_TIMEOUT_SECONDS, USER_AGENT
from src.security.advisories import AdvisoryCollection
from src.security.errors import (
    AdvisoryResponseError,
    TerminalRemoteError,
    remote_error_for_status,
)

logger = logging.getLogger(__name__)


class AdvisoryClientProtocol(Protocol):
    async def fetch_advisories(self, packages: Mapping[str, str]) -> AdvisoryCollection: ...


class AdvisoryClient:
    """Lightweight async client for a Packagist-style security advisories endpoint."""

    def __init__(
        self,
        base_url: str = ADVISORY_API_URL,
        timeout_s: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.base_url: str = base_url
        self.timeout_s: float = timeout_s
        self.headers: dict[str, str] = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        self._session = session

    @staticmethod
    def build_payload(packages: Mapping[str, str]) -> dict[str, str]:
        """Encode the inventory as ``packages[<name>]=<version>`` form fields."""
        return {f"packages[{name}]": version for name, version in sorted(packages.items())}

    async def fetch_advisories(self, packages: Mapping[str, str]) -> AdvisoryCollection:
        """
        Ask the service which advisories affect the given package versions.

        Returns an AdvisoryCollection; packages without advisories are omitted.
        Raises TransientRemoteError for gateway statuses, TerminalRemoteError
        for every other failure.
        """
        if not packages:
            return AdvisoryCollection()

        if self._session is not None:
            return await self._post(self._session, packages)
        async with aiohttp.ClientSession() as session:
            return await self._post(session, packages)

    async def _post(
        self, session: aiohttp.ClientSession, packages: Mapping[str, str]
    ) -> AdvisoryCollection:
        logger.debug(f"POST {self.base_url} for {len(packages)} packages")
        try:
            async with session.post(
                self.base_url,
                data=self.build_payload(packages),
                headers=self.headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout_s),
            ) as resp:
                if resp.status >= 400:
                    raise remote_error_for_status(
                        resp.status, f"Advisory service returned HTTP {resp.status} {resp.reason}"
                    )
                try:
                    data: Any = await resp.json(content_type=None)
                except ValueError as e:
                    raise AdvisoryResponseError(
                        f"Advisory service returned invalid JSON: {e}", resp.status
                    ) from e
                status = resp.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TerminalRemoteError(f"Advisory service request failed: {e!r}") from e

        return self.parse_response(data, status)

    @staticmethod
    def parse_response(data: Any, status: int | None = None) -> AdvisoryCollection:
        if not isinstance(data, Mapping):
            raise AdvisoryResponseError("Advisory response is not a JSON object", status)
        advisories = data.get("advisories")
        # The service encodes "no advisories" as an empty JSON list
        if advisories == []:
            return AdvisoryCollection()
        if not isinstance(advisories, Mapping):
            raise AdvisoryResponseError("Advisory response has no 'advisories' mapping", status)
        for package_name, records in advisories.items():
            if not isinstance(records, list) or not all(isinstance(r, Mapping) for r in records):
                raise AdvisoryResponseError(
                    f"Malformed advisory list for package '{package_name}'", status
                )
        return AdvisoryCollection.from_mapping(advisories)
