"""Pytest configuration for the advisory check tests.

- Provides a minimal async test runner when coroutine tests are detected.
- Shared fakes for the advisory client and retry sleeps.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Mapping
from typing import Any

import pytest

from src.security.advisories import AdvisoryCollection
from src.security.errors import remote_error_for_status


def pytest_pyfunc_call(pyfuncitem) -> bool | None:  # type: ignore[override]
    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        sig = inspect.signature(test_function)
        kwargs = {k: v for k, v in pyfuncitem.funcargs.items() if k in sig.parameters}
        # Runner cancels leftover tasks and closes the loop on exit
        with asyncio.Runner() as runner:
            runner.run(test_function(**kwargs))
        return True
    return None


class FakeAdvisoryClient:
    """Replays queued responses: an int is an HTTP error status, anything else a payload."""

    def __init__(self, responses: list[Any]):
        self.responses = list(responses)
        self.calls: list[dict[str, str]] = []

    async def fetch_advisories(self, packages: Mapping[str, str]) -> AdvisoryCollection:
        self.calls.append(dict(packages))
        if not self.responses:
            raise AssertionError("FakeAdvisoryClient ran out of queued responses")
        response = self.responses.pop(0)
        if isinstance(response, int):
            raise remote_error_for_status(response, f"HTTP {response}")
        if isinstance(response, BaseException):
            raise response
        return AdvisoryCollection.from_mapping(response)


@pytest.fixture
def fake_client_factory():
    return FakeAdvisoryClient


@pytest.fixture
def retry_sleeps(monkeypatch) -> list[float]:
    """Skip retry delays, recording the requested durations."""
    delays: list[float] = []
    real_sleep = asyncio.sleep

    async def fast_sleep(seconds: float, *args, **kwargs):
        delays.append(seconds)
        await real_sleep(0)  # yield control only without recursion

    monkeypatch.setattr(asyncio, "sleep", fast_sleep)
    return delays


@pytest.fixture
def packages() -> dict[str, str | None]:
    return {
        "vendor/package": "1.2.3",
        "acme/widgets": "2.0.0",
        "acme/unversioned": None,
    }


@pytest.fixture
def package_source(packages):
    return lambda: dict(packages)


ADVISORY = {
    "advisoryId": "PKSA-n8hw-tywm-xrh7",
    "packageName": "vendor/package",
    "affectedVersions": ">=1.0.0,<1.2.4",
    "title": "Remote code execution in request parser",
    "cve": "CVE-2024-12345",
}


@pytest.fixture
def advisory() -> dict[str, Any]:
    return dict(ADVISORY)
