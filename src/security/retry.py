"""
Bounded retry around advisory fetches.

Gateway failures (502/503/504) are counted separately from every other
failure so that a run in which the service was simply down can be told
apart from one that hit a real error.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from src.constants import RETRY_SLEEP_SECONDS
from src.security.errors import AdvisoryServiceUnreachable, RemoteError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_transient(error: BaseException) -> bool:
    return isinstance(error, RemoteError) and error.is_transient


def is_server_error(error: BaseException) -> bool:
    return (
        isinstance(error, RemoteError)
        and error.status_code is not None
        and error.status_code >= 500
    )


@dataclass
class RetryState:
    """Failure bookkeeping for a single retried operation."""

    attempts: int = 0
    gateway_failures: int = 0
    last_terminal_error: BaseException | None = None

    def record_failure(self, error: BaseException) -> None:
        # A later gateway failure never replaces an earlier terminal error
        if is_transient(error):
            self.gateway_failures += 1
        else:
            self.last_terminal_error = error


async def with_retry(
    times: int,
    op: Callable[[], Awaitable[T]],
    *,
    sleep_seconds: float = RETRY_SLEEP_SECONDS,
    state: RetryState | None = None,
) -> T:
    """Run ``op`` up to ``times`` times, sleeping ``sleep_seconds`` between attempts.

    Failures are classified only between attempts, so after an all-gateway
    run ``state.gateway_failures`` is ``times - 1``. When the budget runs out:

    - final failure is not a 5xx (4xx, no response, bad body): that failure
    - every earlier failure was a gateway error: AdvisoryServiceUnreachable
    - otherwise: the last terminal failure recorded, else the final failure
    """
    if times < 1:
        raise ValueError(f"times must be at least 1, got {times}")

    state = state if state is not None else RetryState()
    while True:
        state.attempts += 1
        try:
            return await op()
        except Exception as e:
            if state.attempts < times:
                state.record_failure(e)
                kind = "gateway" if is_transient(e) else "terminal"
                logger.warning(
                    f"⚠️  Attempt {state.attempts}/{times} failed ({kind}): {e}; "
                    f"retrying in {sleep_seconds:g}s"
                )
                await asyncio.sleep(sleep_seconds)
                continue

            if not is_server_error(e):
                raise
            if state.gateway_failures == times - 1:
                raise AdvisoryServiceUnreachable(times, e) from e
            if state.last_terminal_error is None:
                raise
            raise state.last_terminal_error from e
