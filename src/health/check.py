from __future__ import annotations

from typing import Protocol, runtime_checkable

from src.health.result import Result


@runtime_checkable
class Check(Protocol):
    """What the host scheduler needs from a check: identity plus ``run()``."""

    name: str
    label: str

    async def run(self) -> Result: ...
