"""
Check results as consumed by the health-monitoring host.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class Status(str, Enum):
    OK = "ok"
    WARNING = "warning"
    FAILED = "failed"
    CRASHED = "crashed"
    SKIPPED = "skipped"


class Result:
    """Outcome of one check run, built fluently.

    Example:
        Result.make().meta({"pkg": [...]}).failed("Security advisories found")
    """

    def __init__(self, message: str = "") -> None:
        self.status: Status = Status.OK
        self.notification_message: str = message
        self.summary: str = ""
        self.metadata: dict[str, Any] = {}

    @classmethod
    def make(cls, message: str = "") -> Result:
        return cls(message)

    def _with_status(self, status: Status, message: str | None) -> Result:
        self.status = status
        if message is not None:
            self.notification_message = message
        return self

    def ok(self, message: str | None = None) -> Result:
        return self._with_status(Status.OK, message)

    def warning(self, message: str | None = None) -> Result:
        return self._with_status(Status.WARNING, message)

    def failed(self, message: str | None = None) -> Result:
        return self._with_status(Status.FAILED, message)

    def meta(self, data: dict[str, Any]) -> Result:
        self.metadata = data
        return self

    def short_summary(self, summary: str) -> Result:
        self.summary = summary
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "notification_message": self.notification_message,
            "short_summary": self.summary,
            "meta": self.metadata,
        }

    def __repr__(self) -> str:
        return f"Result(status={self.status.value!r}, message={self.notification_message!r})"
