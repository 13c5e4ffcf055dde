"""Exception hierarchy for advisory retrieval."""

from __future__ import annotations

from src.constants import GATEWAY_STATUS_CODES

TRANSIENT = "transient"
TERMINAL = "terminal"


class AdvisoryError(Exception):
    """Base error for the security advisories check."""


class ConfigError(AdvisoryError):
    """Raised when check configuration cannot be parsed."""


class RemoteError(AdvisoryError):
    """A failed call to the advisory service.

    ``status_code`` is the HTTP status, or None when no response was
    received at all (connection refused, DNS failure, timeout).
    """

    kind = TERMINAL

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_transient(self) -> bool:
        return self.kind == TRANSIENT

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code!r}, message={str(self)!r})"


class TransientRemoteError(RemoteError):
    """Gateway failure (502/503/504); the service is expected to recover."""

    kind = TRANSIENT


class TerminalRemoteError(RemoteError):
    """Any other remote failure; retrying is not expected to help."""

    kind = TERMINAL


class AdvisoryResponseError(TerminalRemoteError):
    """The service answered 2xx with a body that is not an advisory payload."""


class AdvisoryServiceUnreachable(AdvisoryError):
    """Every attempt in the retry budget failed with a gateway error."""

    def __init__(self, attempts: int, last_error: BaseException | None = None) -> None:
        super().__init__(f"Advisory service unreachable after {attempts} attempt(s)")
        self.attempts = attempts
        self.last_error = last_error


def remote_error_for_status(status_code: int, message: str) -> RemoteError:
    """Build the error type matching an HTTP status code."""
    if status_code in GATEWAY_STATUS_CODES:
        return TransientRemoteError(message, status_code)
    return TerminalRemoteError(message, status_code)
