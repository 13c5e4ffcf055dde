from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from dotenv import find_dotenv, load_dotenv

from src.constants import (
    ADVISORY_API_URL,
    DEFAULT_CACHE_MINUTES,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_RETRY_TIMES,
)
from src.security.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdvisoryCheckConfig:
    api_url: str = ADVISORY_API_URL
    retry_times: int = DEFAULT_RETRY_TIMES
    cache_minutes: int = DEFAULT_CACHE_MINUTES
    ignored_packages: tuple[str, ...] = field(default_factory=tuple)
    timeout_s: float = DEFAULT_HTTP_TIMEOUT_SECONDS


def _env(name: str) -> str | None:
    # Treat empty strings as absent so CI can blank a variable to get the default
    value = os.getenv(name)
    return value if value else None


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


def load_advisory_config() -> AdvisoryCheckConfig:
    """Return check settings after loading environment variables.

    Values from a ``.env`` file are loaded first; real environment variables
    take precedence over them.
    """
    try:
        env_path = find_dotenv(usecwd=True) or find_dotenv()
    except Exception:
        env_path = ""
    if env_path:
        load_dotenv(dotenv_path=env_path, override=False)

    retry_times = _env_int("ADVISORY_RETRY_TIMES", DEFAULT_RETRY_TIMES)
    if retry_times < 1:
        raise ConfigError(f"ADVISORY_RETRY_TIMES must be at least 1, got {retry_times}")

    ignored_raw = _env("ADVISORY_IGNORED_PACKAGES") or ""
    ignored = tuple(p.strip() for p in ignored_raw.split(",") if p.strip())

    config = AdvisoryCheckConfig(
        api_url=_env("ADVISORY_API_URL") or ADVISORY_API_URL,
        retry_times=retry_times,
        cache_minutes=_env_int("ADVISORY_CACHE_MINUTES", DEFAULT_CACHE_MINUTES),
        ignored_packages=ignored,
        timeout_s=_env_float("ADVISORY_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT_SECONDS),
    )
    logger.debug(f"[config] {config}")
    return config
