"""
Listener settings.

Responsibilities:
- Read configuration from environment variables and .env (see config.env).
- Validate values and provide defaults.
- Map the host verbosity onto the minimum level the sinks forward.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from buildlog_listener.config import env
from buildlog_listener.core.exceptions import ConfigError
from buildlog_listener.sinks.base import LogLevel


class LoggerVerbosity(str, Enum):
    QUIET = "quiet"
    MINIMAL = "minimal"
    NORMAL = "normal"
    DETAILED = "detailed"
    DIAGNOSTIC = "diagnostic"

    @classmethod
    def parse(cls, raw: str) -> "LoggerVerbosity":
        value = (raw or "").strip().lower()
        # MSBuild-style single-letter abbreviations: q, m, n, d, diag
        aliases = {"q": "quiet", "m": "minimal", "n": "normal", "d": "detailed", "diag": "diagnostic"}
        value = aliases.get(value, value)
        try:
            return cls(value)
        except ValueError as e:
            raise ConfigError(f"unknown verbosity: {raw!r}") from e

    @property
    def min_level(self) -> LogLevel:
        return MIN_LEVEL_FOR_VERBOSITY[self]


MIN_LEVEL_FOR_VERBOSITY = {
    LoggerVerbosity.QUIET: LogLevel.WARNING,
    LoggerVerbosity.MINIMAL: LogLevel.INFORMATION,
    LoggerVerbosity.NORMAL: LogLevel.DEBUG,
    LoggerVerbosity.DETAILED: LogLevel.VERBOSE,
    LoggerVerbosity.DIAGNOSTIC: LogLevel.VERBOSE,
}


@dataclass(frozen=True)
class ListenerSettings:
    """Typed listener configuration."""

    seq_url: str = env.DEFAULT_SEQ_URL
    seq_api_key: str | None = None
    verbosity: LoggerVerbosity = LoggerVerbosity.NORMAL
    batch_size: int = env.DEFAULT_BATCH_SIZE
    http_timeout_sec: float = env.DEFAULT_HTTP_TIMEOUT_SEC
    console: bool = True
    parameters: str | None = None
    """Free-form parameter string from the host; stored as given."""

    def __post_init__(self) -> None:
        if not self.seq_url.strip():
            raise ConfigError("seq_url must be non-empty")
        if self.batch_size < 1:
            raise ConfigError("batch_size must be positive")
        if self.http_timeout_sec <= 0:
            raise ConfigError("http_timeout_sec must be positive")

    def with_overrides(self, **overrides) -> "ListenerSettings":
        """Copy with the given non-None fields replaced."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _parse_int(name: str, default: int) -> int:
    raw = env.get_raw(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def _parse_float(name: str, default: float) -> float:
    raw = env.get_raw(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


def get_settings() -> ListenerSettings:
    """
    Return settings read from the environment.

    Raises:
        ConfigError: when a value is present but invalid.
    """
    console = env.parse_flag(env.get_raw("BUILDLOG_CONSOLE"), default=True)
    if console is None:
        raise ConfigError(f"BUILDLOG_CONSOLE must be a boolean, got {env.get_raw('BUILDLOG_CONSOLE')!r}")
    return ListenerSettings(
        seq_url=env.get_seq_url(),
        seq_api_key=env.get_seq_api_key(),
        verbosity=LoggerVerbosity.parse(env.get_verbosity_name()),
        batch_size=_parse_int("BUILDLOG_BATCH_SIZE", env.DEFAULT_BATCH_SIZE),
        http_timeout_sec=_parse_float("BUILDLOG_HTTP_TIMEOUT_SEC", env.DEFAULT_HTTP_TIMEOUT_SEC),
        console=console,
    )
