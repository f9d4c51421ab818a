"""
Configuration management for the build log listener.

Loads and validates settings from environment variables and an optional .env
file. Exposes a single source of truth for sink endpoint, verbosity and
batching.
"""

from buildlog_listener.config.settings import (  # noqa: F401
    ListenerSettings,
    LoggerVerbosity,
    get_settings,
)

__all__ = ["ListenerSettings", "LoggerVerbosity", "get_settings"]
