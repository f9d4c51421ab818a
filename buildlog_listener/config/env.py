"""
Environment variable loading for the build log listener.

- BUILDLOG_SEQ_URL: Seq server the sink connects to (default: http://localhost:5341/)
- BUILDLOG_SEQ_API_KEY: optional Seq API key
- BUILDLOG_VERBOSITY: quiet | minimal | normal | detailed | diagnostic (default: normal)
- BUILDLOG_BATCH_SIZE: records per HTTP POST (default: 100)
- BUILDLOG_HTTP_TIMEOUT_SEC: HTTP timeout (default: 10)
- BUILDLOG_CONSOLE: also write records to the console (default: 1)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is buildlog_listener/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_SEQ_URL = "http://localhost:5341/"
DEFAULT_VERBOSITY = "normal"
DEFAULT_BATCH_SIZE = 100
DEFAULT_HTTP_TIMEOUT_SEC = 10.0

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def load_buildlog_env() -> None:
    """Load .env from project root. Safe to call multiple times; real env vars win."""
    if _ENV_PATH.is_file():
        load_dotenv(_ENV_PATH, override=False)


def get_seq_url() -> str:
    load_buildlog_env()
    return (os.getenv("BUILDLOG_SEQ_URL") or "").strip() or DEFAULT_SEQ_URL


def get_seq_api_key() -> str | None:
    load_buildlog_env()
    return (os.getenv("BUILDLOG_SEQ_API_KEY") or "").strip() or None


def get_verbosity_name() -> str:
    load_buildlog_env()
    return (os.getenv("BUILDLOG_VERBOSITY") or DEFAULT_VERBOSITY).strip().lower()


def get_raw(name: str) -> str | None:
    """Return a stripped env value, or None when unset or blank."""
    load_buildlog_env()
    raw = (os.getenv(name) or "").strip()
    return raw or None


def parse_flag(raw: str | None, default: bool) -> bool | None:
    """Parse a boolean env value; None means the value is not recognized."""
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return None
