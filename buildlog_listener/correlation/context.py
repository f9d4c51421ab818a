"""
Tag names and the immutable per-build log context.

LogContext carries the tags that stay attached to every record once known
(the build identifier). The router swaps in a new instance when the root
project is observed instead of mutating a shared logger.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

TAG_ENVIRONMENT = "Environment"
TAG_PROPERTIES = "Properties"
TAG_BUILD_ID = "BuildID"
TAG_PROJECT_PATH = "ProjectPath"
TAG_TARGET_NAME = "TargetName"
TAG_TASK_NAME = "TaskName"
TAG_TARGET_OUTPUT_ITEMS = "TargetOutputItems"
TAG_WARNINGS = "Warnings"
TAG_ERRORS = "Errors"
TAG_TIME_ELAPSED = "TimeElapsed"


def derive_build_id(root_project_path: str, build_started_at: datetime | None) -> str:
    """Deterministic build id from the root project path and build start time."""
    stamp = build_started_at.isoformat() if build_started_at is not None else ""
    h = hashlib.sha256(f"{root_project_path}|{stamp}".encode()).hexdigest()[:12]
    return f"build_{h}"


@dataclass(frozen=True)
class LogContext:
    """Permanent tags threaded into every emission of one build."""

    build_id: str | None = None

    def with_build_id(self, build_id: str) -> "LogContext":
        return replace(self, build_id=build_id)

    def as_tags(self) -> dict[str, Any]:
        """Omits unset values."""
        tags: dict[str, Any] = {}
        if self.build_id:
            tags[TAG_BUILD_ID] = self.build_id
        return tags

    def apply(self, tags: dict[str, Any]) -> dict[str, Any]:
        """Return tags merged with the permanent context tags."""
        return {**tags, **self.as_tags()}
