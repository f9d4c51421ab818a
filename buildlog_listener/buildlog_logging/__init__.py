"""
Structured logging for the build log listener's own diagnostics.

Use get_logger() in listener modules; the router switches to bind_build()
once a build id exists.
"""

from buildlog_listener.buildlog_logging.logger import bind_build, build_processors, configure, get_logger

__all__ = ["bind_build", "build_processors", "configure", "get_logger"]
