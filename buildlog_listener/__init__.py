"""
Build log listener — structured, contextualized build logs for Seq.

Subscribes to a build tool's lifecycle events (build, project, target, task,
errors, warnings, messages) and re-emits them as message-template log records
tagged with the build, project, target and task they belong to. Modular
architecture with clear separation between the correlation engine, the event
router, and the log sinks.
"""

__version__ = "0.1.0"
