"""
Message-template helpers (Serilog-style holes such as {ProjectFile}).

Holes bind to positional arguments in order of first appearance. A hole may
carry a capture hint (@ or $) and a format after a colon: {Elapsed:c}.
Doubled braces are literal.
"""

from __future__ import annotations

import re
from typing import Any, Sequence

_HOLE_RE = re.compile(r"\{\{|\}\}|\{([@$]?)([A-Za-z_][A-Za-z0-9_]*)(?:,-?\d+)?(?::([^}]*))?\}")


def hole_names(template: str) -> list[str]:
    """Distinct hole names in order of first appearance."""
    names: list[str] = []
    for match in _HOLE_RE.finditer(template):
        name = match.group(2)
        if name and name not in names:
            names.append(name)
    return names


def bind_template(template: str, args: Sequence[Any]) -> dict[str, Any]:
    """
    Bind positional args to the template's holes.

    Extra args are dropped and holes without an arg stay unbound, matching how
    Seq treats a template/argument count mismatch.
    """
    return dict(zip(hole_names(template), args))


def _format_value(value: Any, fmt: str | None) -> str:
    if fmt:
        try:
            return format(value, fmt)
        except (TypeError, ValueError):
            pass
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(str(v) for v in value) + "]"
    return str(value)


def render_template(template: str, args: Sequence[Any]) -> str:
    """Render the template as plain text; unbound holes are left as written."""
    bound = bind_template(template, args)

    def _sub(match: re.Match[str]) -> str:
        token = match.group(0)
        if token == "{{":
            return "{"
        if token == "}}":
            return "}"
        name = match.group(2)
        if name not in bound:
            return token
        return _format_value(bound[name], match.group(3))

    return _HOLE_RE.sub(_sub, template)
