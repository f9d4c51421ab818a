"""
Coercion of host property/environment collections into string pairs.

Hosts hand over properties as a mapping or as an iterable of key/value pairs
(tuples, or entry objects exposing .key and .value). Anything else, or any
non-string key, is MalformedProperties.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from buildlog_listener.core.exceptions import MalformedProperties


def _pair(item: Any) -> tuple[Any, Any]:
    if isinstance(item, (tuple, list)) and len(item) == 2:
        return item[0], item[1]
    if hasattr(item, "key") and hasattr(item, "value"):
        return item.key, item.value
    raise MalformedProperties(f"not a key/value pair: {item!r}")


def string_pairs(raw: Any) -> dict[str, str]:
    """Return the collection as a str -> str dict; None gives an empty dict."""
    if raw is None:
        return {}
    if isinstance(raw, Mapping):
        items = list(raw.items())
    elif isinstance(raw, (str, bytes)):
        raise MalformedProperties("expected key/value pairs, got a string")
    else:
        try:
            items = [_pair(item) for item in raw]
        except TypeError as e:
            raise MalformedProperties(f"not iterable: {type(raw).__name__}") from e

    out: dict[str, str] = {}
    for key, value in items:
        if not isinstance(key, str):
            raise MalformedProperties(f"non-string key: {key!r}")
        out[key] = "" if value is None else str(value)
    return out
