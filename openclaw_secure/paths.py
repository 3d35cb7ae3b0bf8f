"""Dot-path access into nested JSON documents.

A path like ``channels.telegram.accounts.0.botToken`` addresses object keys
by name and list items by decimal index. Reads never raise; writes return a
modified deep copy and leave the caller's document untouched.
"""

from __future__ import annotations

import copy
from typing import Any

from openclaw_secure.errors import ValidationError

SEPARATOR = "."


class _Missing:
    """Sentinel for "nothing at this path" (distinct from a JSON null)."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def split_path(path: str) -> list[str]:
    return path.split(SEPARATOR)


def _child(node: Any, segment: str, default: Any) -> Any:
    if isinstance(node, dict):
        return node.get(segment, default)
    if isinstance(node, list) and segment.isdecimal():
        index = int(segment)
        return node[index] if index < len(node) else default
    return default


def get_by_path(obj: Any, path: str, default: Any = None) -> Any:
    """Return the value at ``path``, or ``default`` if any segment is missing."""
    current = obj
    for segment in split_path(path):
        if not isinstance(current, (dict, list)):
            return default
        current = _child(current, segment, MISSING)
        if current is MISSING:
            return default
    return current


def has_path(obj: Any, path: str) -> bool:
    return get_by_path(obj, path, MISSING) is not MISSING


def _assign(node: dict | list, segment: str, value: Any) -> None:
    if isinstance(node, dict):
        node[segment] = value
        return
    if not segment.isdecimal():
        raise ValidationError(f"Cannot address list item with non-numeric segment '{segment}'")
    index = int(segment)
    if index >= len(node):
        node.extend([None] * (index + 1 - len(node)))
    node[index] = value


def set_by_path(obj: dict[str, Any], path: str, value: Any) -> dict[str, Any]:
    """Return a deep copy of ``obj`` with ``value`` written at ``path``.

    Intermediate segments that are missing, null, or scalars are replaced
    by empty objects in the copy.
    """
    result = copy.deepcopy(obj)
    segments = split_path(path)
    current: dict | list = result
    for segment in segments[:-1]:
        child = _child(current, segment, None)
        if not isinstance(child, (dict, list)):
            child = {}
            _assign(current, segment, child)
        current = child
    _assign(current, segments[-1], value)
    return result
