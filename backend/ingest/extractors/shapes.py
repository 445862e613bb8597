"""
Tolerant accessors for upstream JSON of unknown shape.

Every helper is total: a missing key, a wrong container type or a None along
the way yields the default instead of raising.
"""
from __future__ import annotations

from typing import Any, Optional, Union

PathKey = Union[str, int]


def dig(obj: Any, *path: PathKey, default: Any = None) -> Any:
    """Walk mapping keys and list indexes; return ``default`` on any miss."""
    cur = obj
    for key in path:
        if isinstance(key, int):
            if not isinstance(cur, list) or not -len(cur) <= key < len(cur):
                return default
            cur = cur[key]
        else:
            if not isinstance(cur, dict):
                return default
            cur = cur.get(key)
        if cur is None:
            return default
    return cur


def as_list(value: Any) -> list[Any]:
    """The value itself when it is a list, otherwise an empty list."""
    return value if isinstance(value, list) else []


def first_text(obj: Any, *keys: str) -> str:
    """First non-empty string among ``obj[key]`` for the given keys."""
    if not isinstance(obj, dict):
        return ""
    for key in keys:
        value = obj.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def coalesce(*values: Any) -> Optional[Any]:
    """First value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None
