"""State addressing — dot paths for reads, slash pointers for patches.

Two syntaxes coexist and must never be mixed:

- Dot paths (``user.address.city``) address values for state reads and
  bindings. They descend through maps only; lists are never indexed.
- Slash pointers (``/products/sku:abc-123/price``) address patch targets.
  A ``key:value`` segment selects the first list element whose field
  ``key`` equals ``value``.

Pure functions, no infrastructure dependencies.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

DOT = "."
SLASH = "/"
KEY_SEPARATOR = ":"


def split_dot_path(path: str) -> list[str]:
    """Split a dot path into segments.

    Empty segments are kept so that malformed paths such as ``a..b``
    resolve to absent instead of silently skipping a level.
    """
    return path.split(DOT)


def get_path(document: Any, path: str) -> Any:
    """Read *path* from *document*, returning ``None`` when absent.

    Descends only through mapping containers. A missing segment, or an
    intermediate value that is not a mapping (lists included), yields
    ``None`` rather than an error.

    Examples:
        >>> get_path({"user": {"name": "Alice"}}, "user.name")
        'Alice'
        >>> get_path({"user": "Alice"}, "user.name") is None
        True
    """
    current: Any = document
    for segment in split_dot_path(path):
        if not isinstance(current, Mapping) or segment not in current:
            return None
        current = current[segment]
    return current


def split_pointer(path: str) -> list[str]:
    """Split a slash pointer into its non-empty segments."""
    return [part for part in path.split(SLASH) if part]


def parse_keyed_segment(segment: str) -> tuple[str, str] | None:
    """Split a ``key:value`` list selector, or return None if not one.

    Only the first separator splits, so values may themselves contain
    colons (``id:urn:x``).
    """
    if KEY_SEPARATOR not in segment:
        return None
    key, value = segment.split(KEY_SEPARATOR, 1)
    if not key:
        return None
    return key, value


def stringify(value: Any) -> str:
    """Render a state value as text, JSON-style for non-strings.

    Booleans and null use their JSON spelling (``true``, ``null``) and
    containers are compact JSON, so output matches what the server sees.
    """
    if isinstance(value, str):
        return value
    if value is None or isinstance(value, (bool, dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)
