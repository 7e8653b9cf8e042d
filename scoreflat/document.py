"""Helpers for walking the JSON form of a MusicXML document."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def get_path(node: Any, *keys: str) -> Any:
    """
    Follow ``keys`` down the document tree.

    Returns None as soon as a segment is missing or an intermediate node is
    not a mapping.
    """
    current = node
    for key in keys:
        if not isinstance(current, Mapping) or key not in current:
            return None
        current = current[key]
    return current


def has_path(node: Any, *keys: str) -> bool:
    """True when every segment of ``keys`` exists, even if the leaf is empty."""
    current = node
    for key in keys:
        if not isinstance(current, Mapping) or key not in current:
            return False
        current = current[key]
    return True


def as_sequence(value: Any) -> list[Any]:
    """
    Normalise a child element to a list.

    xml-to-json converters emit a lone child as an object and repeated
    children as an array; callers always get a list back.
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def first(value: Any) -> Any:
    """First entry of a possibly repeated child, or None."""
    items = as_sequence(value)
    return items[0] if items else None


def parse_int(value: Any) -> int | None:
    """
    Parse the leading decimal integer of ``value``.

    Mirrors JavaScript ``parseInt``: ``"120.5"`` -> 120, ``" 90bpm"`` -> 90.
    Returns None when no integer can be read.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return int(value)
    if isinstance(value, str):
        match = _INT_PREFIX.match(value)
        if match:
            return int(match.group(1))
    return None
