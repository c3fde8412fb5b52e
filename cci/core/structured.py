"""Helpers for reading untyped TOML tables.

Used at the config boundary: ``tomllib`` hands back plain ``dict`` objects
and these helpers narrow them without trusting their shape.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeGuard, cast

StrDict = dict[str, object]

__all__ = ["StrDict", "as_str_dict", "get_str", "get_str_list", "get_table", "is_str_dict"]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    if is_str_dict(obj):
        return obj
    return None


def get_table(data: Mapping[str, object], key: str) -> StrDict | None:
    """Return ``data[key]`` if it is a table, else None."""
    return as_str_dict(data.get(key))


def get_str(data: Mapping[str, object], key: str) -> str | None:
    """Return ``data[key]`` if it is a non-empty string, else None."""
    value = data.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def get_str_list(data: Mapping[str, object], key: str) -> tuple[str, ...] | None:
    """Return ``data[key]`` as a tuple of strings.

    Returns None when the key is absent. Non-string items make the whole
    value invalid.

    Raises:
        TypeError: If the value is present but not a list of strings.
    """
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise TypeError(f"{key} must be a list of strings")
    items = cast(list[object], value)
    if not all(isinstance(item, str) for item in items):
        raise TypeError(f"{key} must be a list of strings")
    return tuple(cast(list[str], items))
