"""Helpers for safely working with dynamic (untyped) structures.

Use these at boundaries where we ingest package.json, registry output or
distship.toml. They provide runtime validation and static type narrowing.
"""

from __future__ import annotations

import copy
from collections.abc import Sequence
from typing import Mapping, TypeGuard, cast

StrDict = dict[str, object]
ObjList = list[object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    """Return obj as StrDict if it matches, else None."""
    if is_str_dict(obj):
        return obj
    return None


def as_obj_list(obj: object) -> ObjList | None:
    if isinstance(obj, list):
        return cast(ObjList, obj)
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string value from a mapping, stripping whitespace.

    Returns None if missing, not a str, or empty after stripping.
    """
    value = table.get(key)
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def get_int(table: Mapping[str, object], key: str) -> int | None:
    value = table.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    """Get a nested table (dict with string keys) from a mapping."""
    return as_str_dict(table.get(key))


def split_path(dotted: str) -> tuple[str, ...]:
    """Split "release.release" into ("release", "release"), dropping blanks."""
    return tuple(part for part in (p.strip() for p in dotted.split(".")) if part)


def get_path(doc: Mapping[str, object], path: Sequence[str]) -> str | None:
    """Follow nested tables along path and return the string leaf, if any."""
    if not path:
        return None
    current: Mapping[str, object] | None = doc
    for key in path[:-1]:
        if current is None:
            return None
        current = get_table(current, key)
    if current is None:
        return None
    return get_str(current, path[-1])


def with_path(doc: Mapping[str, object], path: Sequence[str], value: str) -> StrDict:
    """Return a deep copy of doc with the string leaf at path set to value.

    Missing intermediate tables are created. The input is never mutated.
    """
    if not path:
        raise ValueError("empty field path")
    out = cast(StrDict, copy.deepcopy(dict(doc)))
    current = out
    for key in path[:-1]:
        child = as_str_dict(current.get(key))
        if child is None:
            child = {}
            current[key] = child
        current = child
    current[path[-1]] = value
    return out
