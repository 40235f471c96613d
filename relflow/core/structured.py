"""Narrowing helpers for untyped data: parsed ``relflow.toml`` tables and
``gh api`` / build-record JSON payloads.

Each accessor checks the runtime type and returns None on anything
unexpected, so callers decide whether a missing value is an error.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeGuard, cast

StrDict = dict[str, object]
ObjList = list[object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    return isinstance(obj, dict) and all(
        isinstance(key, str) for key in cast(dict[object, object], obj)
    )


def as_str_dict(obj: object) -> StrDict | None:
    return obj if is_str_dict(obj) else None


def as_obj_list(obj: object) -> ObjList | None:
    return cast(ObjList, obj) if isinstance(obj, list) else None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """String value with surrounding whitespace removed; blank counts as missing."""
    raw = table.get(key)
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return None


def get_raw_str(table: Mapping[str, object], key: str) -> str | None:
    """String value kept byte for byte (regex patterns, free text)."""
    raw = table.get(key)
    if isinstance(raw, str) and raw:
        return raw
    return None


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(table.get(key))


def get_str_list(table: Mapping[str, object], key: str) -> list[str] | None:
    """List of non-blank strings, stripped.

    One bad item (wrong type or blank) rejects the whole list.
    """
    items = as_obj_list(table.get(key))
    if items is None:
        return None
    if not all(isinstance(item, str) and item.strip() for item in items):
        return None
    return [cast(str, item).strip() for item in items]
