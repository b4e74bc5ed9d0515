"""Recursive cleaning of JSON-like values before they are written to Firestore.

Firestore rejects empty field names, so every mapping key that is empty or
whitespace-only is dropped. Values that cannot be persisted at all (non-JSON
types, cyclic references) come back as the ``ABSENT`` sentinel so the parent
container can drop them.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Set


class _Absent:
    """Marker for "drop this field/element"."""

    _instance: Optional["_Absent"] = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()

_SCALARS = (str, int, float, bool, type(None))


def _is_blank_key(key: Any) -> bool:
    return not isinstance(key, str) or key.strip() == ""


def _is_vacuous(value: Any) -> bool:
    if value is ABSENT:
        return True
    return isinstance(value, (dict, list)) and len(value) == 0


def _sanitize(value: Any, active: Set[int]) -> Any:
    if isinstance(value, _SCALARS):
        return value

    if isinstance(value, Mapping):
        if id(value) in active:
            return ABSENT
        active.add(id(value))
        try:
            clean: Dict[str, Any] = {}
            for key, val in value.items():
                if _is_blank_key(key):
                    continue
                sanitized = _sanitize(val, active)
                if sanitized is not ABSENT:
                    clean[key] = sanitized
            return clean
        finally:
            active.discard(id(value))

    if isinstance(value, (list, tuple)):
        if id(value) in active:
            return ABSENT
        active.add(id(value))
        try:
            items: List[Any] = []
            for item in value:
                sanitized = _sanitize(item, active)
                # Empty containers inside arrays carry no information.
                if not _is_vacuous(sanitized):
                    items.append(sanitized)
            return items
        finally:
            active.discard(id(value))

    return ABSENT


def sanitize(value: Any) -> Any:
    """Return a copy of ``value`` that is safe to store, or ``ABSENT``.

    - mappings lose blank keys and entries whose value is ``ABSENT``;
    - sequences lose ``ABSENT`` elements and empty containers, order kept;
    - scalars (str, numbers, bool, None) pass through unchanged.

    An empty mapping stays an empty mapping; only the caller decides whether
    an empty top-level result is worth writing (see ``is_writable``).
    """
    return _sanitize(value, set())


def is_writable(value: Any) -> bool:
    """True when ``value`` is a non-empty mapping.

    The check is shallow: ``{"a": {}}`` is writable.
    """
    return isinstance(value, dict) and len(value) > 0
