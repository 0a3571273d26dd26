"""Field accessors: how a constraint reads a property off a candidate object.

The accessor is picked when a contract or contextual constraint is built,
never guessed from the object at match time.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any


class MappingAccessor:
    """Reads keys from mappings and integer indexes from sequences.

    String and non-string keys are tried as given, then as ``str(key)``,
    since stored records are string-keyed.
    """

    def get(self, obj: Any, key: Any) -> Any:
        if isinstance(obj, Mapping):
            if key in obj:
                return obj[key]
            return obj.get(str(key))
        if _indexable(obj, key):
            return obj[key]
        return None

    def has(self, obj: Any, key: Any) -> bool:
        if isinstance(obj, Mapping):
            return key in obj or str(key) in obj
        return _indexable(obj, key)

    def __repr__(self) -> str:
        return "MappingAccessor()"

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self)

    def __hash__(self) -> int:
        return hash(type(self))


class AttributeAccessor:
    """Reads attributes from plain objects, dataclasses and entities."""

    def get(self, obj: Any, key: Any) -> Any:
        if not isinstance(key, str):
            return None
        return getattr(obj, key, None)

    def has(self, obj: Any, key: Any) -> bool:
        return isinstance(key, str) and hasattr(obj, key)

    def __repr__(self) -> str:
        return "AttributeAccessor()"

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self)

    def __hash__(self) -> int:
        return hash(type(self))


def _indexable(obj: Any, key: Any) -> bool:
    return (
        isinstance(obj, Sequence)
        and not isinstance(obj, (str, bytes))
        and isinstance(key, int)
        and not isinstance(key, bool)
        and -len(obj) <= key < len(obj)
    )


def dig(accessor: Any, obj: Any, path: Sequence[Any]) -> tuple[Any, Any, Any]:
    """Follow ``path`` from ``obj``.

    Returns ``(container, key, value)``: the object holding the final value,
    the last key followed and the value itself. An empty path gives
    ``(obj, None, obj)``.
    """
    container, key, value = obj, None, obj
    for key in path:
        container = value
        value = accessor.get(container, key)
    return container, key, value


__all__ = [
    "MappingAccessor",
    "AttributeAccessor",
    "dig",
]
