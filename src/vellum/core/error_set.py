"""
Path-nested error container returned by collections and contracts.

An :class:`ErrorSet` is a tree. Every node holds a list of error entries
(``type`` + ``params``) and a mapping of child keys to child nodes. Indexing
returns a *view* onto a child node that shares storage with the parent, so a
constraint can be handed ``errors["title"]`` and write into the right place
without knowing where it sits in the tree.

Architecture:
    ::

        errors = ErrorSet()
        errors["articles"][1]["title"].add(PresenceConstraint.EMPTY_ERROR)

        root ─┬─ entries: []
              └─ "articles" ─┬─ entries: []
                             └─ 1 ─┬─ entries: []
                                   └─ "title" ── entries: [{type, params}]

        list(errors)
        # [ErrorRecord(type='...empty', params={}, path=('articles', 1, 'title'))]

Examples:
    >>> errors = ErrorSet()
    >>> errors["title"].add("vellum.constraints.errors.empty")
    ErrorSet(...)
    >>> errors.count()
    1
    >>> errors == []
    False
    >>> errors.includes({"type": "vellum.constraints.errors.empty", "path": ("title",)})
    True

Tags:
    errors, validation, nested-paths, vellum
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ErrorRecord:
    """One error as yielded by iterating an :class:`ErrorSet`.

    Attributes:
        type: Error type identifier (a dotted string constant)
        params: Extra parameters describing the failure
        path: Keys leading from the root of the error tree to the error
    """

    type: str
    params: dict[str, Any] = field(default_factory=dict)
    path: tuple[Any, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "params": dict(self.params), "path": list(self.path)}

    @classmethod
    def coerce(cls, value: Any) -> ErrorRecord:
        """Build a record from a record, a mapping or a bare type string."""
        if isinstance(value, ErrorRecord):
            return value
        if isinstance(value, Mapping):
            return cls(
                type=value["type"],
                params=dict(value.get("params") or {}),
                path=tuple(value.get("path") or ()),
            )
        if isinstance(value, str):
            return cls(type=value)
        raise TypeError(f"cannot compare {value!r} to an error record")


class _ErrorNode:
    __slots__ = ("entries", "children")

    def __init__(self) -> None:
        self.entries: list[dict[str, Any]] = []
        self.children: dict[Any, _ErrorNode] = {}

    def child(self, key: Any) -> _ErrorNode:
        node = self.children.get(key)
        if node is None:
            node = self.children[key] = _ErrorNode()
        return node

    def count(self) -> int:
        return len(self.entries) + sum(node.count() for node in self.children.values())

    def has_errors(self) -> bool:
        if self.entries:
            return True
        return any(node.has_errors() for node in self.children.values())

    def walk(self, path: tuple[Any, ...]) -> Iterator[ErrorRecord]:
        for entry in self.entries:
            yield ErrorRecord(type=entry["type"], params=entry["params"], path=path)
        for key, node in self.children.items():
            yield from node.walk((*path, key))

    def absorb(self, other: _ErrorNode) -> None:
        self.entries.extend(
            {"type": entry["type"], "params": dict(entry["params"])} for entry in other.entries
        )
        for key, node in other.children.items():
            self.child(key).absorb(node)


class ErrorSet:
    """Mutable, path-nested multiset of error records.

    Parameters:
        path: Path of this view from the root of the tree. Only views built
              by indexing need it; a fresh ErrorSet sits at the root.
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, *, path: Iterable[Any] = (), _node: _ErrorNode | None = None) -> None:
        self._path = tuple(path)
        self._node = _node if _node is not None else _ErrorNode()

    # -- Navigation --------------------------------------------------------

    @property
    def path(self) -> tuple[Any, ...]:
        """Keys leading from the root of the tree to this view."""
        return self._path

    def __getitem__(self, key: Any) -> ErrorSet:
        """Return a view scoped to the child ``key``, creating it if needed."""
        return ErrorSet(path=(*self._path, key), _node=self._node.child(key))

    def dig(self, *keys: Any) -> ErrorSet:
        """Return the view reached by indexing with each key in turn."""
        view = self
        for key in keys:
            view = view[key]
        return view

    def keys(self) -> list[Any]:
        """Keys of the child nodes directly below this view that hold errors."""
        return [key for key, node in self._node.children.items() if node.has_errors()]

    def __contains__(self, key: Any) -> bool:
        node = self._node.children.get(key)
        return node is not None and node.has_errors()

    # -- Mutation ----------------------------------------------------------

    def add(self, error_type: str, /, **params: Any) -> ErrorSet:
        """Append an error to this node. Returns self for chaining."""
        self._node.entries.append({"type": str(error_type), "params": params})
        return self

    def update(self, other: ErrorSet) -> ErrorSet:
        """Copy every error (and its nesting) from ``other`` into this node."""
        if other._node is not self._node:
            # snapshot first; other may be an ancestor of this view
            self._node.absorb(other.copy()._node)
        return self

    def merge(self, other: ErrorSet) -> ErrorSet:
        """Return a new ErrorSet combining this view and ``other``."""
        return self.copy().update(other)

    def copy(self) -> ErrorSet:
        """Deep copy of this view, detached from the parent tree."""
        node = _ErrorNode()
        node.absorb(self._node)
        return ErrorSet(path=self._path, _node=node)

    def clear(self) -> ErrorSet:
        """Remove every error at and below this view."""
        self._node.entries.clear()
        self._node.children.clear()
        return self

    def delete(self, key: Any) -> ErrorSet:
        """Detach the child ``key`` and return it as its own ErrorSet."""
        node = self._node.children.pop(key, None) or _ErrorNode()
        return ErrorSet(path=(*self._path, key), _node=node)

    # -- Inspection --------------------------------------------------------

    def __iter__(self) -> Iterator[ErrorRecord]:
        return self._node.walk(self._path)

    def count(self) -> int:
        """Number of errors at and below this view."""
        return self._node.count()

    def __len__(self) -> int:
        return self.count()

    def is_empty(self) -> bool:
        return not self._node.has_errors()

    def __bool__(self) -> bool:
        return self._node.has_errors()

    def includes(self, expected: Any) -> bool:
        """True if any error matches ``expected``.

        ``expected`` may be a type string, or a mapping with ``type`` and
        optionally ``params`` and ``path``; only the given keys are compared.
        """
        if not isinstance(expected, Mapping):
            return any(record.type == expected for record in self)

        for record in self:
            if record.type != expected.get("type"):
                continue
            if "params" in expected and record.params != dict(expected["params"]):
                continue
            if "path" in expected and record.path != tuple(expected["path"]):
                continue
            return True
        return False

    def to_list(self) -> list[dict[str, Any]]:
        return [record.to_dict() for record in self]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorSet):
            expected = list(other)
        elif isinstance(other, Iterable) and not isinstance(other, (str, bytes)):
            try:
                expected = [ErrorRecord.coerce(item) for item in other]
            except (TypeError, KeyError):
                return False
        else:
            return NotImplemented

        remaining = list(expected)
        for record in self:
            try:
                remaining.remove(record)
            except ValueError:
                return False
        return not remaining

    def __deepcopy__(self, memo: dict[int, Any]) -> ErrorSet:
        return ErrorSet(path=copy.deepcopy(self._path, memo), _node=copy.deepcopy(self._node, memo))

    def __repr__(self) -> str:
        return f"ErrorSet({self.to_list()!r})"


__all__ = [
    "ErrorRecord",
    "ErrorSet",
]
