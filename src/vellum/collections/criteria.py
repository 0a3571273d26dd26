"""
Query criteria: single filtering or shaping steps over a record stream.

A :class:`~vellum.collections.query.Query` holds an ordered tuple of
criteria and threads the backing records through each one in turn. Every
criterion is an immutable value whose :meth:`Criterion.apply` takes an
iterable of records and returns a new lazy iterator; the input is never
mutated.

Architecture:
    ::

        records ──▶ MatchCriterion ──▶ OrderCriterion ──▶ OffsetCriterion ──▶ LimitCriterion ──▶ results
                    (selector)         (stable sort)      (skip n)            (take n)

        Chain order is significant:
            matching(S).limit(2)  → first two records that match S
            limit(2).matching(S)  → records among the first two that match S

Selectors:
    A selector is a mapping of field names to expected values. A record
    matches when it contains every pair (superset semantics). Nested
    mappings match nested records key by key. Keys starting with ``__``
    are operators applied to the value at the current path:

    ============  ==========================================================
    ``__eq``      value equals the operand
    ``__ne``      value differs from the operand, or the field is missing
    ``__in``      value is contained in the operand collection
    ============  ==========================================================

Examples:
    >>> list(MatchCriterion({"author": "Le Guin"}).apply(records))
    >>> list(MatchCriterion({"meta": {"pages": {"__in": [100, 200]}}}).apply(records))
    >>> list(OrderCriterion.from_fields("author", {"title": "desc"}).apply(records))

Tags:
    query, criteria, selector, ordering, vellum
"""

from __future__ import annotations

import functools
import itertools
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from vellum.core.errors import AbstractMethodError, QueryError

Record = Mapping[str, Any]

_MISSING = object()


def dig(record: Any, keys: Iterable[Any]) -> Any:
    """Follow ``keys`` into nested mappings; return ``_MISSING`` if any step is absent."""
    value = record
    for key in keys:
        if not isinstance(value, Mapping):
            return _MISSING
        if key in value:
            value = value[key]
        elif str(key) in value:
            value = value[str(key)]
        else:
            return _MISSING
    return value


def is_missing(value: Any) -> bool:
    return value is _MISSING


# -- Selector operators --------------------------------------------------------


def _filter_eq(actual: Any, expected: Any) -> bool:
    return actual is not _MISSING and actual == expected


def _filter_ne(actual: Any, expected: Any) -> bool:
    return actual is _MISSING or actual != expected


def _filter_in(actual: Any, expected: Any) -> bool:
    return actual is not _MISSING and actual in expected


OPERATORS = {
    "eq": _filter_eq,
    "ne": _filter_ne,
    "in": _filter_in,
}


@dataclass(frozen=True)
class Criterion:
    """Base class for query criteria."""

    def apply(self, dataset: Iterable[Record]) -> Iterator[Record]:
        raise AbstractMethodError(self, "apply")


@dataclass(frozen=True)
class MatchCriterion(Criterion):
    """Keep records that contain every key/value pair in ``selector``."""

    selector: Mapping[str, Any]
    filters: tuple[tuple[str, tuple[Any, ...], Any], ...] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        filters: list[tuple[str, tuple[Any, ...], Any]] = []
        self._parse(self.selector, (), filters)
        object.__setattr__(self, "filters", tuple(filters))

    def _parse(self, selector: Mapping[str, Any], keys: tuple[Any, ...], filters: list) -> None:
        for key, value in selector.items():
            if isinstance(key, str) and key.startswith("__"):
                operator = key[2:]
                if operator not in OPERATORS:
                    raise QueryError(f"unknown selector operator {key!r}")
                if operator == "in" and (
                    isinstance(value, (str, bytes)) or not isinstance(value, Iterable)
                ):
                    raise QueryError(f"expected {key!r} operand to be a collection, but was {value!r}")
                filters.append((operator, keys, value))
            elif isinstance(value, Mapping):
                self._parse(value, (*keys, key), filters)
            else:
                filters.append(("eq", (*keys, key), value))

    def matches(self, record: Record) -> bool:
        return all(
            OPERATORS[operator](dig(record, keys), expected)
            for operator, keys, expected in self.filters
        )

    def apply(self, dataset: Iterable[Record]) -> Iterator[Record]:
        return (record for record in dataset if self.matches(record))


def _validate_count(name: str, count: Any) -> None:
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise QueryError(f"expected {name} to be a non-negative integer, but was {count!r}")


@dataclass(frozen=True)
class LimitCriterion(Criterion):
    """Keep at most ``count`` records, in their original order."""

    count: int

    def __post_init__(self) -> None:
        _validate_count("limit", self.count)

    def apply(self, dataset: Iterable[Record]) -> Iterator[Record]:
        return itertools.islice(dataset, self.count)


@dataclass(frozen=True)
class OffsetCriterion(Criterion):
    """Skip the first ``count`` records."""

    count: int

    def __post_init__(self) -> None:
        _validate_count("offset", self.count)

    def apply(self, dataset: Iterable[Record]) -> Iterator[Record]:
        return itertools.islice(dataset, self.count, None)


_DIRECTIONS = {
    "asc": "asc",
    "ascending": "asc",
    "desc": "desc",
    "descending": "desc",
}


def _compare(first: Any, second: Any) -> int:
    if first is None or first is _MISSING:
        return 0 if second is None or second is _MISSING else 1
    if second is None or second is _MISSING:
        return -1
    return (first > second) - (first < second)


@dataclass(frozen=True)
class OrderCriterion(Criterion):
    """Stable sort by one or more ``(field, direction)`` pairs.

    Missing and ``None`` values sort after every other value in ascending
    order (and so before them in descending order).
    """

    ordering: tuple[tuple[str, str], ...]

    def __post_init__(self) -> None:
        if not self.ordering:
            raise QueryError("ordering can't be empty")
        for attribute, direction in self.ordering:
            if direction not in ("asc", "desc"):
                raise QueryError(f"invalid ordering ({attribute!r} => {direction!r})")

    @classmethod
    def from_fields(cls, *fields: str | Mapping[str, str]) -> OrderCriterion:
        """Build an ordering from field names and ``{field: direction}`` mappings."""
        ordering: dict[str, str] = {}
        for item in fields:
            if isinstance(item, str):
                ordering[item] = "asc"
            elif isinstance(item, Mapping):
                for attribute, direction in item.items():
                    if not isinstance(attribute, str):
                        raise QueryError(f"invalid ordering - {attribute!r}: {direction!r}")
                    normalized = _DIRECTIONS.get(str(direction).lower())
                    if normalized is None:
                        raise QueryError(
                            f"invalid ordering ({attribute!r} => {direction!r}) - sort direction "
                            'must be "ascending" (or "asc") or "descending" (or "desc")'
                        )
                    ordering[attribute] = normalized
            else:
                raise QueryError(f"invalid ordering - {item!r}")
        return cls(tuple(ordering.items()))

    def _cmp(self, first: Record, second: Record) -> int:
        for attribute, direction in self.ordering:
            result = _compare(dig(first, (attribute,)), dig(second, (attribute,)))
            if result:
                return result if direction == "asc" else -result
        return 0

    def apply(self, dataset: Iterable[Record]) -> Iterator[Record]:
        return iter(sorted(dataset, key=functools.cmp_to_key(self._cmp)))


__all__ = [
    "Criterion",
    "MatchCriterion",
    "LimitCriterion",
    "OffsetCriterion",
    "OrderCriterion",
    "OPERATORS",
    "dig",
    "is_missing",
]
