"""
Immutable, chainable queries over a collection's backing records.

Manifesto:
    A query is a value. ``matching``, ``limit``, ``offset`` and ``order``
    never touch the receiver: each returns a new query with one more
    criterion appended. Nothing is evaluated until a terminal operation
    (``count``, ``to_list``, iteration, ``one``, ``exists``, ``pluck``) runs.

Architecture:
    ::

        collection.query()                      Query(data, criteria=())
            .matching({"author": "Le Guin"})    Query(data, (Match,))
            .order({"title": "desc"})           Query(data, (Match, Order))
            .limit(2)                           Query(data, (Match, Order, Limit))
            .to_list()
                 │
                 ▼
        snapshot(data) → Match.apply → Order.apply → Limit.apply → denormalize

    ``NullQuery`` has the same surface, returns itself from every chain
    method, and yields nothing without reading any data.

Examples:
    >>> books.query().matching({"author": "Le Guin"}).count()
    2
    >>> books.query().limit(0).to_list()
    []
    >>> books.query().none().count()
    0

Guardrails:
    ❌ DON'T: Reorder criteria for efficiency
    ✅ DO: Apply criteria strictly in chain order (limit→match differs from match→limit)

Tags:
    query, lazy-evaluation, immutable, criteria, vellum
"""

from __future__ import annotations

import contextlib
from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any

from vellum.collections.criteria import (
    Criterion,
    LimitCriterion,
    MatchCriterion,
    OffsetCriterion,
    OrderCriterion,
    dig,
    is_missing,
)
from vellum.collections.validation import validate_selector
from vellum.core.errors import AbstractMethodError
from vellum.core.protocols import Transform


class BaseQuery:
    """Abstract query interface.

    Subclasses implement ``count``, ``__iter__``, ``records`` and the chain
    methods. Everything else is derived from them.
    """

    # -- Chain -------------------------------------------------------------

    def matching(self, selector: Mapping[str, Any]) -> BaseQuery:
        raise AbstractMethodError(self, "matching")

    def where(self, selector: Mapping[str, Any]) -> BaseQuery:
        return self.matching(selector)

    def limit(self, count: int) -> BaseQuery:
        raise AbstractMethodError(self, "limit")

    def offset(self, count: int) -> BaseQuery:
        raise AbstractMethodError(self, "offset")

    def skip(self, count: int) -> BaseQuery:
        return self.offset(count)

    def order(self, *fields: str | Mapping[str, str]) -> BaseQuery:
        raise AbstractMethodError(self, "order")

    def none(self) -> NullQuery:
        return NullQuery()

    # -- Terminals ---------------------------------------------------------

    def count(self) -> int:
        raise AbstractMethodError(self, "count")

    def __iter__(self) -> Iterator[Any]:
        raise AbstractMethodError(self, "__iter__")

    def records(self) -> Iterator[Mapping[str, Any]]:
        """Raw matching records, before the transform is applied."""
        raise AbstractMethodError(self, "records")

    def each(self, callback: Callable[[Any], Any] | None = None) -> Iterator[Any] | None:
        """Iterate the results, or call ``callback`` with each one."""
        if callback is None:
            return iter(self)
        for item in self:
            callback(item)
        return None

    def to_list(self) -> list[Any]:
        return list(self)

    def one(self) -> Any:
        """First result, or None."""
        return next(iter(self.limit(1)), None)

    def first(self) -> Any:
        return self.one()

    def exists(self) -> bool:
        return self.count() > 0

    def pluck(self, field: str) -> list[Any]:
        """Value of ``field`` for every raw record; missing fields give None."""
        values = []
        for record in self.records():
            value = dig(record, (field,))
            values.append(None if is_missing(value) else value)
        return values


class Query(BaseQuery):
    """Query over an in-memory list of string-keyed records.

    Parameters:
        data: The backing list. It is owned by the repository; the query
              only reads it, taking a snapshot at evaluation time.
        criteria: Criteria applied in order.
        transform: Applied to each record by iteration (not by ``pluck``).
        lock: Held while the snapshot is taken.
    """

    def __init__(
        self,
        data: Sequence[Mapping[str, Any]],
        criteria: tuple[Criterion, ...] = (),
        *,
        transform: Transform | None = None,
        lock: Any = None,
    ):
        self._data = data
        self.criteria = tuple(criteria)
        self.transform = transform
        self._lock = lock

    def _with(self, criterion: Criterion) -> Query:
        return Query(
            self._data,
            (*self.criteria, criterion),
            transform=self.transform,
            lock=self._lock,
        )

    # -- Chain -------------------------------------------------------------

    def matching(self, selector: Mapping[str, Any]) -> Query:
        validate_selector(selector)
        return self._with(MatchCriterion(selector))

    def limit(self, count: int) -> Query:
        return self._with(LimitCriterion(count))

    def offset(self, count: int) -> Query:
        return self._with(OffsetCriterion(count))

    def order(self, *fields: str | Mapping[str, str]) -> Query:
        return self._with(OrderCriterion.from_fields(*fields))

    # -- Terminals ---------------------------------------------------------

    def _snapshot(self) -> list[Mapping[str, Any]]:
        with self._lock if self._lock is not None else contextlib.nullcontext():
            return list(self._data)

    def records(self) -> Iterator[Mapping[str, Any]]:
        dataset: Any = iter(self._snapshot())
        for criterion in self.criteria:
            dataset = criterion.apply(dataset)
        return dataset

    def __iter__(self) -> Iterator[Any]:
        if self.transform is None:
            return self.records()
        return (self.transform.denormalize(record) for record in self.records())

    def count(self) -> int:
        return sum(1 for _ in self.records())

    def __repr__(self) -> str:
        return f"Query(criteria={list(self.criteria)!r})"


class NullQuery(BaseQuery):
    """Query over nothing. Chain methods return self; terminals are empty."""

    def matching(self, selector: Mapping[str, Any]) -> NullQuery:
        return self

    def limit(self, count: int) -> NullQuery:
        return self

    def offset(self, count: int) -> NullQuery:
        return self

    def order(self, *fields: str | Mapping[str, str]) -> NullQuery:
        return self

    def none(self) -> NullQuery:
        return self

    def count(self) -> int:
        return 0

    def exists(self) -> bool:
        return False

    def one(self) -> None:
        return None

    def records(self) -> Iterator[Mapping[str, Any]]:
        return iter(())

    def __iter__(self) -> Iterator[Any]:
        return iter(())

    def __repr__(self) -> str:
        return "NullQuery()"


__all__ = [
    "BaseQuery",
    "Query",
    "NullQuery",
]
