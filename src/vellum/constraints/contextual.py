"""
Contextual and per-element constraints.

A :class:`ContextualConstraint` wraps another constraint with a property to
read, a negation flag and ``if_``/``unless`` guards. Evaluation is a fixed
three-stage pipeline:

    1. **Extraction**: read ``property`` off the object through the
       configured :class:`~vellum.core.protocols.FieldAccessor` (or use the
       object itself when no property is set).
    2. **Guards**: ``if_`` must hold and ``unless`` must not. Otherwise the
       constraint passes with no errors.
    3. **Delegation**: run the wrapped constraint (negated if requested),
       writing its errors under ``errors[property]``.

:class:`EachConstraint` does the same for every element of a list, tuple or
mapping, nesting each element's errors under its index or key.

Guards always receive ``(value, key, collection, property)``. Wrap a
one-argument predicate with :func:`on_value`.

Examples:
    >>> constraint = ContextualConstraint(PresenceConstraint(), property="title")
    >>> ok, errors = constraint.match({"title": ""})
    >>> [record.path for record in errors]
    [('title',)]

    >>> tags = EachConstraint(TypeConstraint(str), property="tags")
    >>> tags.match({"tags": ["a", 2]})[1].includes({"type": NOT_KIND_OF_ERROR, "path": ("tags", 1)})
    True

    >>> draft_only = ContextualConstraint(
    ...     PresenceConstraint(), property="body",
    ...     if_=lambda value, key, collection, prop: collection.get("status") == "draft",
    ... )

Tags:
    constraint, contextual, guards, each, vellum
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar

from vellum.constraints.accessors import MappingAccessor
from vellum.constraints.constraint import ERROR_PREFIX, Constraint, evaluate
from vellum.core.error_set import ErrorSet
from vellum.core.protocols import FieldAccessor, Guard, Matchable

NOT_A_COLLECTION_ERROR = f"{ERROR_PREFIX}.not_a_collection"


def on_value(predicate: Callable[[Any], Any]) -> Guard:
    """Adapt a one-argument predicate to the guard signature."""

    def guard(value: Any, key: Any, collection: Any, property: Any) -> bool:
        return bool(predicate(value))

    return guard


def guards_allow(
    if_: Guard | None,
    unless: Guard | None,
    value: Any,
    key: Any,
    collection: Any,
    property: Any,
) -> bool:
    """True when the guarded constraint should run."""
    if if_ is not None and not if_(value, key, collection, property):
        return False
    if unless is not None and unless(value, key, collection, property):
        return False
    return True


@dataclass(frozen=True)
class ContextualConstraint(Constraint):
    """Applies ``constraint`` to one property of the candidate object."""

    constraint: Matchable
    property: Any = None
    negated: bool = False
    if_: Guard | None = None
    unless: Guard | None = None
    accessor: FieldAccessor = field(default_factory=MappingAccessor)

    def extract(self, obj: Any) -> Any:
        if self.property is None:
            return obj
        return self.accessor.get(obj, self.property)

    def match(self, obj: Any, errors: ErrorSet | None = None) -> tuple[bool, ErrorSet]:
        return self._run(obj, ErrorSet() if errors is None else errors, negated=self.negated)

    def negated_match(self, obj: Any, errors: ErrorSet | None = None) -> tuple[bool, ErrorSet]:
        return self._run(obj, ErrorSet() if errors is None else errors, negated=not self.negated)

    def matches_object(self, obj: Any) -> bool:
        return self.match(obj)[0]

    def _nesting(self, errors: ErrorSet) -> ErrorSet:
        return errors if self.property is None else errors[self.property]

    def _run(self, obj: Any, errors: ErrorSet, negated: bool) -> tuple[bool, ErrorSet]:
        value = self.extract(obj)
        if not guards_allow(self.if_, self.unless, value, self.property, obj, self.property):
            return True, errors

        ok, _ = evaluate(self.constraint, value, negated, self._nesting(errors))
        return ok, errors


@dataclass(frozen=True)
class EachConstraint(ContextualConstraint):
    """Applies ``constraint`` to every element of a list, tuple or mapping.

    Anything else (including ``None`` and strings) fails with
    ``NOT_A_COLLECTION`` regardless of the guards. Guards run per element;
    a skipped element adds no errors and does not affect the result. An
    empty collection always passes.
    """

    NOT_A_COLLECTION_ERROR: ClassVar[str] = NOT_A_COLLECTION_ERROR

    def _run(self, obj: Any, errors: ErrorSet, negated: bool) -> tuple[bool, ErrorSet]:
        items = self.extract(obj)
        nesting = self._nesting(errors)

        if isinstance(items, Mapping):
            pairs = list(items.items())
        elif isinstance(items, (list, tuple)):
            pairs = list(enumerate(items))
        else:
            nesting.add(NOT_A_COLLECTION_ERROR)
            return False, errors

        ok = True
        for key, item in pairs:
            if not guards_allow(self.if_, self.unless, item, key, items, self.property):
                continue
            result, _ = evaluate(self.constraint, item, negated, nesting[key])
            ok = ok and result
        return ok, errors


__all__ = [
    "ContextualConstraint",
    "EachConstraint",
    "NOT_A_COLLECTION_ERROR",
    "guards_allow",
    "on_value",
]
