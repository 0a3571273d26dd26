"""
Contracts: ordered, inheritable sets of constraints over one object.

Manifesto:
    A contract is data. It owns an explicit list of
    :class:`ConstraintRecord` values; inheritance means a child contract
    reads its parent's records before its own. There is no class-level
    registry and no hidden state.

Architecture:
    ::

        Contract(parent=base)
        ├── base.records ... (ancestors first)
        └── own records
              ConstraintRecord(constraint, path=("title",), negated, if_, unless)

        match(obj)
          for record in records:
              container, key, value = dig(obj, record.path)
              guards allow?           no → skip
              evaluate(record.constraint, value,
                       negated=record.negated, errors=errors.dig(*record.path))
          → (all records passed, errors)

    ``negated_match`` runs every record in the opposite direction and
    reports each constraint's own negated error vocabulary.

    A contract is itself a constraint: add one to another contract
    (``add_constraint(child, on="author")``) to validate sub-objects.

Examples:
    >>> contract = Contract()
    >>> contract.constrain("title", present=True)
    >>> contract.match({"title": None})[1].to_list()
    [{'type': 'vellum.constraints.errors.empty', 'params': {}, 'path': ['title']}]
    >>> contract.match({"title": "X"}) == (True, [])
    True

    >>> child = contract.extend()
    >>> child.constrain("isbn", type=str)
    >>> len(child.records)
    2

Guardrails:
    ❌ DON'T: Mutate a parent contract expecting only future children to see it
    ✅ DO: Remember children read parent records live

Tags:
    contract, validation, constraints, inheritance, vellum
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from vellum.constraints.accessors import MappingAccessor, dig
from vellum.constraints.builder import extract_constraint, normalize_params
from vellum.constraints.constraint import evaluate, is_matchable
from vellum.constraints.contextual import guards_allow
from vellum.core.error_set import ErrorSet
from vellum.core.errors import EmptyConstraintsError, InvalidConstraintError
from vellum.core.protocols import FieldAccessor, Guard, Matchable


@dataclass(frozen=True)
class ConstraintRecord:
    """One constraint applied at one path of the validated object."""

    constraint: Matchable
    path: tuple[Any, ...] = ()
    negated: bool = False
    if_: Guard | None = None
    unless: Guard | None = None

    @property
    def property(self) -> Any:
        return self.path[0] if self.path else None


def _normalize_path(on: Any) -> tuple[Any, ...]:
    if on is None:
        return ()
    if isinstance(on, (list, tuple)):
        return tuple(on)
    return (on,)


class Contract:
    """Ordered collection of constraint records.

    Parameters:
        parent: Contract whose records apply first.
        accessor: How properties are read off validated objects.
            Defaults to the parent's accessor, or :class:`MappingAccessor`.
    """

    def __init__(self, *, parent: Contract | None = None, accessor: FieldAccessor | None = None):
        self.parent = parent
        if accessor is None:
            accessor = parent.accessor if parent is not None else MappingAccessor()
        self.accessor = accessor
        self._records: list[ConstraintRecord] = []

    # -- Records -----------------------------------------------------------

    @property
    def own_records(self) -> tuple[ConstraintRecord, ...]:
        return tuple(self._records)

    @property
    def records(self) -> list[ConstraintRecord]:
        """Every applicable record, ancestors first."""
        inherited = self.parent.records if self.parent is not None else []
        return [*inherited, *self._records]

    def is_empty(self) -> bool:
        return not self.records

    def extend(self, *, accessor: FieldAccessor | None = None) -> Contract:
        """New contract of the same class inheriting this one's records."""
        return type(self)(parent=self, accessor=accessor)

    def add_constraint(
        self,
        constraint: Matchable,
        *,
        on: Any = None,
        negated: bool = False,
        if_: Guard | None = None,
        unless: Guard | None = None,
    ) -> Contract:
        """Append a constraint applied at ``on`` (a key or a path)."""
        if not is_matchable(constraint):
            raise InvalidConstraintError(f"{constraint!r} is not a valid constraint")
        self._records.append(
            ConstraintRecord(
                constraint,
                path=_normalize_path(on),
                negated=bool(negated),
                if_=if_,
                unless=unless,
            )
        )
        return self

    def constrain(
        self,
        property: Any = None,
        constraints: Mapping[Any, Any] | None = None,
        /,
        *,
        nested: Callable[[Contract], Any] | Contract | None = None,
        **named: Any,
    ) -> Contract:
        """Declare constraints on ``property`` by name.

        ``constrain("title", present=True, type=str)`` and
        ``constrain("title", {"present": True, "type": str})`` are the same.
        A mapping passed as the only argument constrains the object itself.
        ``nested`` builds (or is) a child contract applied to the property.
        """
        if isinstance(property, Mapping) and constraints is None:
            property, constraints = None, property

        declarations: dict[Any, Any] = dict(constraints or {})
        declarations.update(named)

        if not declarations and nested is None:
            raise EmptyConstraintsError("must specify at least one constraint")

        for key, value in declarations.items():
            options, params = normalize_params(value)
            self.add_constraint(extract_constraint(key, params), on=property, **options)

        if nested is not None:
            child = nested if isinstance(nested, Contract) else self._build_child(nested)
            self.add_constraint(child, on=property)

        return self

    def _build_child(self, block: Callable[[Contract], Any]) -> Contract:
        child = type(self)(accessor=self.accessor)
        block(child)
        return child

    # -- Matching ----------------------------------------------------------

    def match(self, obj: Any, errors: ErrorSet | None = None) -> tuple[bool, ErrorSet]:
        return self._run(obj, ErrorSet() if errors is None else errors, negated=False)

    def negated_match(self, obj: Any, errors: ErrorSet | None = None) -> tuple[bool, ErrorSet]:
        return self._run(obj, ErrorSet() if errors is None else errors, negated=True)

    def _run(self, obj: Any, errors: ErrorSet, negated: bool) -> tuple[bool, ErrorSet]:
        ok = True
        for record in self.records:
            container, key, value = dig(self.accessor, obj, record.path)
            if not guards_allow(record.if_, record.unless, value, key, container, record.property):
                continue
            result, _ = evaluate(
                record.constraint,
                value,
                negated != record.negated,
                errors.dig(*record.path),
            )
            ok = ok and result
        return ok, errors

    def __repr__(self) -> str:
        return f"{type(self).__name__}(records={len(self.records)})"


__all__ = [
    "Contract",
    "ConstraintRecord",
]
