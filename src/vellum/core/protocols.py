"""
Structural protocols shared across vellum.

Collections, constraints and contracts meet at a handful of small seams: a
transform that maps stored records to entities, an accessor that reads a
field off a candidate object, a guard that decides whether a constraint
applies, and anything that can ``match`` an object. They are declared here
once and imported everywhere else.

Architecture:
    ::

        protocols.py
        ├── Transform      normalize(entity) / denormalize(record)
        ├── FieldAccessor  get(obj, key) with missing fields read as None
        ├── Guard          guard(value, key, collection, property) -> bool
        └── Matchable      match / negated_match returning (bool, ErrorSet)

    Consumers:
        collections/collection.py, collections/query.py,
        constraints/contextual.py, contracts/contract.py

Guardrails:
    ❌ DON'T: Inspect a guard's arity to decide what to pass it
    ✅ DO: Call every guard with (value, key, collection, property)

Tags:
    protocol, transform, accessor, guard, vellum
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from vellum.core.error_set import ErrorSet


@runtime_checkable
class Transform(Protocol):
    """Bidirectional mapping between stored records and domain entities.

    ``normalize`` must return a string-keyed mapping; ``denormalize`` may
    return the record itself or any richer object.
    """

    def normalize(self, entity: Any) -> Mapping[str, Any]: ...

    def denormalize(self, record: Mapping[str, Any]) -> Any: ...


@runtime_checkable
class FieldAccessor(Protocol):
    """Reads a named field from a candidate object."""

    def get(self, obj: Any, key: Any) -> Any:
        """Return the field value, or None when the field is missing."""
        ...

    def has(self, obj: Any, key: Any) -> bool: ...


class Guard(Protocol):
    """``if``/``unless`` condition with a fixed four-argument shape."""

    def __call__(self, value: Any, key: Any, collection: Any, property: Any) -> bool: ...


@runtime_checkable
class Matchable(Protocol):
    """Anything that can validate an object into an ErrorSet."""

    def match(self, obj: Any, errors: ErrorSet | None = None) -> tuple[bool, ErrorSet]: ...

    def negated_match(self, obj: Any, errors: ErrorSet | None = None) -> tuple[bool, ErrorSet]: ...


__all__ = [
    "Transform",
    "FieldAccessor",
    "Guard",
    "Matchable",
]
