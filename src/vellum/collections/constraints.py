"""Constraints that check an object against the records of a collection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

from vellum.constraints.accessors import MappingAccessor
from vellum.constraints.constraint import ERROR_PREFIX, Constraint
from vellum.core.error_set import ErrorSet
from vellum.core.protocols import FieldAccessor

DOES_NOT_EXIST_ERROR = f"{ERROR_PREFIX}.does_not_exist"
EXISTS_ERROR = f"{ERROR_PREFIX}.exists"
NOT_UNIQUE_ERROR = f"{ERROR_PREFIX}.not_unique"


@dataclass(frozen=True)
class ExistsConstraint(Constraint):
    """Matches a selector when ``collection`` holds a matching record.

    ``collection`` is anything with ``matching(selector)`` returning a
    query: a collection or a query. Invalid selectors raise
    :class:`~vellum.core.errors.InvalidSelectorError`.
    """

    collection: Any

    error_type: ClassVar[str] = DOES_NOT_EXIST_ERROR
    negated_error_type: ClassVar[str] = EXISTS_ERROR

    def matches_object(self, obj: Any) -> bool:
        return self.collection.matching(obj).exists()

    def error_params(self, obj: Any) -> dict[str, Any]:
        return {"matching": obj}


@dataclass(frozen=True, init=False)
class UniquenessConstraint(Constraint):
    """Matches an entity when no *other* record shares its attribute values.

    "Other" means a record whose primary key differs from the entity's.
    Cannot be negated.
    """

    collection: Any
    attributes: tuple[str, ...]
    accessor: FieldAccessor = field(default_factory=MappingAccessor)

    error_type: ClassVar[str] = NOT_UNIQUE_ERROR
    negatable: ClassVar[bool] = False

    def __init__(self, collection: Any, *attributes: str, accessor: FieldAccessor | None = None):
        object.__setattr__(self, "collection", collection)
        object.__setattr__(self, "attributes", tuple(attributes))
        object.__setattr__(self, "accessor", accessor or MappingAccessor())

    def attribute_values(self, entity: Any) -> dict[str, Any]:
        return {attribute: self.accessor.get(entity, attribute) for attribute in self.attributes}

    def matches_object(self, obj: Any) -> bool:
        # values are compared whole; a mapping value is not a nested selector
        selector: dict[str, Any] = {
            attribute: {"__eq": value} for attribute, value in self.attribute_values(obj).items()
        }
        primary_key = getattr(self.collection, "primary_key", None)
        if primary_key:
            selector[primary_key] = {"__ne": self.accessor.get(obj, primary_key)}
        return not self.collection.matching(selector).exists()

    def build_errors(self, obj: Any, errors: ErrorSet) -> None:
        errors.add(NOT_UNIQUE_ERROR, matching=self.attribute_values(obj))


__all__ = [
    "ExistsConstraint",
    "UniquenessConstraint",
    "DOES_NOT_EXIST_ERROR",
    "EXISTS_ERROR",
    "NOT_UNIQUE_ERROR",
]
