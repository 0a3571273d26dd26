"""
Constraint base class and the single evaluation entry point.

A constraint is an immutable predicate with an error vocabulary. Variants
only say *whether* an object matches (:meth:`Constraint.matches_object`) and
*which* error to report each way; :meth:`Constraint.match` and
:meth:`Constraint.negated_match` are written once, here.

Architecture:
    ::

        evaluate(constraint, value, negated=False, errors=None)
                │
                ├── negated=False → constraint.match(value, errors)
                │                       matches_object(value)?
                │                         yes → (True, errors)
                │                         no  → build_errors → (False, errors)
                │
                └── negated=True  → constraint.negated_match(value, errors)
                                        negated_matches_object(value)?
                                          yes → (True, errors)
                                          no  → build_negated_errors → (False, errors)

    ``errors`` threads nesting: a caller hands in ``errors["title"]`` and
    the constraint writes there.

Examples:
    >>> ok, errors = evaluate(NilConstraint(), "x")
    >>> ok, list(errors)
    (False, [ErrorRecord(type='vellum.constraints.errors.not_nil', params={}, path=())])
    >>> evaluate(NilConstraint(), "x", negated=True)[0]
    True

Tags:
    constraint, validation, template-method, vellum
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from vellum.core.error_set import ErrorSet
from vellum.core.errors import AbstractMethodError, InvalidNegationError
from vellum.core.protocols import Matchable

ERROR_PREFIX = "vellum.constraints.errors"


@dataclass(frozen=True)
class Constraint:
    """Base class for atomic constraints.

    Class attributes:
        error_type: Reported when ``match`` fails
        negated_error_type: Reported when ``negated_match`` fails
        negatable: False if the constraint cannot be negated
    """

    error_type: ClassVar[str | None] = None
    negated_error_type: ClassVar[str | None] = None
    negatable: ClassVar[bool] = True

    def match(self, obj: Any, errors: ErrorSet | None = None) -> tuple[bool, ErrorSet]:
        errors = ErrorSet() if errors is None else errors
        if self.matches_object(obj):
            return True, errors
        self.build_errors(obj, errors)
        return False, errors

    def negated_match(self, obj: Any, errors: ErrorSet | None = None) -> tuple[bool, ErrorSet]:
        errors = ErrorSet() if errors is None else errors
        if self.negated_matches_object(obj):
            return True, errors
        self.build_negated_errors(obj, errors)
        return False, errors

    def matches_object(self, obj: Any) -> bool:
        raise AbstractMethodError(self, "matches_object")

    def negated_matches_object(self, obj: Any) -> bool:
        if not self.negatable:
            raise InvalidNegationError(
                f"{type(self).__name__} constraints do not support negated matching"
            )
        return not self.matches_object(obj)

    def error_params(self, obj: Any) -> dict[str, Any]:
        """Parameters attached to both error types."""
        return {}

    def build_errors(self, obj: Any, errors: ErrorSet) -> None:
        if self.error_type is not None:
            errors.add(self.error_type, **self.error_params(obj))

    def build_negated_errors(self, obj: Any, errors: ErrorSet) -> None:
        if self.negated_error_type is not None:
            errors.add(self.negated_error_type, **self.error_params(obj))


def evaluate(
    constraint: Matchable,
    value: Any,
    negated: bool = False,
    errors: ErrorSet | None = None,
) -> tuple[bool, ErrorSet]:
    """Run ``constraint`` against ``value`` in the requested direction."""
    if negated:
        return constraint.negated_match(value, errors)
    return constraint.match(value, errors)


def is_matchable(obj: Any) -> bool:
    """True for constraints, contracts and anything else exposing both match methods."""
    return not isinstance(obj, type) and isinstance(obj, Matchable)


__all__ = [
    "Constraint",
    "ERROR_PREFIX",
    "evaluate",
    "is_matchable",
]
