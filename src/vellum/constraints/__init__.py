"""Constraints: atomic predicates, contextual wrappers and the name-based builder."""

from vellum.constraints.accessors import AttributeAccessor, MappingAccessor
from vellum.constraints.builder import (
    build_constraint,
    extract_constraint,
    normalize_params,
    register_constraint,
)
from vellum.constraints.builtin import (
    BlockConstraint,
    EmptyConstraint,
    EqualityConstraint,
    FailureConstraint,
    IdentityConstraint,
    NilConstraint,
    NotNilConstraint,
    PresenceConstraint,
    SuccessConstraint,
    TypeConstraint,
    is_empty_value,
)
from vellum.constraints.constraint import Constraint, evaluate
from vellum.constraints.contextual import ContextualConstraint, EachConstraint, on_value

__all__ = [
    "AttributeAccessor",
    "MappingAccessor",
    "Constraint",
    "evaluate",
    "NilConstraint",
    "NotNilConstraint",
    "PresenceConstraint",
    "EmptyConstraint",
    "EqualityConstraint",
    "IdentityConstraint",
    "TypeConstraint",
    "BlockConstraint",
    "SuccessConstraint",
    "FailureConstraint",
    "is_empty_value",
    "ContextualConstraint",
    "EachConstraint",
    "on_value",
    "build_constraint",
    "extract_constraint",
    "normalize_params",
    "register_constraint",
]
