"""Built-in atomic constraints.

======================  =====================  =========================
Constraint              match fails with       negated_match fails with
======================  =====================  =========================
NilConstraint           NOT_NIL                NIL
NotNilConstraint        NIL                    NOT_NIL
PresenceConstraint      EMPTY                  NOT_EMPTY
EmptyConstraint         NOT_EMPTY              EMPTY
EqualityConstraint      NOT_EQUAL_TO           EQUAL_TO
IdentityConstraint      NOT_IDENTICAL_TO       IDENTICAL_TO
TypeConstraint          NOT_KIND_OF            KIND_OF
BlockConstraint         NOT_SATISFY_BLOCK      SATISFY_BLOCK
SuccessConstraint       (never fails)          InvalidNegationError
FailureConstraint       INVALID                (never fails)
======================  =====================  =========================
"""

from __future__ import annotations

from collections.abc import Callable, Sized
from dataclasses import dataclass
from typing import Any, ClassVar

from vellum.constraints.constraint import ERROR_PREFIX, Constraint
from vellum.core.error_set import ErrorSet

EMPTY_ERROR = f"{ERROR_PREFIX}.empty"
NOT_EMPTY_ERROR = f"{ERROR_PREFIX}.not_empty"
NIL_ERROR = f"{ERROR_PREFIX}.nil"
NOT_NIL_ERROR = f"{ERROR_PREFIX}.not_nil"
EQUAL_TO_ERROR = f"{ERROR_PREFIX}.equal_to"
NOT_EQUAL_TO_ERROR = f"{ERROR_PREFIX}.not_equal_to"
IDENTICAL_TO_ERROR = f"{ERROR_PREFIX}.identical_to"
NOT_IDENTICAL_TO_ERROR = f"{ERROR_PREFIX}.not_identical_to"
KIND_OF_ERROR = f"{ERROR_PREFIX}.kind_of"
NOT_KIND_OF_ERROR = f"{ERROR_PREFIX}.not_kind_of"
SATISFY_BLOCK_ERROR = f"{ERROR_PREFIX}.satisfy_block"
NOT_SATISFY_BLOCK_ERROR = f"{ERROR_PREFIX}.not_satisfy_block"
INVALID_ERROR = f"{ERROR_PREFIX}.invalid"


def is_empty_value(value: Any) -> bool:
    """True for sized values of length zero (``""``, ``[]``, ``{}``, ...)."""
    return isinstance(value, Sized) and len(value) == 0


def _type_name(expected: type | tuple[type, ...]) -> str:
    if isinstance(expected, tuple):
        return " | ".join(t.__name__ for t in expected)
    return expected.__name__


@dataclass(frozen=True)
class NilConstraint(Constraint):
    """Matches ``None``."""

    error_type: ClassVar[str] = NOT_NIL_ERROR
    negated_error_type: ClassVar[str] = NIL_ERROR

    def matches_object(self, obj: Any) -> bool:
        return obj is None


@dataclass(frozen=True)
class NotNilConstraint(Constraint):
    """Matches anything but ``None``."""

    error_type: ClassVar[str] = NIL_ERROR
    negated_error_type: ClassVar[str] = NOT_NIL_ERROR

    def matches_object(self, obj: Any) -> bool:
        return obj is not None


@dataclass(frozen=True)
class PresenceConstraint(Constraint):
    """Matches values that are neither ``None`` nor empty."""

    error_type: ClassVar[str] = EMPTY_ERROR
    negated_error_type: ClassVar[str] = NOT_EMPTY_ERROR

    def matches_object(self, obj: Any) -> bool:
        return obj is not None and not is_empty_value(obj)


@dataclass(frozen=True)
class EmptyConstraint(Constraint):
    """Matches ``None`` and empty values."""

    error_type: ClassVar[str] = NOT_EMPTY_ERROR
    negated_error_type: ClassVar[str] = EMPTY_ERROR

    def matches_object(self, obj: Any) -> bool:
        return obj is None or is_empty_value(obj)


@dataclass(frozen=True)
class EqualityConstraint(Constraint):
    """Matches values equal to ``value``."""

    value: Any

    error_type: ClassVar[str] = NOT_EQUAL_TO_ERROR
    negated_error_type: ClassVar[str] = EQUAL_TO_ERROR

    def matches_object(self, obj: Any) -> bool:
        return obj == self.value

    def error_params(self, obj: Any) -> dict[str, Any]:
        return {"value": self.value}


@dataclass(frozen=True)
class IdentityConstraint(Constraint):
    """Matches the very object ``value`` (``is``, not ``==``)."""

    value: Any

    error_type: ClassVar[str] = NOT_IDENTICAL_TO_ERROR
    negated_error_type: ClassVar[str] = IDENTICAL_TO_ERROR

    def matches_object(self, obj: Any) -> bool:
        return obj is self.value

    def error_params(self, obj: Any) -> dict[str, Any]:
        return {"value": self.value}


@dataclass(frozen=True)
class TypeConstraint(Constraint):
    """Matches instances of ``expected_type`` (and ``None`` when ``allow_nil``)."""

    expected_type: type | tuple[type, ...]
    allow_nil: bool = False

    error_type: ClassVar[str] = NOT_KIND_OF_ERROR
    negated_error_type: ClassVar[str] = KIND_OF_ERROR

    def matches_object(self, obj: Any) -> bool:
        if obj is None and self.allow_nil:
            return True
        return isinstance(obj, self.expected_type)

    def error_params(self, obj: Any) -> dict[str, Any]:
        return {"type": _type_name(self.expected_type)}


@dataclass(frozen=True)
class BlockConstraint(Constraint):
    """Matches when ``predicate(obj)`` is truthy.

    ``error`` replaces both default error types.
    """

    predicate: Callable[[Any], Any]
    error: str | None = None

    error_type: ClassVar[str] = NOT_SATISFY_BLOCK_ERROR
    negated_error_type: ClassVar[str] = SATISFY_BLOCK_ERROR

    def matches_object(self, obj: Any) -> bool:
        return bool(self.predicate(obj))

    def build_errors(self, obj: Any, errors: ErrorSet) -> None:
        errors.add(self.error or self.error_type)

    def build_negated_errors(self, obj: Any, errors: ErrorSet) -> None:
        errors.add(self.error or self.negated_error_type)


@dataclass(frozen=True)
class SuccessConstraint(Constraint):
    """Always matches. Cannot be negated."""

    negatable: ClassVar[bool] = False

    def matches_object(self, obj: Any) -> bool:
        return True


@dataclass(frozen=True)
class FailureConstraint(Constraint):
    """Never matches; its negation always does."""

    error_type: ClassVar[str] = INVALID_ERROR

    def matches_object(self, obj: Any) -> bool:
        return False


__all__ = [
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
    "EMPTY_ERROR",
    "NOT_EMPTY_ERROR",
    "NIL_ERROR",
    "NOT_NIL_ERROR",
    "EQUAL_TO_ERROR",
    "NOT_EQUAL_TO_ERROR",
    "IDENTICAL_TO_ERROR",
    "NOT_IDENTICAL_TO_ERROR",
    "KIND_OF_ERROR",
    "NOT_KIND_OF_ERROR",
    "SATISFY_BLOCK_ERROR",
    "NOT_SATISFY_BLOCK_ERROR",
    "INVALID_ERROR",
]
