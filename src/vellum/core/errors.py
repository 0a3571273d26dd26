"""
Structured exception types for vellum.

vellum separates two kinds of failure. **Expected** failures (a record that
does not exist, a payload missing its primary key, an object that fails a
contract) are never raised: they are returned as an
:class:`~vellum.core.error_set.ErrorSet` next to a success flag. The
exceptions in this module are reserved for **programmer errors**: calling an
abstract hook that was never implemented, passing a malformed selector or
limit to a query, declaring a constraint that does not exist.

Manifesto:
    - **Raise for misuse, return for data:** Bad input data is a result,
      a broken call site is an exception
    - **Typed hierarchy:** Each subsystem has its own base class
    - **Rich context:** Errors carry the collection, operation and property
      they were raised for
    - **Error chaining:** Preserve original exceptions as ``cause``

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                       VellumError                                │
        │  (category, context, cause)                                      │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  AbstractMethodError   QueryError           CollectionError      │
        │  (INTERNAL)            (QUERY)              (COLLECTION)         │
        │                             │                     │              │
        │                        InvalidSelectorError  CollectionDefinition│
        │                                              Error               │
        │                                                                  │
        │  ConstraintError                            ConfigError          │
        │  (CONSTRAINT)                               (CONFIG)             │
        │       │                                                          │
        │  UnknownConstraintError   InvalidConstraintError                 │
        │  EmptyConstraintsError    InvalidNegationError                   │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = QueryError("expected limit to be a non-negative integer")
    >>> error.category
    <ErrorCategory.QUERY: 'QUERY'>

    >>> error = CollectionDefinitionError("name is already set")
    >>> error.with_context(collection="books").context.collection
    'books'

Guardrails:
    ❌ DON'T: Raise for a record that fails validation
    ✅ DO: Return ``(False, errors)`` and let the caller branch

    ❌ DON'T: Catch AbstractMethodError in calling code
    ✅ DO: Implement the missing hook

Tags:
    error-handling, exception-hierarchy, programmer-errors, vellum
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from vellum.core.error_set import ErrorSet


class ErrorCategory(str, Enum):
    """
    Categories used to classify raised errors.

    Attributes:
        VALIDATION: Malformed arguments to a validating API
        QUERY: Invalid selector, limit, offset or ordering
        COLLECTION: Invalid collection definition or configuration
        CONSTRAINT: Unknown or malformed constraint declarations
        CONFIG: Invalid settings
        INTERNAL: Incomplete implementations, unexpected state
    """

    VALIDATION = "VALIDATION"
    QUERY = "QUERY"
    COLLECTION = "COLLECTION"
    CONSTRAINT = "CONSTRAINT"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to a raised error.

    Attributes:
        collection: Name of the collection involved
        operation: Public method that raised (``insert``, ``matching``, ...)
        property: Property name for constraint errors
        metadata: Additional key-value pairs
    """

    collection: str | None = None
    operation: str | None = None
    property: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["collection", "operation", "property"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class VellumError(Exception):
    """
    Base exception for all vellum errors.

    Subclasses set ``default_category``. Every instance carries a
    :class:`ErrorContext` that can be extended fluently with
    :meth:`with_context`.

    Examples:
        >>> error = VellumError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.to_dict()["error_type"]
        'VellumError'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> VellumError:
        """
        Add context to this error (fluent API).

        Usage:
            raise QueryError("bad limit").with_context(
                collection="books", operation="limit"
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# INTERNAL ERRORS
# =============================================================================


class AbstractMethodError(VellumError, NotImplementedError):
    """An abstract hook was called on a class that does not implement it.

    These indicate an incomplete implementation, never a runtime condition.
    """

    default_category = ErrorCategory.INTERNAL

    def __init__(self, receiver: Any, method_name: str):
        name = type(receiver).__name__
        super().__init__(f"{name} does not implement :{method_name}")
        self.receiver = receiver
        self.method_name = method_name


# =============================================================================
# QUERY ERRORS
# =============================================================================


class QueryError(VellumError, ValueError):
    """Invalid argument to a query method (limit, offset, order, selector)."""

    default_category = ErrorCategory.QUERY


class InvalidSelectorError(QueryError):
    """A selector was missing or was not a mapping.

    ``errors`` holds the structured error (``SELECTOR_MISSING`` or
    ``SELECTOR_INVALID``) so callers can report it the same way as any
    other collection error.
    """

    def __init__(self, message: str, errors: ErrorSet, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.errors = errors


# =============================================================================
# COLLECTION ERRORS
# =============================================================================


class CollectionError(VellumError):
    """Base class for collection and repository misuse."""

    default_category = ErrorCategory.COLLECTION


class CollectionDefinitionError(CollectionError):
    """Invalid collection definition, name or primary key configuration."""


# =============================================================================
# CONSTRAINT ERRORS
# =============================================================================


class ConstraintError(VellumError):
    """Base class for constraint and contract declaration errors."""

    default_category = ErrorCategory.CONSTRAINT


class UnknownConstraintError(ConstraintError):
    """A constraint was requested by a name that is not registered."""


class InvalidConstraintError(ConstraintError):
    """A constraint declaration is missing parameters or is not a constraint."""


class EmptyConstraintsError(ConstraintError):
    """``constrain`` was called without any constraint to add."""


class InvalidNegationError(ConstraintError):
    """The constraint does not support negated matching."""


# =============================================================================
# CONFIG ERRORS
# =============================================================================


class ConfigError(VellumError):
    """Invalid configuration value."""

    default_category = ErrorCategory.CONFIG


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "VellumError",
    "AbstractMethodError",
    "QueryError",
    "InvalidSelectorError",
    "CollectionError",
    "CollectionDefinitionError",
    "ConstraintError",
    "UnknownConstraintError",
    "InvalidConstraintError",
    "EmptyConstraintsError",
    "InvalidNegationError",
    "ConfigError",
]
