"""
Payload, primary key and selector checks shared by collections and queries.

Each ``_..._error`` helper returns a populated :class:`ErrorSet` when its
check fails and ``None`` when it passes, so a sequence of checks reads as a
chain of ``or`` expressions that stops at the first failure.

Primary key errors are nested under the primary key (``errors["id"]``);
payload and selector errors sit at the root.

Tags:
    validation, collections, primary-key, selector, vellum
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from vellum.collections import errors as codes
from vellum.constraints.builtin import is_empty_value
from vellum.core.error_set import ErrorSet
from vellum.core.errors import InvalidSelectorError


def selector_errors(selector: Any) -> ErrorSet | None:
    """Return SELECTOR_MISSING / SELECTOR_INVALID errors, or None for a mapping."""
    if selector is None:
        return ErrorSet().add(codes.SELECTOR_MISSING)
    if not isinstance(selector, Mapping):
        return ErrorSet().add(codes.SELECTOR_INVALID, selector=selector)
    return None


def validate_selector(selector: Any) -> None:
    """Raise :class:`InvalidSelectorError` unless ``selector`` is a mapping."""
    errors = selector_errors(selector)
    if errors is not None:
        raise InvalidSelectorError(
            f"expected selector to be a mapping, but was {selector!r}", errors
        ).with_context(operation="matching")


def _type_name(expected: type | tuple[type, ...]) -> str:
    if isinstance(expected, tuple):
        return " | ".join(t.__name__ for t in expected)
    return expected.__name__


class CollectionValidation:
    """Validation helpers mixed into collections.

    Expects ``primary_key`` (``str`` or ``None``) and ``primary_key_type``
    on the host class.
    """

    primary_key: str | None
    primary_key_type: type | tuple[type, ...]

    def has_primary_key(self) -> bool:
        return self.primary_key is not None

    # -- Payload -----------------------------------------------------------

    def _data_missing_error(self, data: Any) -> ErrorSet | None:
        if data is None:
            return ErrorSet().add(codes.DATA_MISSING)
        return None

    def _data_invalid_error(self, data: Any) -> ErrorSet | None:
        if not isinstance(data, Mapping):
            return ErrorSet().add(codes.DATA_INVALID, data=data)
        return None

    def _data_empty_error(self, data: Mapping[str, Any]) -> ErrorSet | None:
        if not data:
            return ErrorSet().add(codes.DATA_EMPTY, data=dict(data))
        return None

    def _errors_for_data(self, data: Any) -> ErrorSet | None:
        return (
            self._data_missing_error(data)
            or self._data_invalid_error(data)
            or self._data_empty_error(data)
        )

    # -- Primary key -------------------------------------------------------

    def _no_primary_key_error(self) -> ErrorSet | None:
        if not self.has_primary_key():
            return ErrorSet().add(codes.NO_PRIMARY_KEY)
        return None

    def _primary_key_missing_error(self, value: Any) -> ErrorSet | None:
        if value is None:
            errors = ErrorSet()
            errors[self.primary_key].add(codes.PRIMARY_KEY_MISSING)
            return errors
        return None

    def _primary_key_invalid_error(self, value: Any) -> ErrorSet | None:
        expected = self.primary_key_type
        allowed = expected if isinstance(expected, tuple) else (expected,)
        # bool is an int subclass; True is not a valid integer key
        if not isinstance(value, expected) or (isinstance(value, bool) and bool not in allowed):
            errors = ErrorSet()
            errors[self.primary_key].add(
                codes.PRIMARY_KEY_INVALID,
                type=_type_name(self.primary_key_type),
                value=repr(value),
            )
            return errors
        return None

    def _primary_key_empty_error(self, value: Any) -> ErrorSet | None:
        if is_empty_value(value):
            errors = ErrorSet()
            errors[self.primary_key].add(codes.PRIMARY_KEY_EMPTY, value=str(value))
            return errors
        return None

    def _primary_key_changed_error(self, data: Mapping[str, Any], value: Any) -> ErrorSet | None:
        actual = self._primary_key_value(data)
        if actual != value:
            errors = ErrorSet()
            errors[self.primary_key].add(codes.PRIMARY_KEY_CHANGED, value=actual)
            return errors
        return None

    def _primary_key_value(self, data: Mapping[str, Any]) -> Any:
        return data.get(self.primary_key)

    def _errors_for_primary_key_insert(self, data: Mapping[str, Any]) -> ErrorSet | None:
        if not self.has_primary_key():
            return None
        return self._errors_for_primary_key_value(self._primary_key_value(data))

    def _errors_for_primary_key_value(self, value: Any) -> ErrorSet | None:
        return (
            self._primary_key_missing_error(value)
            or self._primary_key_invalid_error(value)
            or self._primary_key_empty_error(value)
        )

    def _errors_for_primary_key_query(self, value: Any) -> ErrorSet | None:
        return self._no_primary_key_error() or self._errors_for_primary_key_value(value)

    def _errors_for_primary_key_update(self, data: Mapping[str, Any], value: Any) -> ErrorSet | None:
        # a None id in the payload means "not specified"
        if self._primary_key_value(data) is None:
            return None
        return self._primary_key_changed_error(data, value)

    def _errors_for_primary_key_bulk_update(self, data: Mapping[str, Any]) -> ErrorSet | None:
        """Bulk updates may not name a primary key; several records would share it."""
        if not self.has_primary_key():
            return None
        actual = self._primary_key_value(data)
        if actual is None:
            return None
        errors = ErrorSet()
        errors[self.primary_key].add(codes.PRIMARY_KEY_CHANGED, value=actual)
        return errors

    # -- Unknown fields ----------------------------------------------------

    def _unknown_fields_error(
        self, data: Mapping[str, Any], record: Mapping[str, Any]
    ) -> ErrorSet | None:
        unknown = sorted(key for key in data if key not in record)
        if unknown:
            return ErrorSet().add(codes.UNKNOWN_FIELDS, fields=unknown)
        return None


__all__ = [
    "CollectionValidation",
    "selector_errors",
    "validate_selector",
]
