"""Error type codes reported by collections and queries.

These are returned inside an :class:`~vellum.core.error_set.ErrorSet`,
never raised.
"""

from __future__ import annotations

_PREFIX = "vellum.collections.errors"

# Payload errors
DATA_EMPTY = f"{_PREFIX}.data_empty"
DATA_INVALID = f"{_PREFIX}.data_invalid"
DATA_MISSING = f"{_PREFIX}.data_missing"
UNKNOWN_FIELDS = f"{_PREFIX}.unknown_fields"

# Primary key errors, nested under the primary key
NO_PRIMARY_KEY = f"{_PREFIX}.no_primary_key"
PRIMARY_KEY_CHANGED = f"{_PREFIX}.primary_key_changed"
PRIMARY_KEY_EMPTY = f"{_PREFIX}.primary_key_empty"
PRIMARY_KEY_INVALID = f"{_PREFIX}.primary_key_invalid"
PRIMARY_KEY_MISSING = f"{_PREFIX}.primary_key_missing"

# Store errors
RECORD_ALREADY_EXISTS = f"{_PREFIX}.record_already_exists"
RECORD_NOT_FOUND = f"{_PREFIX}.record_not_found"

# Selector errors
SELECTOR_INVALID = f"{_PREFIX}.selector_invalid"
SELECTOR_MISSING = f"{_PREFIX}.selector_missing"


__all__ = [
    "DATA_EMPTY",
    "DATA_INVALID",
    "DATA_MISSING",
    "UNKNOWN_FIELDS",
    "NO_PRIMARY_KEY",
    "PRIMARY_KEY_CHANGED",
    "PRIMARY_KEY_EMPTY",
    "PRIMARY_KEY_INVALID",
    "PRIMARY_KEY_MISSING",
    "RECORD_ALREADY_EXISTS",
    "RECORD_NOT_FOUND",
    "SELECTOR_INVALID",
    "SELECTOR_MISSING",
]
