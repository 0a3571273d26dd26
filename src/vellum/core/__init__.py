"""Core building blocks: errors, error sets, logging, settings and protocols."""

from vellum.core.error_set import ErrorRecord, ErrorSet
from vellum.core.errors import (
    AbstractMethodError,
    CollectionDefinitionError,
    CollectionError,
    ConfigError,
    ConstraintError,
    EmptyConstraintsError,
    ErrorCategory,
    ErrorContext,
    InvalidConstraintError,
    InvalidNegationError,
    InvalidSelectorError,
    QueryError,
    UnknownConstraintError,
    VellumError,
)
from vellum.core.logging import LogContext, configure_logging, get_logger
from vellum.core.settings import VellumSettings, clear_settings_cache, get_settings

__all__ = [
    "ErrorRecord",
    "ErrorSet",
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
    "LogContext",
    "configure_logging",
    "get_logger",
    "VellumSettings",
    "get_settings",
    "clear_settings_cache",
]
