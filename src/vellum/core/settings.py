"""
Environment-driven settings for vellum.

Every knob is read from ``VELLUM_*`` environment variables (or a ``.env``
file) through pydantic-settings and validated once. Repositories accept an
explicit :class:`VellumSettings`; when none is passed they use the cached
instance from :func:`get_settings`.

Examples:
    >>> settings = VellumSettings(default_primary_key="uuid")
    >>> Repository(settings=settings).collection("books").primary_key
    'uuid'

    $ VELLUM_REJECT_UNKNOWN_FIELDS=true python app.py

Tags:
    settings, configuration, pydantic, environment, vellum
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class VellumSettings(BaseSettings):
    """vellum configuration.

    Fields
    ──────
    log_level             : Structlog log level
    log_format            : ``json`` or ``console``
    service_name          : Service name attached to every log event
    default_primary_key   : Primary key for collections that do not name one
    reject_unknown_fields : Reject updates naming fields the record lacks
    thread_safe           : Guard each backing store with a lock
    """

    model_config = SettingsConfigDict(
        env_prefix="VELLUM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: Literal["json", "console"] = Field(default="console")
    service_name: str = Field(default="vellum")

    # ── Collections ──────────────────────────────────────────────
    default_primary_key: str = Field(default="id", min_length=1)
    reject_unknown_fields: bool = Field(
        default=False,
        description="Fail updates that add fields missing from the stored record",
    )
    thread_safe: bool = Field(default=True)

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, VellumSettings] = {}


def get_settings(*, force_reload: bool = False) -> VellumSettings:
    """Load, validate, and cache a :class:`VellumSettings` instance."""
    if not force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = VellumSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = [
    "VellumSettings",
    "get_settings",
    "clear_settings_cache",
]
