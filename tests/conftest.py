"""
Shared pytest fixtures for vellum tests.

This module provides:
- Settings isolation (no VELLUM_* leakage from the environment, fresh cache)
- A sample ``books`` dataset and a SimpleCollection over it
- A Repository built on isolated settings
"""

import os

import pytest

from vellum.collections.collection import SimpleCollection
from vellum.collections.repository import Repository
from vellum.core.settings import VellumSettings, clear_settings_cache

BOOKS = [
    {"id": "1", "title": "The Left Hand of Darkness", "author": "Ursula K. Le Guin", "year": 1969, "series": "Hainish"},
    {"id": "2", "title": "The Dispossessed", "author": "Ursula K. Le Guin", "year": 1974, "series": "Hainish"},
    {"id": "3", "title": "Dune", "author": "Frank Herbert", "year": 1965, "series": "Dune"},
    {"id": "4", "title": "Hyperion", "author": "Dan Simmons", "year": 1989},
    {"id": "5", "title": "Children of Dune", "author": "Frank Herbert", "year": 1976, "series": "Dune"},
]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Drop VELLUM_* variables and the cached settings around every test."""
    for key in list(os.environ):
        if key.startswith("VELLUM_"):
            monkeypatch.delenv(key, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings():
    return VellumSettings(_env_file=None)


@pytest.fixture
def books_data():
    return [dict(book) for book in BOOKS]


@pytest.fixture
def books(books_data, settings):
    return SimpleCollection(books_data, "books", settings=settings)


@pytest.fixture
def repository(settings):
    return Repository(settings=settings)
