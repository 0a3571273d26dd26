"""
Repository: a group of collections over one shared in-memory data source.

The repository owns the backing lists. Asking for the same collection name
twice returns two collection objects that read and write the same list
(and share the same lock), so a write through one is visible through the
other.

Architecture:
    ::

        Repository
        ├── _data["books"]        ──▶ [ {...}, {...} ]  ◀── collection("books")
        │                                               ◀── collection(Book)
        ├── _locks["books"]       ──▶ RLock
        └── _data["rare_books"]   ──▶ [ ]               ◀── collection(RareBook)

Examples:
    >>> repository = Repository()
    >>> books = repository.collection("books")
    >>> books.insert({"id": "1", "title": "The Dispossessed"})
    >>> repository.collection("books").count()
    1
    >>> repository.collection(RareBook).name
    'rare_books'

Tags:
    repository, collections, memoization, vellum
"""

from __future__ import annotations

import dataclasses
import re
import threading
from typing import Any

from vellum.collections.collection import SimpleCollection
from vellum.collections.transforms import AttributesTransform
from vellum.core.errors import CollectionDefinitionError
from vellum.core.logging import get_logger
from vellum.core.protocols import Transform
from vellum.core.settings import VellumSettings, get_settings

logger = get_logger(__name__)


def underscore(name: str) -> str:
    """``RareBook`` → ``rare_book``; ``HTTPRequest`` → ``http_request``."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    return name.replace("-", "_").lower()


def pluralize(word: str) -> str:
    """English plural for the regular cases collection names need."""
    if re.search(r"[^aeiou]y$", word):
        return word[:-1] + "ies"
    if re.search(r"(s|x|z|ch|sh)$", word):
        return word + "es"
    return word + "s"


def collection_name_for(definition: Any) -> str:
    """Collection name for a string or class definition."""
    if isinstance(definition, str):
        if not definition:
            raise CollectionDefinitionError("collection name can't be empty")
        return definition
    if isinstance(definition, type):
        explicit = getattr(definition, "collection_name", None)
        if explicit:
            return str(explicit)
        return pluralize(underscore(definition.__name__))
    raise CollectionDefinitionError(
        f"expected definition to be a collection name or a class, but was {definition!r}"
    )


def _default_transform(definition: Any) -> Transform | None:
    if not isinstance(definition, type):
        return None
    if hasattr(definition, "attribute_names") or dataclasses.is_dataclass(definition):
        return AttributesTransform(definition)
    return None


class Repository:
    """Builds collections that share backing lists by name.

    Parameters:
        settings: Settings passed to every collection. Defaults to the
            cached :func:`~vellum.core.settings.get_settings` instance.
        data: Initial backing data, keyed by collection name.
    """

    def __init__(
        self,
        settings: VellumSettings | None = None,
        *,
        data: dict[str, list[dict[str, Any]]] | None = None,
    ):
        self.settings = settings or get_settings()
        self._data: dict[str, list[dict[str, Any]]] = data if data is not None else {}
        self._locks: dict[str, Any] = {}
        self._registry_lock = threading.Lock()

    def collection(
        self,
        definition: str | type,
        *,
        name: str | None = None,
        transform: Transform | None = None,
        primary_key: str | bool | None = None,
        primary_key_type: type | tuple[type, ...] | None = None,
        reject_unknown_fields: bool | None = None,
    ) -> SimpleCollection:
        """Build a collection for ``definition``.

        ``definition`` is a name (used verbatim) or a class. For a class the
        name is its ``collection_name`` attribute, or its snake_case plural;
        ``primary_key``/``primary_key_type`` class attributes and dataclass
        fields supply defaults for the matching arguments and the transform.
        """
        collection_name = name or collection_name_for(definition)

        if primary_key is None and isinstance(definition, type):
            primary_key = getattr(definition, "primary_key", None)
        if primary_key_type is None and isinstance(definition, type):
            primary_key_type = getattr(definition, "primary_key_type", None)

        data, lock = self._store(collection_name)
        return SimpleCollection(
            data,
            collection_name,
            lock=lock,
            transform=transform or _default_transform(definition),
            repository=self,
            primary_key=primary_key,
            primary_key_type=primary_key_type,
            reject_unknown_fields=reject_unknown_fields,
            settings=self.settings,
        )

    def _store(self, name: str) -> tuple[list[dict[str, Any]], Any]:
        with self._registry_lock:
            if name not in self._data:
                self._data[name] = []
                logger.debug("store_created", collection=name)
            if name not in self._locks:
                self._locks[name] = threading.RLock() if self.settings.thread_safe else None
            return self._data[name], self._locks[name]

    def collection_names(self) -> list[str]:
        """Names of every store created so far, sorted."""
        return sorted(self._data)

    def data_for(self, name: str) -> list[dict[str, Any]]:
        """The backing list for ``name`` (created empty if needed)."""
        return self._store(name)[0]


__all__ = [
    "Repository",
    "collection_name_for",
    "pluralize",
    "underscore",
]
