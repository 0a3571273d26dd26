"""
Collections: named, validated, transform-aware access to a backing store.

A collection pairs a query factory with three mutations. Every mutation
validates its input first and returns a :class:`MutationResult`; the
backing store is only touched once validation has passed. Expected failures
(missing payload, duplicate id, unknown record) come back as an ErrorSet,
never as an exception.

Manifesto:
    - **Validate before side effects:** A rejected write leaves the store as it was
    - **Return, don't raise:** ``(ok, errors)`` for data problems
    - **Copy on write:** Updates replace the stored record with a merged copy
    - **Pluggable stores:** Subclasses implement seven hooks, nothing else

Architecture:
    ::

        ┌────────────────────────────────────────────────────────────────┐
        │                        BaseCollection                           │
        │                                                                 │
        │  insert(entity)          normalize → data checks → pk checks    │
        │                          → _insert_one(record)                  │
        │  update(id, attributes)  pk checks → data checks → pk changed   │
        │                          → _update_one(id, changes)             │
        │  delete(id)              pk checks → _delete_one(id)            │
        │  update_matching(selector, attributes)                          │
        │                          selector checks → data checks          │
        │                          → _update_matching(selector, changes)  │
        │  delete_matching(selector)                                      │
        │                          selector checks → _delete_matching(..) │
        │  delete_all()            _clear_collection()                    │
        │                                                                 │
        │  query() / find / matching / count / to_list / pluck ...        │
        │                          → base_query() → Query                 │
        └────────────────────────────────────────────────────────────────┘
                                     ▲
                                     │
                            SimpleCollection (list of dicts)

Examples:
    >>> books = SimpleCollection([], name="books")
    >>> books.insert({"id": "1", "title": "A"})
    MutationResult(ok=True, errors=ErrorSet([]))
    >>> books.insert({"id": "1", "title": "B"}).ok
    False
    >>> books.update("1", {"title": "C"}) == (True, [])
    True
    >>> books.find("1")["title"]
    'C'

Guardrails:
    ❌ DON'T: Mutate a record returned by ``find`` expecting it to persist
    ✅ DO: Call ``update`` (stored records are replaced, not edited in place)

Tags:
    collection, repository, validation, primary-key, vellum
"""

from __future__ import annotations

import contextlib
import threading
import weakref
from collections.abc import Callable, Iterator, Mapping
from typing import TYPE_CHECKING, Any, NamedTuple

from vellum.collections import errors as codes
from vellum.collections.criteria import MatchCriterion
from vellum.collections.query import BaseQuery, NullQuery, Query
from vellum.collections.transforms import IdentityTransform
from vellum.collections.validation import CollectionValidation, selector_errors
from vellum.core.error_set import ErrorSet
from vellum.core.errors import AbstractMethodError, CollectionDefinitionError
from vellum.core.logging import get_logger
from vellum.core.protocols import Transform
from vellum.core.settings import VellumSettings, get_settings

if TYPE_CHECKING:
    from vellum.collections.repository import Repository

logger = get_logger(__name__)


class MutationResult(NamedTuple):
    """Outcome of a collection mutation.

    Unpacks as ``ok, errors = collection.insert(...)`` and compares equal to
    plain tuples, so ``result == (True, [])`` holds for a clean success.
    """

    ok: bool
    errors: ErrorSet


def normalize_keys(data: Mapping[Any, Any]) -> dict[str, Any]:
    """Copy ``data`` with every mapping key (at any depth) converted to ``str``."""
    return {
        str(key): normalize_keys(value) if isinstance(value, Mapping) else value
        for key, value in data.items()
    }


class BaseCollection(CollectionValidation):
    """Abstract collection.

    Parameters:
        name: Collection name. May be left unset and assigned once later.
        transform: Maps entities to stored records and back. Defaults to
            :class:`IdentityTransform`.
        repository: Owning repository (held weakly).
        primary_key: Primary key field. ``None`` uses the configured
            default, ``False`` means the collection has no primary key.
        primary_key_type: Type (or tuple of types) primary key values must
            be instances of. Defaults to ``str``.
        reject_unknown_fields: Fail updates naming fields the stored record
            does not have. Defaults to the configured value.
        settings: Settings to read defaults from.
    """

    def __init__(
        self,
        name: str | None = None,
        *,
        transform: Transform | None = None,
        repository: Repository | None = None,
        primary_key: str | bool | None = None,
        primary_key_type: type | tuple[type, ...] | None = None,
        reject_unknown_fields: bool | None = None,
        settings: VellumSettings | None = None,
    ):
        self._settings = settings or get_settings()
        self._name: str | None = None
        if name is not None:
            self.name = name

        self.transform: Transform = transform or IdentityTransform()
        self._repository = weakref.ref(repository) if repository is not None else None

        self.primary_key = self._normalize_primary_key(primary_key)
        self.primary_key_type = primary_key_type or str
        self.reject_unknown_fields = (
            self._settings.reject_unknown_fields
            if reject_unknown_fields is None
            else reject_unknown_fields
        )
        self._lock: Any = None

    def _normalize_primary_key(self, value: str | bool | None) -> str | None:
        if value is None or value is True:
            return self._settings.default_primary_key
        if value is False:
            return None
        if isinstance(value, str) and value:
            return value
        raise CollectionDefinitionError(
            f"expected primary key to be a string or False, but was {value!r}"
        )

    # -- Identity ----------------------------------------------------------

    @property
    def name(self) -> str | None:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        if self._name is not None:
            raise CollectionDefinitionError(
                f"collection name is already set to {self._name!r}"
            ).with_context(collection=self._name, operation="name")
        if not isinstance(value, str) or not value:
            raise CollectionDefinitionError(f"expected name to be a non-empty string, but was {value!r}")
        self._name = value

    @property
    def repository(self) -> Repository | None:
        return self._repository() if self._repository is not None else None

    def _locked(self) -> Any:
        return self._lock if self._lock is not None else contextlib.nullcontext()

    # -- Mutations ---------------------------------------------------------

    def insert(self, entity: Any) -> MutationResult:
        """Validate and store one entity (or attribute mapping)."""
        data = entity if entity is None else self.transform.normalize(entity)

        errors = self._errors_for_data(data)
        if errors is None:
            data = normalize_keys(data)
            errors = self._errors_for_primary_key_insert(data)
        if errors is not None:
            return self._rejected("insert_rejected", errors)

        with self._locked():
            errors = self._insert_one(data)
        if errors:
            return self._rejected("insert_rejected", errors)

        logger.debug("record_inserted", collection=self.name, primary_key=self._log_key(data))
        return MutationResult(True, ErrorSet())

    def update(self, primary_key: Any, attributes: Any) -> MutationResult:
        """Merge ``attributes`` into the record identified by ``primary_key``."""
        errors = (
            self._errors_for_primary_key_query(primary_key)
            or self._data_missing_error(attributes)
            or self._data_invalid_error(attributes)
        )
        changes: dict[str, Any] = {}
        if errors is None:
            data = normalize_keys(attributes)
            errors = self._errors_for_primary_key_update(data, primary_key)
            changes = {key: value for key, value in data.items() if key != self.primary_key}
            errors = errors or self._data_empty_error(changes)
        if errors is not None:
            return self._rejected("update_rejected", errors, primary_key=primary_key)

        with self._locked():
            errors = self._update_one(primary_key, changes)
        if errors:
            return self._rejected("update_rejected", errors, primary_key=primary_key)

        logger.debug(
            "record_updated", collection=self.name, primary_key=primary_key, fields=sorted(changes)
        )
        return MutationResult(True, ErrorSet())

    def delete(self, primary_key: Any) -> MutationResult:
        """Remove the one record identified by ``primary_key``."""
        errors = self._errors_for_primary_key_query(primary_key)
        if errors is not None:
            return self._rejected("delete_rejected", errors, primary_key=primary_key)

        with self._locked():
            errors = self._delete_one(primary_key)
        if errors:
            return self._rejected("delete_rejected", errors, primary_key=primary_key)

        logger.debug("record_deleted", collection=self.name, primary_key=primary_key)
        return MutationResult(True, ErrorSet())

    def update_matching(self, selector: Any, attributes: Any) -> MutationResult:
        """Merge ``attributes`` into every record matching ``selector``.

        The payload may not name a primary key. Matching no records is a
        success. Unknown selector operators raise, as in :meth:`matching`.
        """
        errors = (
            selector_errors(selector)
            or self._data_missing_error(attributes)
            or self._data_invalid_error(attributes)
        )
        changes: dict[str, Any] = {}
        if errors is None:
            data = normalize_keys(attributes)
            changes = {key: value for key, value in data.items() if key != self.primary_key}
            errors = self._errors_for_primary_key_bulk_update(data) or self._data_empty_error(changes)
        if errors is not None:
            return self._rejected("update_matching_rejected", errors)

        with self._locked():
            errors = self._update_matching(selector, changes)
        if errors:
            return self._rejected("update_matching_rejected", errors)

        logger.debug(
            "records_updated", collection=self.name, selector=dict(selector), fields=sorted(changes)
        )
        return MutationResult(True, ErrorSet())

    def delete_matching(self, selector: Any) -> MutationResult:
        """Remove every record matching ``selector``."""
        errors = selector_errors(selector)
        if errors is not None:
            return self._rejected("delete_matching_rejected", errors)

        with self._locked():
            errors = self._delete_matching(selector)
        if errors:
            return self._rejected("delete_matching_rejected", errors)

        logger.debug("records_deleted", collection=self.name, selector=dict(selector))
        return MutationResult(True, ErrorSet())

    def delete_all(self) -> MutationResult:
        """Remove every record. Always succeeds."""
        with self._locked():
            self._clear_collection()
        logger.debug("collection_cleared", collection=self.name)
        return MutationResult(True, ErrorSet())

    def _rejected(self, event: str, errors: ErrorSet, **fields: Any) -> MutationResult:
        logger.debug(event, collection=self.name, error_count=errors.count(), **fields)
        return MutationResult(False, errors)

    def _log_key(self, data: Mapping[str, Any]) -> Any:
        return data.get(self.primary_key) if self.primary_key else None

    def _not_found_error(self, primary_key: Any) -> ErrorSet:
        errors = ErrorSet()
        errors[self.primary_key].add(codes.RECORD_NOT_FOUND, value=primary_key)
        return errors

    def _already_exists_error(self, primary_key: Any) -> ErrorSet:
        errors = ErrorSet()
        errors[self.primary_key].add(codes.RECORD_ALREADY_EXISTS, value=primary_key)
        return errors

    # -- Reads -------------------------------------------------------------

    def query(self) -> BaseQuery:
        """A fresh query over every record."""
        return self.base_query()

    def all(self) -> BaseQuery:
        return self.query()

    def find(self, primary_key: Any) -> Any:
        """The entity with the given primary key, or None."""
        if not self.has_primary_key():
            raise CollectionDefinitionError(
                "cannot find by primary key in a collection without one"
            ).with_context(collection=self.name, operation="find")
        return self.query().matching({self.primary_key: primary_key}).one()

    def matching(self, selector: Mapping[str, Any]) -> BaseQuery:
        return self.query().matching(selector)

    def where(self, selector: Mapping[str, Any]) -> BaseQuery:
        return self.matching(selector)

    def count(self) -> int:
        return self.query().count()

    def to_list(self) -> list[Any]:
        return self.query().to_list()

    def __iter__(self) -> Iterator[Any]:
        return iter(self.query())

    def each(self, callback: Callable[[Any], Any] | None = None) -> Iterator[Any] | None:
        return self.query().each(callback)

    def exists(self) -> bool:
        return self.query().exists()

    def pluck(self, field: str) -> list[Any]:
        return self.query().pluck(field)

    def none(self) -> NullQuery:
        return NullQuery()

    # -- Store hooks -------------------------------------------------------

    def base_query(self) -> BaseQuery:
        raise AbstractMethodError(self, "base_query")

    def _insert_one(self, record: dict[str, Any]) -> ErrorSet:
        raise AbstractMethodError(self, "insert_one")

    def _update_one(self, primary_key: Any, changes: dict[str, Any]) -> ErrorSet:
        raise AbstractMethodError(self, "update_one")

    def _delete_one(self, primary_key: Any) -> ErrorSet:
        raise AbstractMethodError(self, "delete_one")

    def _update_matching(self, selector: Mapping[str, Any], changes: dict[str, Any]) -> ErrorSet:
        raise AbstractMethodError(self, "update_matching")

    def _delete_matching(self, selector: Mapping[str, Any]) -> ErrorSet:
        raise AbstractMethodError(self, "delete_matching")

    def _clear_collection(self) -> None:
        raise AbstractMethodError(self, "clear_collection")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, primary_key={self.primary_key!r})"


class SimpleCollection(BaseCollection):
    """Collection over an in-memory list of string-keyed dicts.

    Parameters:
        data: Backing list, shared with the repository and every other
            collection built for the same name. Defaults to a new list.
        lock: Lock guarding ``data``. Defaults to a new ``RLock`` when the
            settings enable ``thread_safe``.
    """

    def __init__(
        self,
        data: list[dict[str, Any]] | None = None,
        name: str | None = None,
        *,
        lock: Any = None,
        **kwargs: Any,
    ):
        super().__init__(name, **kwargs)
        self._data: list[dict[str, Any]] = data if data is not None else []
        if lock is None and self._settings.thread_safe:
            lock = threading.RLock()
        self._lock = lock

    @property
    def data(self) -> list[dict[str, Any]]:
        return self._data

    def base_query(self) -> Query:
        return Query(self._data, transform=self.transform, lock=self._lock)

    def _index_of(self, primary_key: Any) -> int | None:
        for index, record in enumerate(self._data):
            if record.get(self.primary_key) == primary_key:
                return index
        return None

    def _insert_one(self, record: dict[str, Any]) -> ErrorSet:
        if self.has_primary_key():
            value = record[self.primary_key]
            if self._index_of(value) is not None:
                return self._already_exists_error(value)
        self._data.append(record)
        return ErrorSet()

    def _update_one(self, primary_key: Any, changes: dict[str, Any]) -> ErrorSet:
        index = self._index_of(primary_key)
        if index is None:
            return self._not_found_error(primary_key)

        current = self._data[index]
        if self.reject_unknown_fields:
            errors = self._unknown_fields_error(changes, current)
            if errors is not None:
                return errors

        self._data[index] = {**current, **changes}
        return ErrorSet()

    def _delete_one(self, primary_key: Any) -> ErrorSet:
        index = self._index_of(primary_key)
        if index is None:
            return self._not_found_error(primary_key)
        del self._data[index]
        return ErrorSet()

    def _matching_indices(self, selector: Mapping[str, Any]) -> list[int]:
        criterion = MatchCriterion(selector)
        return [index for index, record in enumerate(self._data) if criterion.matches(record)]

    def _update_matching(self, selector: Mapping[str, Any], changes: dict[str, Any]) -> ErrorSet:
        indices = self._matching_indices(selector)
        if self.reject_unknown_fields:
            for index in indices:
                errors = self._unknown_fields_error(changes, self._data[index])
                if errors is not None:
                    return errors

        for index in indices:
            self._data[index] = {**self._data[index], **changes}
        return ErrorSet()

    def _delete_matching(self, selector: Mapping[str, Any]) -> ErrorSet:
        criterion = MatchCriterion(selector)
        # in place; the list is shared with the repository
        self._data[:] = [record for record in self._data if not criterion.matches(record)]
        return ErrorSet()

    def _clear_collection(self) -> None:
        self._data.clear()


__all__ = [
    "MutationResult",
    "BaseCollection",
    "SimpleCollection",
    "normalize_keys",
]
