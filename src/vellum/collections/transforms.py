"""Transforms between stored records and domain entities.

Every collection owns one transform. Writes pass the caller's entity through
``normalize`` to get a string-keyed record; reads pass each stored record
through ``denormalize``.
"""

from __future__ import annotations

import copy
import dataclasses
from collections.abc import Iterable, Mapping
from typing import Any

from vellum.core.errors import AbstractMethodError, CollectionDefinitionError


class BaseTransform:
    """Abstract transform. Subclasses implement both directions."""

    def normalize(self, entity: Any) -> Mapping[str, Any]:
        raise AbstractMethodError(self, "normalize")

    def denormalize(self, record: Mapping[str, Any]) -> Any:
        raise AbstractMethodError(self, "denormalize")

    def chain(self, other: BaseTransform) -> TransformChain:
        """Return a transform applying ``self`` then ``other`` on normalize."""
        return TransformChain(self, other)


class IdentityTransform(BaseTransform):
    """Passes records through unchanged."""

    def normalize(self, entity: Any) -> Any:
        return entity

    def denormalize(self, record: Mapping[str, Any]) -> Any:
        return record


class CopyTransform(BaseTransform):
    """Deep-copies in both directions.

    Callers can mutate what they read, or keep mutating what they wrote,
    without reaching into the backing store.
    """

    def normalize(self, entity: Any) -> Any:
        return copy.deepcopy(entity)

    def denormalize(self, record: Mapping[str, Any]) -> Any:
        return copy.deepcopy(record)


class AttributesTransform(BaseTransform):
    """Maps entities to records using a fixed set of attribute names.

    Parameters:
        entity_class: Class built by ``denormalize`` (called with the
            attributes as keyword arguments)
        attributes: Attribute names to copy. Defaults to the class's
            ``attribute_names``, or its dataclass fields.
    """

    def __init__(self, entity_class: type, attributes: Iterable[str] | None = None):
        self.entity_class = entity_class
        self.attribute_names = tuple(
            attributes if attributes is not None else self._default_attributes(entity_class)
        )

    @staticmethod
    def _default_attributes(entity_class: type) -> tuple[str, ...]:
        names = getattr(entity_class, "attribute_names", None)
        if names is not None:
            return tuple(names)
        if dataclasses.is_dataclass(entity_class):
            return tuple(f.name for f in dataclasses.fields(entity_class))
        raise CollectionDefinitionError(
            f"cannot infer attributes for {entity_class.__name__}; pass attributes explicitly"
        )

    def normalize(self, entity: Any) -> dict[str, Any]:
        if entity is None:
            return {}
        if isinstance(entity, Mapping):
            return {name: entity.get(name) for name in self.attribute_names if name in entity}
        return {name: getattr(entity, name, None) for name in self.attribute_names}

    def denormalize(self, record: Mapping[str, Any]) -> Any:
        record = record or {}
        return self.entity_class(**{name: record.get(name) for name in self.attribute_names})


class TransformChain(BaseTransform):
    """Composes transforms: normalize runs left to right, denormalize right to left."""

    def __init__(self, *transforms: BaseTransform):
        self.transforms: list[BaseTransform] = list(transforms)

    def chain(self, other: BaseTransform) -> TransformChain:
        return TransformChain(*self.transforms, other)

    def normalize(self, entity: Any) -> Any:
        for transform in self.transforms:
            entity = transform.normalize(entity)
        return entity

    def denormalize(self, record: Mapping[str, Any]) -> Any:
        for transform in reversed(self.transforms):
            record = transform.denormalize(record)
        return record


__all__ = [
    "BaseTransform",
    "IdentityTransform",
    "CopyTransform",
    "AttributesTransform",
    "TransformChain",
]
