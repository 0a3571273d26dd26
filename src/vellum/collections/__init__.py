"""Collections: queries, criteria, transforms and the in-memory repository."""

from vellum.collections.collection import (
    BaseCollection,
    MutationResult,
    SimpleCollection,
)
from vellum.collections.constraints import ExistsConstraint, UniquenessConstraint
from vellum.collections.criteria import (
    Criterion,
    LimitCriterion,
    MatchCriterion,
    OffsetCriterion,
    OrderCriterion,
)
from vellum.collections.query import BaseQuery, NullQuery, Query
from vellum.collections.repository import Repository
from vellum.collections.transforms import (
    AttributesTransform,
    BaseTransform,
    CopyTransform,
    IdentityTransform,
    TransformChain,
)

__all__ = [
    "BaseCollection",
    "MutationResult",
    "SimpleCollection",
    "ExistsConstraint",
    "UniquenessConstraint",
    "Criterion",
    "LimitCriterion",
    "MatchCriterion",
    "OffsetCriterion",
    "OrderCriterion",
    "BaseQuery",
    "NullQuery",
    "Query",
    "Repository",
    "AttributesTransform",
    "BaseTransform",
    "CopyTransform",
    "IdentityTransform",
    "TransformChain",
]
