"""
vellum: in-memory collections, queries and contract-based validation.

Examples:
    >>> from vellum import Contract, Repository
    >>> books = Repository().collection("books")
    >>> books.insert({"id": "1", "title": "The Dispossessed"})
    MutationResult(ok=True, errors=ErrorSet([]))
    >>> books.matching({"title": "The Dispossessed"}).count()
    1
    >>> contract = Contract().constrain("title", present=True)
    >>> contract.match({"title": ""})[0]
    False
"""

from vellum.collections import (
    AttributesTransform,
    BaseCollection,
    BaseQuery,
    BaseTransform,
    CopyTransform,
    ExistsConstraint,
    IdentityTransform,
    MutationResult,
    NullQuery,
    Query,
    Repository,
    SimpleCollection,
    TransformChain,
    UniquenessConstraint,
)
from vellum.constraints import (
    AttributeAccessor,
    BlockConstraint,
    Constraint,
    ContextualConstraint,
    EachConstraint,
    EmptyConstraint,
    EqualityConstraint,
    FailureConstraint,
    IdentityConstraint,
    MappingAccessor,
    NilConstraint,
    NotNilConstraint,
    PresenceConstraint,
    SuccessConstraint,
    TypeConstraint,
    evaluate,
    on_value,
    register_constraint,
)
from vellum.contracts import ConstraintRecord, Contract, Contractable
from vellum.core import (
    ErrorRecord,
    ErrorSet,
    VellumError,
    VellumSettings,
    configure_logging,
    get_logger,
    get_settings,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # collections
    "AttributesTransform",
    "BaseCollection",
    "BaseQuery",
    "BaseTransform",
    "CopyTransform",
    "ExistsConstraint",
    "IdentityTransform",
    "MutationResult",
    "NullQuery",
    "Query",
    "Repository",
    "SimpleCollection",
    "TransformChain",
    "UniquenessConstraint",
    # constraints
    "AttributeAccessor",
    "BlockConstraint",
    "Constraint",
    "ContextualConstraint",
    "EachConstraint",
    "EmptyConstraint",
    "EqualityConstraint",
    "FailureConstraint",
    "IdentityConstraint",
    "MappingAccessor",
    "NilConstraint",
    "NotNilConstraint",
    "PresenceConstraint",
    "SuccessConstraint",
    "TypeConstraint",
    "evaluate",
    "on_value",
    "register_constraint",
    # contracts
    "ConstraintRecord",
    "Contract",
    "Contractable",
    # core
    "ErrorRecord",
    "ErrorSet",
    "VellumError",
    "VellumSettings",
    "configure_logging",
    "get_logger",
    "get_settings",
]
