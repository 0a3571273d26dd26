"""
Build constraints from symbolic names and declaration parameters.

This is the vocabulary behind :meth:`Contract.constrain
<vellum.contracts.contract.Contract.constrain>`::

    contract.constrain("title", present=True, type=str)
    contract.constrain("status", equal={"value": "draft", "if": is_new})
    contract.constrain("tags", each={"type": str})

Each declaration value is normalized first:

    ===================  ==========================================
    ``True``             build the constraint
    ``False``            build it negated
    mapping              constraint params plus ``negated``/``if``/``unless``
    anything else        shorthand for ``{"value": <it>}``
    ===================  ==========================================

New names can be added with :func:`register_constraint`.

Tags:
    constraint, builder, registry, vellum
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from vellum.constraints.builtin import (
    BlockConstraint,
    EmptyConstraint,
    EqualityConstraint,
    IdentityConstraint,
    NilConstraint,
    NotNilConstraint,
    PresenceConstraint,
    TypeConstraint,
)
from vellum.constraints.constraint import is_matchable
from vellum.constraints.contextual import EachConstraint
from vellum.core.errors import InvalidConstraintError, UnknownConstraintError
from vellum.core.protocols import Matchable

ConstraintFactory = Callable[[dict[str, Any]], Matchable]

CONSTRAINT_BUILDERS: dict[str, ConstraintFactory] = {}


def register_constraint(name: str) -> Callable[[ConstraintFactory], ConstraintFactory]:
    """Register a factory under ``name`` (decorator)."""

    def decorator(factory: ConstraintFactory) -> ConstraintFactory:
        CONSTRAINT_BUILDERS[name] = factory
        return factory

    return decorator


def normalize_params(params: Any) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split a declaration value into ``(options, constraint_params)``.

    ``options`` always has ``negated``, ``if_`` and ``unless``.
    """
    if params is True or params is False:
        return {"negated": not params, "if_": None, "unless": None}, {}
    if not isinstance(params, Mapping):
        return {"negated": False, "if_": None, "unless": None}, {"value": params}

    params = dict(params)
    if_ = params.pop("if", None)
    if "if_" in params:
        if_ = params.pop("if_")
    options = {
        "negated": bool(params.pop("negated", False)),
        "if_": if_,
        "unless": params.pop("unless", None),
    }
    return options, params


def build_constraint(name: str, params: Mapping[str, Any] | None = None) -> Matchable:
    """Build the constraint registered as ``name``."""
    factory = CONSTRAINT_BUILDERS.get(name)
    if factory is None:
        raise UnknownConstraintError(f'unrecognized constraint type "{name}"').with_context(
            constraint=name
        )
    return factory(dict(params or {}))


def extract_constraint(key: Any, params: Mapping[str, Any]) -> Matchable:
    """Resolve a declaration key to a constraint.

    ``key`` may be a registered name, a constraint (or contract) instance,
    or an object exposing a ``contract``.
    """
    if isinstance(key, str):
        return build_constraint(key, params)
    if is_matchable(key):
        return key
    contract = getattr(key, "contract", None)
    if contract is not None and is_matchable(contract):
        return contract
    raise InvalidConstraintError(f"{key!r} is not a valid constraint")


def _require_value(params: Mapping[str, Any], *keys: str, message: str) -> Any:
    for key in keys:
        if key in params:
            return params[key]
    raise InvalidConstraintError(message)


def _reject_unknown(name: str, params: Mapping[str, Any], *allowed: str) -> None:
    unknown = sorted(set(params) - set(allowed))
    if unknown:
        raise InvalidConstraintError(
            f"unexpected parameters for {name} constraint: {', '.join(unknown)}"
        )


# -- Built-in vocabulary -------------------------------------------------------


@register_constraint("present")
def _build_present(params: dict[str, Any]) -> Matchable:
    _reject_unknown("present", params)
    return PresenceConstraint()


@register_constraint("empty")
def _build_empty(params: dict[str, Any]) -> Matchable:
    _reject_unknown("empty", params)
    return EmptyConstraint()


@register_constraint("nil")
def _build_nil(params: dict[str, Any]) -> Matchable:
    _reject_unknown("nil", params)
    return NilConstraint()


@register_constraint("not_nil")
def _build_not_nil(params: dict[str, Any]) -> Matchable:
    _reject_unknown("not_nil", params)
    return NotNilConstraint()


@register_constraint("type")
def _build_type(params: dict[str, Any]) -> Matchable:
    _reject_unknown("type", params, "type", "value", "allow_nil")
    expected = _require_value(params, "type", "value", message="must set a type")
    types = expected if isinstance(expected, tuple) else (expected,)
    if not types or not all(isinstance(t, type) for t in types):
        raise InvalidConstraintError(f"expected a type, but was {expected!r}")
    return TypeConstraint(expected, allow_nil=bool(params.get("allow_nil", False)))


@register_constraint("equal")
def _build_equal(params: dict[str, Any]) -> Matchable:
    _reject_unknown("equal", params, "to", "value")
    return EqualityConstraint(_require_value(params, "to", "value", message="must set a value to equal"))


@register_constraint("identical")
def _build_identical(params: dict[str, Any]) -> Matchable:
    _reject_unknown("identical", params, "to", "value")
    return IdentityConstraint(
        _require_value(params, "to", "value", message="must set a value to be identical to")
    )


@register_constraint("satisfy")
def _build_satisfy(params: dict[str, Any]) -> Matchable:
    _reject_unknown("satisfy", params, "value", "error")
    predicate = _require_value(params, "value", message="must set a predicate to satisfy")
    if not callable(predicate):
        raise InvalidConstraintError(f"expected a callable predicate, but was {predicate!r}")
    return BlockConstraint(predicate, error=params.get("error"))


@register_constraint("each")
def _build_each(params: dict[str, Any]) -> Matchable:
    if "value" in params:
        _reject_unknown("each", params, "value")
        inner = params["value"]
        if not is_matchable(inner):
            raise InvalidConstraintError(f"expected a constraint for each, but was {inner!r}")
        return EachConstraint(inner)
    if not params:
        raise InvalidConstraintError("must set the constraints to apply to each item")

    from vellum.contracts.contract import Contract

    inner_contract = Contract()
    inner_contract.constrain(params)
    return EachConstraint(inner_contract)


__all__ = [
    "CONSTRAINT_BUILDERS",
    "build_constraint",
    "extract_constraint",
    "normalize_params",
    "register_constraint",
]
