"""Contracts: ordered, inheritable sets of constraints."""

from vellum.contracts.contract import ConstraintRecord, Contract
from vellum.contracts.contractable import Contractable

__all__ = [
    "Contract",
    "ConstraintRecord",
    "Contractable",
]
