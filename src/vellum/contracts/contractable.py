"""
Class-level contracts for domain objects.

Mixing in :class:`Contractable` gives every subclass its own
:class:`~vellum.contracts.contract.Contract`, built when the class is
created and chained to the nearest base class's contract. Constraints
declared on an ancestor therefore apply to every descendant, ancestors
first. Each instance can add its own records on top through
``instance.contract``.

Architecture:
    ::

        class Document(Contractable)      Document.contract ─────────┐
            title: present                                           │ parent
        class Report(Document)            Report.contract ◀──────────┘
            author: present                      ▲
                                                 │ parent
        report = Report(...)              report.contract (instance records)

        report.validate()  →  Document records, Report records, instance records

Examples:
    >>> class Document(Contractable):
    ...     def __init__(self, title=None):
    ...         self.title = title
    ...     @classmethod
    ...     def define_contract(cls, contract):
    ...         contract.constrain("title", present=True)
    >>> Document().validate()[0]
    False

Tags:
    contract, mixin, inheritance, entities, vellum
"""

from __future__ import annotations

from typing import Any, ClassVar

from vellum.constraints.accessors import AttributeAccessor
from vellum.contracts.contract import Contract
from vellum.core.error_set import ErrorSet
from vellum.core.protocols import FieldAccessor


class _ContractDescriptor:
    """``Cls.contract`` is the class contract; ``obj.contract`` the instance one."""

    def __get__(self, instance: Any, owner: type) -> Contract:
        class_contract: Contract = owner.__dict__["_class_contract"]
        if instance is None:
            return class_contract

        contract = instance.__dict__.get("_instance_contract")
        if contract is None or contract.parent is not class_contract:
            contract = instance.__dict__["_instance_contract"] = class_contract.extend()
        return contract


class Contractable:
    """Mixin giving a class (and its instances) an inheritable contract.

    Subclasses may define a ``define_contract(cls, contract)`` classmethod;
    it runs once, when the class is created, against that class's own
    contract. Constraints can also be added later through
    ``Cls.contract.constrain(...)``.
    """

    contract_accessor: ClassVar[FieldAccessor] = AttributeAccessor()
    contract = _ContractDescriptor()

    _class_contract: ClassVar[Contract] = Contract(accessor=AttributeAccessor())

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        parent = next(
            base.__dict__["_class_contract"]
            for base in cls.__mro__[1:]
            if "_class_contract" in base.__dict__
        )
        cls._class_contract = Contract(parent=parent, accessor=cls.contract_accessor)

        define = cls.__dict__.get("define_contract")
        if define is not None:
            define.__get__(None, cls)(cls._class_contract)

    def validate(self) -> tuple[bool, ErrorSet]:
        """Match this object against its contract."""
        return self.contract.match(self)

    def is_valid(self) -> bool:
        return self.validate()[0]


__all__ = [
    "Contractable",
]
