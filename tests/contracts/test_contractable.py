"""Tests for vellum.contracts.contractable."""

from dataclasses import dataclass

from vellum.constraints import builtin
from vellum.constraints.accessors import MappingAccessor
from vellum.contracts.contract import Contract
from vellum.contracts.contractable import Contractable


class Document(Contractable):
    def __init__(self, title=None, author=None):
        self.title = title
        self.author = author

    @classmethod
    def define_contract(cls, contract):
        contract.constrain("title", present=True)


class Report(Document):
    @classmethod
    def define_contract(cls, contract):
        contract.constrain("author", present=True)


class Memo(Document):
    pass


@dataclass
class Note(Contractable):
    body: str | None = None

    @classmethod
    def define_contract(cls, contract):
        contract.constrain("body", type=str)


class Preferences(Contractable):
    contract_accessor = MappingAccessor()


class Point(Contractable):
    __slots__ = ("x",)

    def __init__(self, x=None):
        self.x = x

    @classmethod
    def define_contract(cls, contract):
        contract.constrain("x", type=int)


class TestClassContracts:
    def test_class_contract_is_a_contract(self):
        assert isinstance(Document.contract, Contract)

    def test_each_class_gets_its_own_contract(self):
        assert Report.contract is not Document.contract
        assert Memo.contract is not Document.contract

    def test_subclass_chains_to_base(self):
        assert Report.contract.parent is Document.contract
        assert [record.path for record in Report.contract.records] == [("title",), ("author",)]

    def test_subclass_without_declarations_inherits(self):
        assert Memo.contract.own_records == ()
        assert len(Memo.contract.records) == 1

    def test_define_contract_runs_once_per_class(self):
        assert len(Document.contract.own_records) == 1
        assert len(Report.contract.own_records) == 1

    def test_constraints_added_later_reach_subclasses(self):
        class Base(Contractable):
            pass

        class Child(Base):
            pass

        Base.contract.constrain("name", present=True)

        child = Child()
        child.name = ""
        assert not child.is_valid()

    def test_contract_accessor(self):
        Preferences.contract.constrain("debug", type=bool)
        assert isinstance(Preferences.contract.accessor, MappingAccessor)


class TestValidation:
    def test_valid_object(self):
        assert Document(title="Dune").validate() == (True, [])
        assert Document(title="Dune").is_valid()

    def test_invalid_object(self):
        ok, errors = Document().validate()

        assert not ok
        assert errors == [{"type": builtin.EMPTY_ERROR, "path": ("title",)}]

    def test_inherited_constraints_apply_first(self):
        ok, errors = Report().validate()

        assert not ok
        assert [record.path for record in errors] == [("title",), ("author",)]

    def test_base_class_ignores_subclass_constraints(self):
        assert Document(title="Dune").is_valid()
        assert not Report(title="Dune").is_valid()

    def test_dataclass_entities(self):
        assert Note("text").is_valid()
        assert not Note(42).is_valid()
        assert Note(None).validate() == (
            False,
            [{"type": builtin.NOT_KIND_OF_ERROR, "params": {"type": "str"}, "path": ("body",)}],
        )


class TestInstanceContracts:
    def test_instance_contract_extends_class_contract(self):
        document = Document(title="Dune")

        assert document.contract is not Document.contract
        assert document.contract.parent is Document.contract
        assert document.contract is document.contract

    def test_instance_constraints_apply_after_class_constraints(self):
        document = Document()
        document.contract.constrain("author", present=True)

        ok, errors = document.validate()

        assert [record.path for record in errors] == [("title",), ("author",)]

    def test_slotted_subclass(self):
        point = Point(1)

        assert point.contract is point.contract
        assert point.contract.parent is Point.contract
        assert point.is_valid()
        assert not Point("1").is_valid()

    def test_instance_constraints_are_not_shared(self):
        first = Document(title="Dune")
        first.contract.constrain("author", present=True)

        assert not first.is_valid()
        assert Document(title="Dune").is_valid()
        assert len(Document.contract.records) == 1


class TestContractableAsConstraint:
    def test_class_used_as_constraint_key(self):
        contract = Contract().constrain("document", {Document: True})

        assert contract.match({"document": Document(title="Dune")})[0]

        ok, errors = contract.match({"document": Document()})
        assert errors == [{"type": builtin.EMPTY_ERROR, "path": ("document", "title")}]
