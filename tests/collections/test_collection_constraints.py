"""Tests for vellum.collections.constraints."""

from dataclasses import dataclass

import pytest

from vellum.collections.constraints import (
    DOES_NOT_EXIST_ERROR,
    EXISTS_ERROR,
    NOT_UNIQUE_ERROR,
    ExistsConstraint,
    UniquenessConstraint,
)
from vellum.constraints.accessors import AttributeAccessor
from vellum.contracts.contract import Contract
from vellum.core.errors import InvalidNegationError, InvalidSelectorError


@dataclass
class Book:
    id: str
    title: str


class TestExistsConstraint:
    def test_matches_when_a_record_matches(self, books):
        assert ExistsConstraint(books).match({"author": "Frank Herbert"}) == (True, [])

    def test_fails_when_nothing_matches(self, books):
        ok, errors = ExistsConstraint(books).match({"author": "Nobody"})

        assert not ok
        assert errors == [
            {"type": DOES_NOT_EXIST_ERROR, "params": {"matching": {"author": "Nobody"}}}
        ]

    def test_negated(self, books):
        assert ExistsConstraint(books).negated_match({"author": "Nobody"})[0]

        ok, errors = ExistsConstraint(books).negated_match({"author": "Frank Herbert"})
        assert not ok
        assert errors.includes(EXISTS_ERROR)

    def test_works_on_a_query(self, books):
        recent = books.query().matching({"series": "Dune"})
        assert ExistsConstraint(recent).match({"year": 1976})[0]
        assert not ExistsConstraint(recent).match({"year": 1969})[0]

    def test_invalid_selector_raises(self, books):
        with pytest.raises(InvalidSelectorError):
            ExistsConstraint(books).match(None)

    def test_inside_a_contract(self, books):
        contract = Contract().add_constraint(ExistsConstraint(books), on="filter")

        ok, errors = contract.match({"filter": {"title": "Solaris"}})

        assert not ok
        assert errors.includes({"type": DOES_NOT_EXIST_ERROR, "path": ("filter",)})


class TestUniquenessConstraint:
    def test_new_value_is_unique(self, books):
        assert UniquenessConstraint(books, "title").match({"id": "6", "title": "Solaris"})[0]

    def test_duplicate_value(self, books):
        ok, errors = UniquenessConstraint(books, "title").match({"id": "6", "title": "Dune"})

        assert not ok
        assert errors == [{"type": NOT_UNIQUE_ERROR, "params": {"matching": {"title": "Dune"}}}]

    def test_record_does_not_conflict_with_itself(self, books):
        assert UniquenessConstraint(books, "title").match(books.find("3"))[0]

    def test_entity_without_primary_key_conflicts_with_stored_record(self, books):
        assert not UniquenessConstraint(books, "title").match({"title": "Dune"})[0]

    def test_several_attributes_must_all_match(self, books):
        constraint = UniquenessConstraint(books, "author", "series")

        assert constraint.match({"id": "6", "author": "Frank Herbert", "series": "Hainish"})[0]
        assert not constraint.match({"id": "6", "author": "Frank Herbert", "series": "Dune"})[0]

    def test_attribute_accessor(self, books):
        constraint = UniquenessConstraint(books, "title", accessor=AttributeAccessor())

        assert not constraint.match(Book("6", "Hyperion"))[0]
        assert constraint.match(Book("4", "Hyperion"))[0]

    def test_cannot_be_negated(self, books):
        with pytest.raises(InvalidNegationError):
            UniquenessConstraint(books, "title").negated_match({"title": "Dune"})


class TestUniquenessOfMappingValues:
    @pytest.fixture
    def constraint(self, books):
        books.insert({"id": "6", "title": "Solaris", "meta": {"color": "red"}})
        return UniquenessConstraint(books, "meta")

    def test_equal_mapping_conflicts(self, constraint):
        ok, errors = constraint.match({"id": "7", "meta": {"color": "red"}})

        assert not ok
        assert errors == [
            {"type": NOT_UNIQUE_ERROR, "params": {"matching": {"meta": {"color": "red"}}}}
        ]

    def test_empty_mapping_is_a_value(self, constraint):
        assert constraint.match({"id": "7", "meta": {}}) == (True, [])

    def test_partial_mapping_is_a_different_value(self, constraint):
        assert constraint.match({"id": "7", "meta": {"color": "red", "size": 2}})[0]

    def test_operator_like_keys_are_compared_not_parsed(self, books, constraint):
        assert constraint.match({"id": "7", "meta": {"__raw": 1}}) == (True, [])

        books.insert({"id": "7", "meta": {"__raw": 1}})
        assert not constraint.match({"id": "8", "meta": {"__raw": 1}})[0]

    def test_inside_a_contract(self, books, constraint):
        contract = Contract().add_constraint(constraint)

        assert contract.match({"id": "7", "meta": {"__gt": 0}})[0]
