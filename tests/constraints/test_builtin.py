"""Tests for vellum.constraints.builtin and vellum.constraints.constraint."""

import pytest

from vellum.constraints import builtin
from vellum.constraints.builtin import (
    BlockConstraint,
    EmptyConstraint,
    EqualityConstraint,
    FailureConstraint,
    IdentityConstraint,
    NilConstraint,
    NotNilConstraint,
    PresenceConstraint,
    SuccessConstraint,
    TypeConstraint,
    is_empty_value,
)
from vellum.constraints.constraint import Constraint, evaluate, is_matchable
from vellum.core.error_set import ErrorSet
from vellum.core.errors import AbstractMethodError, InvalidNegationError

SAMPLES = [None, "", "text", 0, 42, [], [1], {}, {"a": 1}, set(), object()]


class TestErrorVocabulary:
    """Each constraint reports its own error type in each direction."""

    @pytest.mark.parametrize(
        "constraint, failing, match_error, negated_failing, negated_error",
        [
            (NilConstraint(), "x", builtin.NOT_NIL_ERROR, None, builtin.NIL_ERROR),
            (NotNilConstraint(), None, builtin.NIL_ERROR, "x", builtin.NOT_NIL_ERROR),
            (PresenceConstraint(), "", builtin.EMPTY_ERROR, "x", builtin.NOT_EMPTY_ERROR),
            (EmptyConstraint(), "x", builtin.NOT_EMPTY_ERROR, [], builtin.EMPTY_ERROR),
            (EqualityConstraint(1), 2, builtin.NOT_EQUAL_TO_ERROR, 1, builtin.EQUAL_TO_ERROR),
            (TypeConstraint(str), 1, builtin.NOT_KIND_OF_ERROR, "x", builtin.KIND_OF_ERROR),
            (
                BlockConstraint(bool),
                0,
                builtin.NOT_SATISFY_BLOCK_ERROR,
                1,
                builtin.SATISFY_BLOCK_ERROR,
            ),
        ],
    )
    def test_error_types(self, constraint, failing, match_error, negated_failing, negated_error):
        ok, errors = constraint.match(failing)
        assert not ok
        assert [record.type for record in errors] == [match_error]

        ok, errors = constraint.negated_match(negated_failing)
        assert not ok
        assert [record.type for record in errors] == [negated_error]

    def test_success_returns_empty_errors(self):
        assert NilConstraint().match(None) == (True, [])
        assert NilConstraint().negated_match("x") == (True, [])


class TestNegationDuality:
    """negated_match succeeds exactly when match fails."""

    @pytest.mark.parametrize(
        "constraint",
        [
            NilConstraint(),
            NotNilConstraint(),
            PresenceConstraint(),
            EmptyConstraint(),
            EqualityConstraint(0),
            IdentityConstraint(None),
            TypeConstraint((list, dict)),
            TypeConstraint(str, allow_nil=True),
            BlockConstraint(lambda value: value == 42),
            FailureConstraint(),
        ],
    )
    def test_duality(self, constraint):
        for value in SAMPLES:
            assert constraint.match(value)[0] != constraint.negated_match(value)[0]


class TestPresenceAndEmptiness:
    @pytest.mark.parametrize("value", [None, "", [], {}, set(), ()])
    def test_blank_values_are_not_present(self, value):
        assert not PresenceConstraint().match(value)[0]
        assert EmptyConstraint().match(value)[0]

    @pytest.mark.parametrize("value", ["x", 0, False, [0], object()])
    def test_other_values_are_present(self, value):
        assert PresenceConstraint().match(value)[0]

    def test_is_empty_value(self):
        assert is_empty_value("")
        assert not is_empty_value(0)
        assert not is_empty_value(None)
        assert not is_empty_value(object())


class TestValueConstraints:
    def test_equality_params(self):
        ok, errors = EqualityConstraint("draft").match("published")
        assert errors == [{"type": builtin.NOT_EQUAL_TO_ERROR, "params": {"value": "draft"}}]

    def test_identity_distinguishes_equal_objects(self):
        expected = [1, 2]
        assert IdentityConstraint(expected).match(expected)[0]
        assert not IdentityConstraint(expected).match([1, 2])[0]

    def test_identity_params(self):
        ok, errors = IdentityConstraint("x").negated_match("x")
        assert errors == [{"type": builtin.IDENTICAL_TO_ERROR, "params": {"value": "x"}}]

    def test_type_params(self):
        ok, errors = TypeConstraint(int).match("1")
        assert errors == [{"type": builtin.NOT_KIND_OF_ERROR, "params": {"type": "int"}}]

    def test_type_tuple_params(self):
        ok, errors = TypeConstraint((int, float)).match("1")
        assert errors.includes({"params": {"type": "int | float"}, "type": builtin.NOT_KIND_OF_ERROR})

    def test_type_allow_nil(self):
        assert TypeConstraint(str, allow_nil=True).match(None)[0]
        assert not TypeConstraint(str).match(None)[0]

    def test_type_accepts_subclasses(self):
        assert TypeConstraint(int).match(True)[0]


class TestBlockConstraint:
    def test_custom_error_replaces_both_types(self):
        constraint = BlockConstraint(lambda value: value > 0, error="must_be_positive")

        assert constraint.match(-1)[1] == ["must_be_positive"]
        assert constraint.negated_match(1)[1] == ["must_be_positive"]


class TestSuccessAndFailure:
    def test_success_always_matches(self):
        assert SuccessConstraint().match(None) == (True, [])

    def test_success_cannot_be_negated(self):
        with pytest.raises(InvalidNegationError):
            SuccessConstraint().negated_match(None)

    def test_failure(self):
        assert FailureConstraint().match("anything") == (False, [builtin.INVALID_ERROR])
        assert FailureConstraint().negated_match("anything") == (True, [])


class TestEvaluate:
    def test_writes_into_given_view(self):
        errors = ErrorSet()
        ok, returned = evaluate(PresenceConstraint(), "", errors=errors["title"])

        assert not ok
        assert errors == [{"type": builtin.EMPTY_ERROR, "path": ("title",)}]
        assert returned.path == ("title",)

    def test_negated(self):
        assert evaluate(NilConstraint(), "x", negated=True) == (True, [])


class TestConstraintBase:
    def test_matches_object_is_abstract(self):
        with pytest.raises(AbstractMethodError):
            Constraint().match("x")

    def test_is_matchable(self):
        assert is_matchable(NilConstraint())
        assert not is_matchable(NilConstraint)
        assert not is_matchable("present")

    def test_constraints_are_immutable(self):
        constraint = EqualityConstraint(1)
        with pytest.raises(AttributeError):
            constraint.value = 2

    def test_constraints_compare_by_value(self):
        assert EqualityConstraint(1) == EqualityConstraint(1)
        assert TypeConstraint(str) != TypeConstraint(int)
