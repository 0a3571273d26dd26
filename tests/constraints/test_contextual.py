"""Tests for vellum.constraints.contextual and vellum.constraints.accessors."""

from types import SimpleNamespace

import pytest

from vellum.constraints import builtin
from vellum.constraints.accessors import AttributeAccessor, MappingAccessor, dig
from vellum.constraints.builtin import (
    FailureConstraint,
    NilConstraint,
    PresenceConstraint,
    TypeConstraint,
)
from vellum.constraints.contextual import (
    NOT_A_COLLECTION_ERROR,
    ContextualConstraint,
    EachConstraint,
    guards_allow,
    on_value,
)
from vellum.core.error_set import ErrorSet


class TestAccessors:
    def test_mapping_accessor_reads_keys(self):
        accessor = MappingAccessor()
        assert accessor.get({"title": "Dune"}, "title") == "Dune"
        assert accessor.get({"1": "one"}, 1) == "one"
        assert accessor.get({}, "title") is None
        assert accessor.has({"title": None}, "title")
        assert not accessor.has({}, "title")

    def test_mapping_accessor_reads_sequence_indexes(self):
        accessor = MappingAccessor()
        assert accessor.get(["a", "b"], 1) == "b"
        assert accessor.get(["a"], 5) is None
        assert accessor.get("ab", 0) is None

    def test_attribute_accessor(self):
        accessor = AttributeAccessor()
        obj = SimpleNamespace(title="Dune")
        assert accessor.get(obj, "title") == "Dune"
        assert accessor.get(obj, "isbn") is None
        assert accessor.get(obj, 0) is None
        assert accessor.has(obj, "title")

    def test_dig(self):
        record = {"author": {"name": "Frank Herbert"}}
        assert dig(MappingAccessor(), record, ("author", "name")) == (
            record["author"],
            "name",
            "Frank Herbert",
        )

    def test_dig_empty_path(self):
        record = {"title": "Dune"}
        assert dig(MappingAccessor(), record, ()) == (record, None, record)


class TestContextualConstraint:
    def test_extracts_property(self):
        constraint = ContextualConstraint(PresenceConstraint(), property="title")

        assert constraint.match({"title": "Dune"}) == (True, [])
        ok, errors = constraint.match({"title": ""})
        assert not ok
        assert errors == [{"type": builtin.EMPTY_ERROR, "path": ("title",)}]

    def test_missing_property_reads_as_none(self):
        constraint = ContextualConstraint(PresenceConstraint(), property="title")
        assert constraint.match({}) == (False, [{"type": builtin.EMPTY_ERROR, "path": ("title",)}])

    def test_without_property_checks_the_object(self):
        constraint = ContextualConstraint(TypeConstraint(dict))
        assert constraint.match([]) == (False, [{"type": builtin.NOT_KIND_OF_ERROR, "params": {"type": "dict"}}])

    def test_attribute_accessor(self):
        constraint = ContextualConstraint(
            PresenceConstraint(), property="title", accessor=AttributeAccessor()
        )
        assert constraint.match(SimpleNamespace(title="Dune"))[0]
        assert not constraint.match(SimpleNamespace())[0]

    def test_negated_flag(self):
        constraint = ContextualConstraint(NilConstraint(), property="deleted_at", negated=True)

        ok, errors = constraint.match({"deleted_at": None})
        assert not ok
        assert errors == [{"type": builtin.NIL_ERROR, "path": ("deleted_at",)}]

        assert constraint.negated_match({"deleted_at": None}) == (True, [])

    def test_if_guard_skips(self):
        constraint = ContextualConstraint(
            PresenceConstraint(),
            property="body",
            if_=lambda value, key, collection, prop: collection.get("status") == "published",
        )

        assert constraint.match({"status": "draft"}) == (True, [])
        assert not constraint.match({"status": "published"})[0]

    def test_unless_guard_skips(self):
        constraint = ContextualConstraint(
            PresenceConstraint(), property="body", unless=on_value(lambda value: value is None)
        )

        assert constraint.match({"body": None}) == (True, [])
        assert not constraint.match({"body": ""})[0]

    def test_guard_arguments(self):
        calls = []

        def guard(value, key, collection, prop):
            calls.append((value, key, collection, prop))
            return True

        record = {"title": "Dune"}
        ContextualConstraint(PresenceConstraint(), property="title", if_=guard).match(record)

        assert calls == [("Dune", "title", record, "title")]

    def test_writes_under_given_errors(self):
        errors = ErrorSet()
        ContextualConstraint(PresenceConstraint(), property="title").match({}, errors["book"])

        assert errors == [{"type": builtin.EMPTY_ERROR, "path": ("book", "title")}]


class TestGuardsAllow:
    def test_no_guards(self):
        assert guards_allow(None, None, 1, "k", {}, "k")

    def test_if_and_unless(self):
        yes = on_value(lambda value: True)
        no = on_value(lambda value: False)

        assert guards_allow(yes, no, 1, "k", {}, "k")
        assert not guards_allow(no, None, 1, "k", {}, "k")
        assert not guards_allow(None, yes, 1, "k", {}, "k")


class TestEachConstraint:
    def test_every_element_passes(self):
        constraint = EachConstraint(TypeConstraint(str), property="tags")
        assert constraint.match({"tags": ["a", "b"]}) == (True, [])

    def test_failures_nest_under_index(self):
        constraint = EachConstraint(TypeConstraint(str), property="tags")

        ok, errors = constraint.match({"tags": ["a", 2, "c", None]})

        assert not ok
        assert [record.path for record in errors] == [("tags", 1), ("tags", 3)]

    def test_mapping_nests_under_keys(self):
        constraint = EachConstraint(TypeConstraint(int), property="scores")

        ok, errors = constraint.match({"scores": {"math": 90, "art": "A"}})

        assert not ok
        assert errors == [
            {"type": builtin.NOT_KIND_OF_ERROR, "params": {"type": "int"}, "path": ("scores", "art")}
        ]

    def test_tuples_are_collections(self):
        assert EachConstraint(TypeConstraint(int)).match((1, 2))[0]

    @pytest.mark.parametrize("items", [[], {}, ()])
    def test_empty_collection_passes(self, items):
        assert EachConstraint(FailureConstraint(), property="tags").match({"tags": items}) == (True, [])

    @pytest.mark.parametrize("items", [None, "abc", 42, {1, 2}])
    def test_non_collection_fails(self, items):
        ok, errors = EachConstraint(TypeConstraint(str), property="tags").match({"tags": items})

        assert not ok
        assert errors == [{"type": NOT_A_COLLECTION_ERROR, "path": ("tags",)}]

    def test_non_collection_fails_regardless_of_guards(self):
        constraint = EachConstraint(
            TypeConstraint(str), property="tags", if_=on_value(lambda value: False)
        )
        assert not constraint.match({"tags": None})[0]

    def test_guards_skip_elements(self):
        constraint = EachConstraint(
            TypeConstraint(int), property="values", if_=on_value(lambda value: value is not None)
        )

        ok, errors = constraint.match({"values": [1, None, "x"]})

        assert not ok
        assert [record.path for record in errors] == [("values", 2)]

    def test_skipped_elements_do_not_fail(self):
        constraint = EachConstraint(
            FailureConstraint(), property="values", unless=on_value(lambda value: value is None)
        )
        assert constraint.match({"values": [None, None]}) == (True, [])

    def test_element_guard_arguments(self):
        calls = []

        def guard(value, key, collection, prop):
            calls.append((value, key, collection, prop))
            return True

        tags = ["a", "b"]
        EachConstraint(TypeConstraint(str), property="tags", if_=guard).match({"tags": tags})

        assert calls == [("a", 0, tags, "tags"), ("b", 1, tags, "tags")]

    def test_negated_match(self):
        constraint = EachConstraint(NilConstraint())

        ok, errors = constraint.negated_match([1, None])

        assert not ok
        assert errors == [{"type": builtin.NIL_ERROR, "path": (1,)}]

    def test_negated_flag(self):
        constraint = EachConstraint(NilConstraint(), negated=True)
        assert constraint.match([1, 2]) == (True, [])
        assert not constraint.match([None])[0]
