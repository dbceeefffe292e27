"""
Unit tests for deep equality and filter matching.

Tests cover:
- Scalar, sequence and mapping equality
- Absent keys vs None
- Literal and containment filters
"""

import pytest

from schemastore.store.equality import UNDEFINED, equal
from schemastore.store.filters import Contains, filter_collection, matches


class TestEqual:
    """Tests for equal()."""

    @pytest.mark.parametrize(
        "a,b",
        [
            (None, None),
            ("varchar", "varchar"),
            (1, 1.0),
            (True, True),
            ([1, [2, 3]], [1, [2, 3]]),
            ((1, 2), [1, 2]),
            ({"a": 1, "b": {"c": [1]}}, {"b": {"c": [1]}, "a": 1}),
            ([{"expression": "id", "isExpression": False}], [{"isExpression": False, "expression": "id"}]),
        ],
    )
    def test_equal(self, a, b):
        """Structurally equal values compare equal."""
        assert equal(a, b)
        assert equal(b, a)

    @pytest.mark.parametrize(
        "a,b",
        [
            (None, 0),
            (None, ""),
            (None, []),
            (True, 1),
            (False, 0),
            ("1", 1),
            ([1, 2], [2, 1]),
            ([1], [1, 1]),
            ({"a": 1}, {"a": 1, "b": 2}),
            ({"a": None}, {}),
            ([], {}),
            ({"a": [1, 2]}, {"a": [1, 3]}),
        ],
    )
    def test_not_equal(self, a, b):
        """Structurally different values compare unequal."""
        assert not equal(a, b)
        assert not equal(b, a)

    def test_undefined(self):
        """UNDEFINED equals only itself."""
        assert equal(UNDEFINED, UNDEFINED)
        assert not equal(UNDEFINED, None)
        assert repr(UNDEFINED) == "UNDEFINED"


class TestMatches:
    """Tests for matches() and filter_collection()."""

    @pytest.fixture
    def index(self):
        return {
            "schema": None,
            "table": "user",
            "name": "user_email_idx",
            "columns": ["email", "tenant_id"],
            "unique": True,
            "where": None,
            "entityType": "index",
        }

    def test_no_filter(self, index):
        """None and empty filters match everything."""
        assert matches(index, None)
        assert matches(index, {})

    def test_literal_constraints(self, index):
        """Literals must deep-equal the field."""
        assert matches(index, {"table": "user", "unique": True})
        assert matches(index, {"columns": ["email", "tenant_id"]})
        assert matches(index, {"schema": None})
        assert not matches(index, {"table": "post"})
        assert not matches(index, {"unique": 1})

    def test_unknown_field(self, index):
        """A constraint on an absent field never matches, even None."""
        assert not matches(index, {"missing": None})

    def test_undefined_is_unconstrained(self, index):
        """UNDEFINED entries are ignored."""
        assert matches(index, {"table": UNDEFINED, "name": "user_email_idx"})

    def test_contains(self, index):
        """Contains matches lists holding an equal element."""
        assert matches(index, {"columns": Contains("email")})
        assert matches(index, {"columns": {"CONTAINS": "tenant_id"}})
        assert not matches(index, {"columns": Contains("id")})

    def test_contains_non_array(self, index):
        """Contains never matches non-list fields."""
        assert not matches(index, {"table": Contains("user")})
        assert not matches(index, {"where": Contains(None)})

    def test_contains_nested(self):
        """Contains compares elements structurally."""
        record = {"columns": [{"expression": "lower(email)", "isExpression": True}]}

        assert matches(record, {"columns": Contains({"isExpression": True, "expression": "lower(email)"})})
        assert not matches(record, {"columns": Contains({"expression": "lower(email)"})})

    def test_filter_collection_order(self):
        """Matching records keep their order."""
        records = [{"name": str(i), "even": i % 2 == 0} for i in range(6)]

        result = filter_collection(records, {"even": True})

        assert [r["name"] for r in result] == ["0", "2", "4"]
